from ..extensions import db
from .base import TimestampMixin, new_id

OWNER_TYPES = ("user", "system")

class Template(db.Model, TimestampMixin):
    __tablename__ = "templates"
    __table_args__ = (db.Index("templates_ownerId_idx", "ownerId"),)
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)
    content = db.Column(db.Text, nullable=False)
    # "system" templates have no owner
    owner_type = db.Column("ownerType", db.String(20), nullable=False, default="user")
    owner_id = db.Column("ownerId", db.String(36), db.ForeignKey("users.id", ondelete="CASCADE", onupdate="CASCADE"), nullable=True)

    owner = db.relationship("User", back_populates="templates")
