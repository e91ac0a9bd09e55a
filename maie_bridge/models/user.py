from ..extensions import db
from .base import TimestampMixin, new_id

class User(db.Model, TimestampMixin):
    __tablename__ = "users"
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    username = db.Column(db.String(150), unique=True, nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)

    # rows are removed by the database (ON DELETE CASCADE)
    templates = db.relationship("Template", back_populates="owner", cascade="all, delete-orphan", passive_deletes=True)
