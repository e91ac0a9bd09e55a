import uuid
from ..extensions import db


def new_id():
    return str(uuid.uuid4())


class TimestampMixin:
    created_at = db.Column("createdAt", db.DateTime, server_default=db.func.now(), nullable=False)
    updated_at = db.Column("updatedAt", db.DateTime, server_default=db.func.now(), onupdate=db.func.now(), nullable=False)
