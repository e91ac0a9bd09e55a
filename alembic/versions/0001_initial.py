"""users, templates and processing_results

Revision ID: 0001_initial
Revises: None
Create Date: 2025-10-15 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("createdAt", sa.DateTime, server_default=sa.func.current_timestamp(), nullable=False),
        sa.Column("updatedAt", sa.DateTime, server_default=sa.func.current_timestamp(), nullable=False),
    ]


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)

    # create only what is missing so the migration can be re-run
    if not insp.has_table("users"):
        op.create_table(
            "users",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("username", sa.String(150), nullable=False, unique=True),
            sa.Column("email", sa.String(255), nullable=False, unique=True),
            *_timestamps(),
        )

    if not insp.has_table("templates"):
        op.create_table(
            "templates",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("content", sa.Text, nullable=False),
            sa.Column("ownerType", sa.String(20), nullable=False),
            sa.Column("ownerId", sa.String(36),
                      sa.ForeignKey("users.id", ondelete="CASCADE", onupdate="CASCADE"), nullable=True),
            *_timestamps(),
        )
        op.create_index("templates_ownerId_idx", "templates", ["ownerId"])

    if not insp.has_table("processing_results"):
        op.create_table(
            "processing_results",
            sa.Column("id", sa.String(36), primary_key=True),
            sa.Column("maieTaskId", sa.String(64), nullable=True, unique=True),
            sa.Column("maieStatus", sa.String(32), nullable=True),
            sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
            sa.Column("sourceKind", sa.String(10), nullable=False, server_default="audio"),
            sa.Column("sourceName", sa.String(255), nullable=True),
            sa.Column("templateId", sa.String(64), nullable=True),
            sa.Column("title", sa.String(255), nullable=True),
            sa.Column("summaryPreview", sa.String(200), nullable=True),
            sa.Column("summary", sa.JSON, nullable=True),
            sa.Column("transcript", sa.Text, nullable=True),
            sa.Column("tags", sa.JSON, nullable=True),
            sa.Column("confidence", sa.Float, nullable=True),
            sa.Column("processingTime", sa.Float, nullable=True),
            sa.Column("audioDuration", sa.Float, nullable=True),
            sa.Column("rtf", sa.Float, nullable=True),
            sa.Column("errorMessage", sa.Text, nullable=True),
            sa.Column("errorCode", sa.String(64), nullable=True),
            sa.Column("uploadedById", sa.String(36),
                      sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
            sa.Column("processedAt", sa.DateTime, nullable=True),
            *_timestamps(),
        )
        op.create_index("ix_processing_results_title", "processing_results", ["title"])
        op.create_index("ix_processing_results_uploadedById", "processing_results", ["uploadedById"])


def downgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    for name in ("processing_results", "templates", "users"):
        if insp.has_table(name):
            op.drop_table(name)
