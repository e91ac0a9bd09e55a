from ..extensions import db
from .base import TimestampMixin, new_id

class ProcessingResult(db.Model, TimestampMixin):
    __tablename__ = "processing_results"
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    maie_task_id = db.Column("maieTaskId", db.String(64), unique=True, nullable=True)
    # raw MAIE label, e.g. PROCESSING_ASR
    maie_status = db.Column("maieStatus", db.String(32), nullable=True)
    # local lifecycle: pending -> processing -> completed | failed
    status = db.Column(db.String(20), nullable=False, default="pending")
    source_kind = db.Column("sourceKind", db.String(10), nullable=False, default="audio")  # audio/text
    source_name = db.Column("sourceName", db.String(255), nullable=True)
    template_id = db.Column("templateId", db.String(64), nullable=True)
    title = db.Column(db.String(255), nullable=True, index=True)
    summary_preview = db.Column("summaryPreview", db.String(200), nullable=True)
    summary = db.Column(db.JSON, nullable=True)
    transcript = db.Column(db.Text, nullable=True)
    tags = db.Column(db.JSON, nullable=True)
    confidence = db.Column(db.Float, nullable=True)
    processing_time = db.Column("processingTime", db.Float, nullable=True)
    audio_duration = db.Column("audioDuration", db.Float, nullable=True)
    rtf = db.Column(db.Float, nullable=True)
    error_message = db.Column("errorMessage", db.Text, nullable=True)
    error_code = db.Column("errorCode", db.String(64), nullable=True)
    uploaded_by_id = db.Column("uploadedById", db.String(36), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    processed_at = db.Column("processedAt", db.DateTime, nullable=True)

    TERMINAL_STATUSES = ("completed", "failed")

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES
