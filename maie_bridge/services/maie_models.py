"""
Data models for MAIE task submission and status polling.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class MaieStatus(Enum):
    """Status of a MAIE task."""
    PENDING = "PENDING"
    PREPROCESSING = "PREPROCESSING"
    PROCESSING_ASR = "PROCESSING_ASR"
    PROCESSING_LLM = "PROCESSING_LLM"
    COMPLETE = "COMPLETE"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (MaieStatus.COMPLETE, MaieStatus.FAILED)


# FAILED is 100 because no further progress is expected, not because it succeeded
STATUS_PROGRESS: Dict[str, int] = {
    MaieStatus.PENDING.value: 10,
    MaieStatus.PREPROCESSING.value: 25,
    MaieStatus.PROCESSING_ASR.value: 50,
    MaieStatus.PROCESSING_LLM.value: 75,
    MaieStatus.COMPLETE.value: 100,
    MaieStatus.FAILED.value: 100,
}


def progress_for(status) -> int:
    """Map a status label (string or MaieStatus) to a UI percentage.

    Labels outside the known set map to 0.
    """
    key = status.value if isinstance(status, MaieStatus) else status
    try:
        return STATUS_PROGRESS[key]
    except (KeyError, TypeError):
        logger.debug("Unknown MAIE status %r, reporting 0%% progress", status)
        return 0


@dataclass
class ProcessResponse:
    """Returned by MAIE when a task is accepted."""
    task_id: str
    status: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProcessResponse":
        return cls(task_id=data["task_id"], status=data.get("status", MaieStatus.PENDING.value))

    def to_dict(self) -> Dict[str, Any]:
        return {"task_id": self.task_id, "status": self.status}


@dataclass
class TaskMetrics:
    input_duration_seconds: Optional[float] = None
    processing_time_seconds: Optional[float] = None
    rtf: Optional[float] = None
    vad_coverage: Optional[float] = None
    asr_confidence_avg: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["TaskMetrics"]:
        if not data:
            return None
        return cls(
            input_duration_seconds=data.get("input_duration_seconds"),
            processing_time_seconds=data.get("processing_time_seconds"),
            rtf=data.get("rtf"),
            vad_coverage=data.get("vad_coverage"),
            asr_confidence_avg=data.get("asr_confidence_avg"),
        )


@dataclass
class SummaryResult:
    """Structured summary. Template-specific fields are kept in ``extra``."""
    title: Optional[str] = None
    summary: Optional[str] = None
    key_topics: List[str] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["SummaryResult"]:
        if data is None:
            return None
        known = {"title", "summary", "key_topics", "tags"}
        return cls(
            title=data.get("title"),
            summary=data.get("summary") or data.get("content"),
            key_topics=list(data.get("key_topics") or []),
            tags=list(data.get("tags") or []),
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> Dict[str, Any]:
        out = dict(self.extra)
        out.update({
            "title": self.title,
            "summary": self.summary,
            "key_topics": self.key_topics,
            "tags": self.tags,
        })
        return out


@dataclass
class TaskResults:
    raw_transcript: Optional[str] = None
    clean_transcript: Optional[str] = None
    summary: Optional[SummaryResult] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["TaskResults"]:
        if not data:
            return None
        return cls(
            raw_transcript=data.get("raw_transcript"),
            clean_transcript=data.get("clean_transcript"),
            summary=SummaryResult.from_dict(data.get("summary")),
        )

    @property
    def transcript(self) -> Optional[str]:
        return self.clean_transcript or self.raw_transcript


@dataclass
class StatusResponse:
    """Task status as reported by MAIE.

    Every field besides ``task_id`` and ``status`` may be missing, even when
    the task is COMPLETE or FAILED. ``status`` is kept verbatim.
    """
    task_id: str
    status: str
    error: Optional[str] = None
    error_code: Optional[str] = None
    stage: Optional[str] = None
    submitted_at: Optional[str] = None
    completed_at: Optional[str] = None
    versions: Optional[Dict[str, Any]] = None
    metrics: Optional[TaskMetrics] = None
    results: Optional[TaskResults] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StatusResponse":
        return cls(
            task_id=data.get("task_id"),
            status=data.get("status"),
            error=data.get("error"),
            error_code=data.get("error_code"),
            stage=data.get("stage"),
            submitted_at=data.get("submitted_at"),
            completed_at=data.get("completed_at"),
            versions=data.get("versions"),
            metrics=TaskMetrics.from_dict(data.get("metrics")),
            results=TaskResults.from_dict(data.get("results")),
        )

    @property
    def status_enum(self) -> Optional[MaieStatus]:
        try:
            return MaieStatus(self.status)
        except ValueError:
            return None

    @property
    def is_terminal(self) -> bool:
        member = self.status_enum
        return bool(member and member.is_terminal)


def effective_status(status: StatusResponse) -> str:
    """COMPLETE without a results payload is still reported as PROCESSING_LLM."""
    if status.status == MaieStatus.COMPLETE.value and status.results is None:
        return MaieStatus.PROCESSING_LLM.value
    return status.status
