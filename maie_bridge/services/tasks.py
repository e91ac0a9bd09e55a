"""Bookkeeping for MAIE tasks: submit, persist, poll and notify the owner."""

import logging
from datetime import datetime, timezone

from ..extensions import db
from ..models.processing_result import ProcessingResult
from .maie import get_maie_client
from .maie_models import MaieStatus, effective_status, progress_for
from .notifications import TaskComplete, TaskProgress
from .socket_bus import get_bus

logger = logging.getLogger(__name__)

PREVIEW_LEN = 200


def _new_result(user_id, kind, name, template_id, submitted):
    result = ProcessingResult(
        uploaded_by_id=user_id,
        source_kind=kind,
        source_name=name,
        template_id=template_id,
        maie_task_id=submitted.task_id,
        maie_status=submitted.status,
        status="processing",
    )
    db.session.add(result)
    db.session.commit()
    logger.info("Tracking MAIE task task_id=%s maie_task_id=%s user_id=%s", result.id, result.maie_task_id, user_id)
    return result


def start_audio_task(user_id, stream, filename, template_id=None, features="summary"):
    submitted = get_maie_client().submit(stream, filename, template_id=template_id, features=features)
    return _new_result(user_id, "audio", filename, template_id, submitted)


def start_text_task(user_id, text, template_id=None):
    submitted = get_maie_client().submit_text(text, template_id=template_id)
    return _new_result(user_id, "text", None, template_id, submitted)


def _result_payload(result):
    summary = result.summary or {}
    return {
        "title": result.title,
        "summary": summary.get("summary"),
        "transcript": result.transcript,
        "tags": result.tags or [],
        "keyTopics": summary.get("key_topics") or [],
        "asrConfidence": result.confidence,
        "processingTime": result.processing_time,
        "audioDuration": result.audio_duration,
    }


def describe(result):
    """JSON-ready status of a tracked task without contacting MAIE."""
    out = {"taskId": result.id, "maieTaskId": result.maie_task_id}
    if result.status == "completed":
        out.update(status=MaieStatus.COMPLETE.value, progress=100, result=_result_payload(result))
    elif result.status == "failed":
        out.update(status=MaieStatus.FAILED.value, progress=100, error=result.error_message, errorCode=result.error_code)
    else:
        status = result.maie_status or MaieStatus.PENDING.value
        out.update(status=status, progress=progress_for(status) if result.maie_task_id else 0)
    return out


def pending_tasks(user_id):
    """Unfinished tasks of a user, newest first, as stored (MAIE is not contacted)."""
    rows = (
        ProcessingResult.query
        .filter(ProcessingResult.uploaded_by_id == user_id,
                ProcessingResult.status.notin_(ProcessingResult.TERMINAL_STATUSES))
        .order_by(ProcessingResult.created_at.desc())
        .all()
    )
    out = []
    for r in rows:
        status = r.maie_status or MaieStatus.PENDING.value
        out.append({
            "taskId": r.id,
            "maieTaskId": r.maie_task_id,
            "status": status,
            "progress": progress_for(status),
            "templateId": r.template_id,
            "createdAt": r.created_at.isoformat() if r.created_at else None,
        })
    return out


def _store_complete(result, status):
    results = status.results
    summary = results.summary
    metrics = status.metrics
    result.status = "completed"
    result.maie_status = MaieStatus.COMPLETE.value
    result.transcript = results.transcript
    if summary is not None:
        result.title = (summary.title or "")[:255]
        result.summary = summary.to_dict()
        result.summary_preview = (summary.summary or "")[:PREVIEW_LEN]
        result.tags = summary.tags
    if metrics is not None:
        result.confidence = metrics.asr_confidence_avg
        result.processing_time = metrics.processing_time_seconds
        result.audio_duration = metrics.input_duration_seconds
        result.rtf = metrics.rtf
    result.processed_at = datetime.now(timezone.utc)


def refresh_task(result):
    """Poll MAIE once for ``result`` and push the outcome to its owner.

    Terminal rows are returned as stored. MAIE errors propagate to the caller.
    """
    if result.is_terminal or not result.maie_task_id:
        return describe(result)

    status = get_maie_client().get_status(result.maie_task_id)
    bus = get_bus()
    owner = result.uploaded_by_id

    if status.status == MaieStatus.COMPLETE.value and status.results is not None:
        _store_complete(result, status)
        db.session.commit()
        out = describe(result)
        if owner:
            bus.notify_user(owner, TaskComplete(task_id=result.id, status=out["status"], result=out["result"]))
        logger.info("Processing completed task_id=%s title=%s", result.id, result.title)
        return out

    if status.status == MaieStatus.FAILED.value:
        result.status = "failed"
        result.maie_status = MaieStatus.FAILED.value
        result.error_message = status.error
        result.error_code = status.error_code
        db.session.commit()
        if owner:
            bus.notify_user(owner, TaskComplete(task_id=result.id, status=MaieStatus.FAILED.value,
                                                error=status.error, error_code=status.error_code))
        logger.warning("Processing failed task_id=%s error=%s error_code=%s", result.id, status.error, status.error_code)
        return describe(result)

    current = effective_status(status)
    result.maie_status = current
    db.session.commit()
    progress = progress_for(current)
    if owner:
        bus.notify_user(owner, TaskProgress(task_id=result.id, status=current, progress=progress))
    return {"taskId": result.id, "maieTaskId": result.maie_task_id, "status": current, "progress": progress}
