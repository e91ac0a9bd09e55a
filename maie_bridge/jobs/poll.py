from datetime import timedelta

from flask import current_app

from ..extensions import db, rq
from ..models.processing_result import ProcessingResult
from ..services.tasks import refresh_task


def schedule_poll(result_id: str, attempt: int = 0):
    delay = timedelta(seconds=current_app.config.get('MAIE_POLL_INTERVAL', 5))
    return rq.enqueue_in(delay, poll_task, result_id, attempt)


def poll_task(result_id: str, attempt: int = 0):
    """Refresh one tracked task and re-schedule until it is terminal.

    Runs inside the RQ worker's app context. A failed MAIE call counts as an
    attempt; the next poll is still scheduled.
    """
    result = db.session.get(ProcessingResult, result_id)
    if result is None:
        current_app.logger.warning('poll_task: unknown task %s', result_id)
        return None

    out = None
    try:
        out = refresh_task(result)
    except Exception:
        db.session.rollback()
        current_app.logger.exception('poll_task: status refresh failed task_id=%s attempt=%s', result_id, attempt)

    if result.is_terminal:
        return out

    max_attempts = current_app.config.get('MAIE_POLL_MAX_ATTEMPTS', 360)
    if attempt + 1 >= max_attempts:
        current_app.logger.warning('poll_task: giving up on task_id=%s after %s attempts', result_id, attempt + 1)
        return out
    schedule_poll(result_id, attempt + 1)
    return out
