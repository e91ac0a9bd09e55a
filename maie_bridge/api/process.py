import requests
from flask import Blueprint, current_app, g, jsonify, request

from ..extensions import db, rq
from ..jobs.poll import schedule_poll
from ..models.processing_result import ProcessingResult
from ..services import tasks
from ..services.errors import MaieError, handle_maie_error
from ..utils.decorators import token_required

bp = Blueprint("process", __name__)


def _accepted(result):
    if rq.queue is not None:
        schedule_poll(result.id)
    return jsonify({
        "taskId": result.id,
        "maieTaskId": result.maie_task_id,
        "status": result.maie_status,
    }), 202


@bp.route("/api/process", methods=["POST"])
@token_required
def process_audio():
    if "file" not in request.files:
        return jsonify({"error": "file is required"}), 400
    f = request.files["file"]
    if not f.filename:
        return jsonify({"error": "empty file name"}), 400

    template_id = request.form.get("template_id") or None
    features = request.form.get("features") or "summary"
    try:
        # hand the upload stream straight to MAIE
        result = tasks.start_audio_task(g.user_id, f.stream, f.filename, template_id=template_id, features=features)
    except (MaieError, requests.RequestException) as e:
        status, message = handle_maie_error(e, "Failed to submit audio for processing")
        return jsonify({"error": message}), status
    return _accepted(result)


@bp.route("/api/process/text", methods=["POST"])
@token_required
def process_text():
    body = request.get_json(silent=True) or {}
    text = (body.get("text") or "").strip()
    if not text:
        return jsonify({"error": "text is required"}), 400
    try:
        result = tasks.start_text_task(g.user_id, text, template_id=body.get("template_id") or body.get("templateId"))
    except (MaieError, requests.RequestException) as e:
        status, message = handle_maie_error(e, "Failed to submit text for processing")
        return jsonify({"error": message}), status
    return _accepted(result)


@bp.route("/api/process/<task_id>/status", methods=["GET"])
@token_required
def process_status(task_id):
    result = db.session.get(ProcessingResult, task_id)
    if result is None or result.uploaded_by_id != g.user_id:
        return jsonify({"error": "task not found"}), 404
    try:
        return jsonify(tasks.refresh_task(result))
    except (MaieError, requests.RequestException) as e:
        db.session.rollback()
        current_app.logger.error("Failed to get MAIE status task_id=%s: %s", task_id, e)
        return jsonify({"error": "AI processing service unavailable"}), 502


@bp.route("/api/process/pending", methods=["GET"])
@token_required
def process_pending():
    # fallback for clients that missed socket notifications
    return jsonify({"tasks": tasks.pending_tasks(g.user_id)})
