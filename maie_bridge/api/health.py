from flask import Blueprint, jsonify

from ..services.maie import get_maie_client

bp = Blueprint("health", __name__)


@bp.get("/api/health")
def health():
    maie_ok = get_maie_client().check_health()
    return jsonify({"status": "ok", "maie": maie_ok})
