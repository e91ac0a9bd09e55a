import requests
from flask import Blueprint, jsonify, request

from ..services.errors import MaieError, handle_maie_error
from ..services.maie import get_maie_client
from ..utils.decorators import token_required

bp = Blueprint("templates", __name__)


def _proxy(call, default_msg, success_status=200):
    try:
        data = call()
    except (MaieError, requests.RequestException) as e:
        status, message = handle_maie_error(e, default_msg)
        return jsonify({"error": message}), status
    if data is None:
        return "", 204
    return jsonify(data), success_status


@bp.route("/api/templates", methods=["GET"])
def list_templates():
    return _proxy(get_maie_client().list_templates, "Failed to fetch templates")


@bp.route("/api/templates/<template_id>", methods=["GET"])
def get_template(template_id):
    return _proxy(lambda: get_maie_client().get_template(template_id), "Failed to fetch template")


@bp.route("/api/templates/<template_id>/schema", methods=["GET"])
def get_template_schema(template_id):
    return _proxy(lambda: get_maie_client().get_template_schema(template_id), "Failed to fetch template schema")


@bp.route("/api/templates", methods=["POST"])
@token_required
def create_template():
    body = request.get_json(silent=True) or {}
    missing = [k for k in ("name", "description", "schema_data") if not body.get(k)]
    if missing:
        return jsonify({"error": f"missing fields: {', '.join(missing)}"}), 400
    return _proxy(lambda: get_maie_client().create_template(body), "Failed to create template", success_status=201)


@bp.route("/api/templates/<template_id>", methods=["PUT"])
@token_required
def update_template(template_id):
    body = request.get_json(silent=True) or {}
    return _proxy(lambda: get_maie_client().update_template(template_id, body), "Failed to update template")


@bp.route("/api/templates/<template_id>", methods=["DELETE"])
@token_required
def delete_template(template_id):
    return _proxy(lambda: get_maie_client().delete_template(template_id), "Failed to delete template")
