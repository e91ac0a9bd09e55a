import logging

from flask import request

from .services.socket_bus import get_bus
from .utils.tokens import verify_token

logger = logging.getLogger(__name__)


def on_connect(auth=None):
    logger.info("Client connected: %s from %s", request.sid, request.remote_addr)


def on_disconnect(reason=None):
    get_bus().unregister_connection(request.sid, namespace=request.namespace)
    logger.info("Client disconnected: %s reason=%s", request.sid, reason)


def on_identify(data=None):
    """Associate the connection with the user named by its auth token."""
    token = data.get("token") if isinstance(data, dict) else None
    if not token:
        return
    user_id = verify_token(token)
    if not user_id:
        logger.warning("auth:identify rejected for %s", request.sid)
        return
    get_bus().register_connection(user_id, request.sid, namespace=request.namespace)


def register_handlers(socketio):
    socketio.on_event("connect", on_connect)
    socketio.on_event("disconnect", on_disconnect)
    socketio.on_event("auth:identify", on_identify)
