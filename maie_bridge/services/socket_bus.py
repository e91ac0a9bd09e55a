"""Pub/sub helper over the Socket.IO server keyed by user rooms.

Every emission is best-effort: a missing server, an empty room or a
transport failure is logged and never raised to the caller.
"""

import logging
import threading

from flask import current_app

from .notifications import AuthKick

logger = logging.getLogger(__name__)

USER_ROOM_PREFIX = "user:"


def user_room(user_id):
    return f"{USER_ROOM_PREFIX}{user_id}"


class NotificationBus:
    def __init__(self, server=None):
        self._server = server
        # (namespace, sid) -> user id for connections that identified themselves
        self._users = {}
        self._lock = threading.Lock()

    def set_server(self, server):
        self._server = server

    def get_server(self):
        if self._server is None:
            raise RuntimeError("Socket.IO server not set")
        return self._server

    def _engine(self):
        # flask_socketio.SocketIO keeps the python-socketio server on .server
        server = getattr(self.get_server(), "server", None)
        if server is None:
            raise RuntimeError("Socket.IO server not set")
        return server

    def register_connection(self, user_id, sid, namespace="/"):
        try:
            self._engine().enter_room(sid, user_room(user_id), namespace=namespace)
            with self._lock:
                self._users[(namespace, sid)] = user_id
            logger.info("Socket identified to user room user_id=%s sid=%s", user_id, sid)
        except Exception:
            logger.exception("Failed to register user socket user_id=%s sid=%s", user_id, sid)

    def unregister_connection(self, sid, namespace="/"):
        try:
            with self._lock:
                user_id = self._users.pop((namespace, sid), None)
            if user_id is None:
                return
            self._engine().leave_room(sid, user_room(user_id), namespace=namespace)
        except Exception:
            logger.exception("Failed to unregister user socket sid=%s", sid)

    def user_for(self, sid, namespace="/"):
        with self._lock:
            return self._users.get((namespace, sid))

    def kick(self, user_id, message):
        try:
            self.get_server().emit(AuthKick.event, AuthKick(message=message).payload(), to=user_room(user_id))
            logger.info("Emitted kick to user room user_id=%s", user_id)
        except Exception:
            logger.exception("Failed to emit kick user_id=%s", user_id)

    def emit_to_user(self, user_id, event, payload=None):
        try:
            self.get_server().emit(event, payload, to=user_room(user_id))
        except Exception:
            logger.exception("Failed to emit %s to user_id=%s", event, user_id)

    def emit_to_all(self, event, payload=None):
        try:
            self.get_server().emit(event, payload)
        except Exception:
            logger.exception("Failed to broadcast %s", event)

    def notify_user(self, user_id, notification):
        self.emit_to_user(user_id, notification.event, notification.payload())

    def notify_all(self, notification):
        self.emit_to_all(notification.event, notification.payload())


def get_bus():
    return current_app.extensions["notification_bus"]
