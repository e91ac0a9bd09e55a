import logging
import sqlite3
import threading

from flask import current_app
from flask_migrate import Migrate
from flask_socketio import SocketIO
from flask_sqlalchemy import SQLAlchemy
from redis import Redis
from rq import Queue
from sqlalchemy import event

logger = logging.getLogger(__name__)


class PersistenceClient:
    """Initialize-once holder for the database engine.

    The engine for an app is built and wired on the first ``acquire()`` and
    the same object is handed back on every later call. Driver events
    (connect / invalidate / errors) are forwarded to the application log
    instead of the console.
    """

    EXT_KEY = "maie_bridge.engine"

    def __init__(self, db):
        self.db = db
        self._lock = threading.Lock()

    def init_app(self, app):
        self.db.init_app(app)
        app.extensions["persistence"] = self
        with app.app_context():
            self.acquire()

    def acquire(self):
        app = current_app._get_current_object()
        engine = app.extensions.get(self.EXT_KEY)
        if engine is not None:
            return engine
        with self._lock:
            engine = app.extensions.get(self.EXT_KEY)
            if engine is None:
                engine = self.db.engine
                self.wire_events(engine)
                app.extensions[self.EXT_KEY] = engine
        return engine

    @property
    def session(self):
        return self.db.session

    def wire_events(self, engine):
        try:
            event.listen(engine, "connect", _on_connect)
            event.listen(engine, "invalidate", _on_invalidate)
            event.listen(engine, "handle_error", _on_error)
        except Exception as e:
            # the app still works without driver logging
            logger.warning("Failed to attach database event listeners: %s", e)
            return False
        return True


def _on_connect(dbapi_connection, connection_record):
    if isinstance(dbapi_connection, sqlite3.Connection):
        # sqlite ignores ON DELETE CASCADE unless asked per connection
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
    logger.info("Database connection opened (%s)", type(dbapi_connection).__module__)


def _on_invalidate(dbapi_connection, connection_record, exception):
    logger.warning("Database connection invalidated: %s", exception)


def _on_error(context):
    err = context.original_exception
    logger.error(
        "Database error: %s code=%s statement=%s",
        err,
        getattr(context.sqlalchemy_exception, "code", None),
        context.statement,
    )


class RQWrapper:
    def __init__(self):
        self.redis = None
        self.queue = None

    def init_app(self, app):
        url = app.config.get("REDIS_URL")
        if not url:
            self.redis = None
            self.queue = None
            return
        try:
            self.redis = Redis.from_url(url)
            self.queue = Queue("default", connection=self.redis)
        except Exception:
            # no Redis server (dev machine): status is polled on demand
            logger.exception("Redis/RQ init failed, background polling disabled")
            self.redis = None
            self.queue = None

    def enqueue_in(self, delay, *args, **kwargs):
        """Schedule a job after ``delay``; without Redis there is nothing to defer to."""
        if not self.queue:
            logger.info("RQ unavailable, not scheduling delayed job %s", getattr(args[0], "__name__", args[0]) if args else None)
            return None
        try:
            return self.queue.enqueue_in(delay, *args, **kwargs)
        except Exception:
            logger.exception("RQ enqueue_in failed, delayed job dropped")
            return None


db = SQLAlchemy()
migrate = Migrate()
persistence = PersistenceClient(db)
socketio = SocketIO()
rq = RQWrapper()
