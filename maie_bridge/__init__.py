import logging

from flask import Flask

from .extensions import db, migrate, persistence, rq, socketio
from .services import maie
from .services.socket_bus import NotificationBus
from .sockets import register_handlers


def _configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
    )
    app.logger.setLevel(level)


def create_app(config_object='config.Config', maie_session=None):
    """App factory.

    ``maie_session`` lets callers (tests, scripts) hand the MAIE client a
    prepared requests session.
    """
    app = Flask(__name__)
    app.config.from_object(config_object)
    _configure_logging(app)

    # models must be imported before create_all / migrations see the metadata
    from . import models  # noqa: F401

    persistence.init_app(app)
    migrate.init_app(app, db)
    rq.init_app(app)

    socketio.init_app(
        app,
        message_queue=app.config.get("SOCKETIO_MESSAGE_QUEUE"),
        cors_allowed_origins=app.config.get("SOCKETIO_CORS_ORIGINS", "*"),
    )
    # the bus is the only way the rest of the app reaches the socket server
    app.extensions["notification_bus"] = NotificationBus(socketio)
    register_handlers(socketio)

    maie.init_app(app, session=maie_session)

    from .api.health import bp as health_bp
    from .api.process import bp as process_bp
    from .api.templates import bp as templates_bp
    app.register_blueprint(health_bp)
    app.register_blueprint(process_bp)
    app.register_blueprint(templates_bp)

    return app
