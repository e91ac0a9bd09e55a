import os
from dotenv import load_dotenv
load_dotenv()


def _float_or_none(name, default=None):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return float(raw)


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///maie_bridge.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    MAIE_API_URL = os.getenv("MAIE_API_URL", "http://localhost:8000")
    MAIE_API_KEY = os.getenv("MAIE_API_KEY")
    MAIE_HEALTH_TIMEOUT = _float_or_none("MAIE_HEALTH_TIMEOUT", 5.0)
    # unset means no client-side timeout for submit/status/template calls
    MAIE_REQUEST_TIMEOUT = _float_or_none("MAIE_REQUEST_TIMEOUT")
    MAIE_POLL_INTERVAL = int(os.getenv("MAIE_POLL_INTERVAL", "5"))
    MAIE_POLL_MAX_ATTEMPTS = int(os.getenv("MAIE_POLL_MAX_ATTEMPTS", "360"))

    SOCKETIO_MESSAGE_QUEUE = os.getenv("SOCKETIO_MESSAGE_QUEUE")
    SOCKETIO_CORS_ORIGINS = os.getenv("SOCKETIO_CORS_ORIGINS", "*")
    AUTH_TOKEN_MAX_AGE = int(os.getenv("AUTH_TOKEN_MAX_AGE", str(60 * 60 * 24)))


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    REDIS_URL = None
    LOG_LEVEL = "DEBUG"
    MAIE_API_URL = "http://maie.test"
    MAIE_API_KEY = "test-key"
    MAIE_REQUEST_TIMEOUT = None
    SOCKETIO_MESSAGE_QUEUE = None
