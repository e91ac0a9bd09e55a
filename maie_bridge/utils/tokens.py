from flask import current_app
from itsdangerous import BadData, SignatureExpired, URLSafeTimedSerializer

TOKEN_SALT = "maie-bridge-auth"


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(secret_key=current_app.config["SECRET_KEY"], salt=TOKEN_SALT)


def issue_token(user_id: str) -> str:
    return _serializer().dumps({"uid": str(user_id)})


def verify_token(token):
    """Return the user id carried by ``token``, or None if it is missing, forged or expired."""
    if not token:
        return None
    max_age = current_app.config.get("AUTH_TOKEN_MAX_AGE")
    try:
        data = _serializer().loads(token, max_age=max_age)
    except SignatureExpired:
        current_app.logger.info("Rejected expired auth token")
        return None
    except BadData:
        return None
    if not isinstance(data, dict):
        return None
    return data.get("uid")
