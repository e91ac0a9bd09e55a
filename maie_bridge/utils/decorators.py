from functools import wraps
from flask import g, jsonify, request
from .tokens import verify_token


def token_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        header = request.headers.get("Authorization", "")
        scheme, _, token = header.partition(" ")
        user_id = verify_token(token) if scheme.lower() == "bearer" else None
        if not user_id:
            return jsonify({"error": "authentication required"}), 401
        g.user_id = user_id
        return view(*args, **kwargs)
    return wrapped
