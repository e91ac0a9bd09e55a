import json
from http.client import responses as http_reasons
from unittest.mock import Mock

import pytest
import requests

from config import TestConfig
from maie_bridge import create_app
from maie_bridge.extensions import db, socketio
from maie_bridge.models import User
from maie_bridge.utils.tokens import issue_token


@pytest.fixture
def maie_response():
    """Build a real requests.Response the fake MAIE session can return."""
    def _make(status_code=200, json_data=None, text=None, url="http://maie.test/"):
        r = requests.Response()
        r.status_code = status_code
        r.reason = http_reasons.get(status_code, "")
        r.url = url
        r.encoding = "utf-8"
        if json_data is not None:
            r._content = json.dumps(json_data).encode("utf-8")
        else:
            r._content = (text or "").encode("utf-8")
        return r
    return _make


@pytest.fixture
def maie_session():
    return Mock()


@pytest.fixture
def app(maie_session):
    app = create_app(TestConfig, maie_session=maie_session)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def user(app):
    u = User(username="alice", email="alice@example.com")
    db.session.add(u)
    db.session.commit()
    return u


@pytest.fixture
def other_user(app):
    u = User(username="bob", email="bob@example.com")
    db.session.add(u)
    db.session.commit()
    return u


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {issue_token(user.id)}"}


@pytest.fixture
def socket_client(app):
    """Factory for connected Socket.IO test clients; all are disconnected afterwards."""
    clients = []

    def _connect():
        c = socketio.test_client(app)
        clients.append(c)
        return c

    yield _connect
    for c in clients:
        if c.is_connected():
            c.disconnect()


@pytest.fixture
def socket_sid():
    """Server-side sid of a Socket.IO test client, as handlers see it in ``request.sid``."""
    def _sid(client, namespace="/"):
        return socketio.server.manager.sid_from_eio_sid(client.eio_sid, namespace)
    return _sid
