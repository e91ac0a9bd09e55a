import logging

import pytest

from maie_bridge.services.notifications import AuthKick, TaskComplete, TaskProgress
from maie_bridge.services.socket_bus import NotificationBus, get_bus, user_room
from maie_bridge.utils.tokens import issue_token


def _events(client, name=None):
    received = client.get_received()
    if name is None:
        return received
    return [e for e in received if e["name"] == name]


@pytest.fixture
def bus(app):
    return get_bus()


def test_user_room_name():
    assert user_room("42") == "user:42"


def test_emit_to_user_reaches_only_that_user(bus, socket_client, socket_sid):
    c = socket_client()
    other = socket_client()
    bus.register_connection("u1", socket_sid(c))
    bus.register_connection("u2", socket_sid(other))

    bus.emit_to_user("u1", "x", {"a": 1})

    got = _events(c, "x")
    assert len(got) == 1
    assert got[0]["args"] == [{"a": 1}]
    assert _events(other, "x") == []


def test_unregister_removes_connection_from_room(bus, socket_client, socket_sid):
    c = socket_client()
    sid = socket_sid(c)
    bus.register_connection("u1", sid)
    assert bus.user_for(sid) == "u1"

    bus.unregister_connection(sid)
    bus.emit_to_user("u1", "x", {"a": 1})

    assert _events(c, "x") == []
    assert bus.user_for(sid) is None


def test_unregister_unknown_connection_is_noop(bus, socket_client, socket_sid):
    c = socket_client()
    bus.unregister_connection(socket_sid(c))
    bus.unregister_connection("never-seen")


def test_kick_reaches_every_connection_of_user(bus, socket_client, socket_sid):
    tab1, tab2, outsider = socket_client(), socket_client(), socket_client()
    bus.register_connection("u1", socket_sid(tab1))
    bus.register_connection("u1", socket_sid(tab2))
    bus.register_connection("u2", socket_sid(outsider))

    bus.kick("u1", "bye")

    for c in (tab1, tab2):
        got = _events(c, "auth:kick")
        assert len(got) == 1
        assert got[0]["args"] == [{"message": "bye"}]
    assert _events(outsider, "auth:kick") == []


def test_emit_to_all(bus, socket_client, socket_sid):
    a, b = socket_client(), socket_client()
    bus.register_connection("u1", socket_sid(a))

    bus.emit_to_all("maintenance", {"in": 5})

    assert _events(a, "maintenance")[0]["args"] == [{"in": 5}]
    assert _events(b, "maintenance")[0]["args"] == [{"in": 5}]


def test_typed_notifications(bus, socket_client, socket_sid):
    c = socket_client()
    bus.register_connection("u1", socket_sid(c))

    bus.notify_user("u1", TaskProgress(task_id="t1", status="PROCESSING_ASR", progress=50))
    bus.notify_user("u1", TaskComplete(task_id="t1", status="FAILED", error="bad audio", error_code="AUDIO_DECODE"))

    received = _events(c)
    assert [e["name"] for e in received] == ["task:progress", "task:complete"]
    assert received[0]["args"] == [{"taskId": "t1", "status": "PROCESSING_ASR", "progress": 50}]
    assert received[1]["args"] == [{"taskId": "t1", "status": "FAILED", "error": "bad audio", "errorCode": "AUDIO_DECODE"}]


def test_notification_payload_shapes():
    assert AuthKick(message="m").payload() == {"message": "m"}
    done = TaskComplete(task_id="t", status="COMPLETE", result={"title": "x"})
    assert done.payload() == {"taskId": "t", "status": "COMPLETE", "result": {"title": "x"}}


def test_get_server_before_set_raises():
    with pytest.raises(RuntimeError, match="Socket.IO server not set"):
        NotificationBus().get_server()


def test_emissions_before_server_set_do_not_raise(caplog):
    bus = NotificationBus()
    with caplog.at_level(logging.ERROR):
        bus.emit_to_user("u1", "x", {"a": 1})
        bus.emit_to_all("x", {"a": 1})
        bus.kick("u1", "bye")
        bus.register_connection("u1", "sid-1")
        bus.unregister_connection("sid-1")
    assert len([r for r in caplog.records if r.levelno == logging.ERROR]) >= 4


def test_set_server_replaces_reference(app):
    from maie_bridge.extensions import socketio
    bus = NotificationBus()
    bus.set_server(socketio)
    assert bus.get_server() is socketio
    replacement = object()
    bus.set_server(replacement)
    assert bus.get_server() is replacement


def test_emit_with_broken_server_is_swallowed(caplog):
    class Broken:
        def emit(self, *args, **kwargs):
            raise ConnectionError("queue down")

    bus = NotificationBus(Broken())
    with caplog.at_level(logging.ERROR):
        bus.emit_to_user("u1", "x", {})
    assert "Failed to emit x" in caplog.text


def test_identify_registers_socket(app, bus, socket_client, user, socket_sid):
    c = socket_client()
    c.emit("auth:identify", {"token": issue_token(user.id)})

    assert bus.user_for(socket_sid(c)) == user.id
    bus.emit_to_user(user.id, "hello", {"ok": True})
    assert _events(c, "hello")[0]["args"] == [{"ok": True}]


@pytest.mark.parametrize("data", [{}, {"token": ""}, {"token": "forged.token.value"}, "not-a-dict"])
def test_identify_ignores_bad_tokens(bus, socket_client, data, socket_sid):
    c = socket_client()
    c.emit("auth:identify", data)
    assert bus.user_for(socket_sid(c)) is None


def test_disconnect_unregisters(bus, socket_client, user, socket_sid):
    c = socket_client()
    c.emit("auth:identify", {"token": issue_token(user.id)})
    sid = socket_sid(c)
    assert bus.user_for(sid) == user.id

    c.disconnect()

    assert bus.user_for(sid) is None
