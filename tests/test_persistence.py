import logging

from maie_bridge.extensions import db, persistence
from maie_bridge.models import ProcessingResult, Template, User


def test_acquire_returns_same_engine(app):
    first = persistence.acquire()
    second = persistence.acquire()
    assert first is second
    assert first is db.engine


def test_persistence_registered_on_app(app):
    assert app.extensions["persistence"] is persistence
    assert persistence.session is db.session


def test_listener_failure_is_only_a_warning(app, monkeypatch, caplog):
    def boom(*args, **kwargs):
        raise NotImplementedError("driver has no events")

    monkeypatch.setattr("maie_bridge.extensions.event.listen", boom)
    with caplog.at_level(logging.WARNING):
        assert persistence.wire_events(db.engine) is False
    assert "Failed to attach database event listeners" in caplog.text


def test_driver_events_are_wired(app):
    from sqlalchemy import event
    from maie_bridge.extensions import _on_connect, _on_error, _on_invalidate

    engine = persistence.acquire()
    assert event.contains(engine, "connect", _on_connect)
    assert event.contains(engine, "invalidate", _on_invalidate)
    assert event.contains(engine, "handle_error", _on_error)


def test_templates_cascade_with_owner(app, user):
    db.session.add_all([
        Template(name="Minutes", content="{}", owner_type="user", owner_id=user.id),
        Template(name="Interview", content="{}", owner_type="user", owner_id=user.id),
        Template(name="Default", content="{}", owner_type="system"),
    ])
    db.session.commit()
    assert Template.query.count() == 3

    db.session.delete(user)
    db.session.commit()

    remaining = Template.query.all()
    assert [t.name for t in remaining] == ["Default"]
    assert remaining[0].owner_id is None


def test_template_column_names(app):
    cols = {c.name for c in Template.__table__.columns}
    assert {"id", "name", "content", "ownerType", "ownerId", "createdAt", "updatedAt"} <= cols
    assert any(ix.name == "templates_ownerId_idx" for ix in Template.__table__.indexes)


def test_processing_result_defaults(app, user):
    r = ProcessingResult(uploaded_by_id=user.id, maie_task_id="m-1")
    db.session.add(r)
    db.session.commit()
    assert r.id
    assert r.status == "pending"
    assert not r.is_terminal
    assert r.created_at is not None
