import pathlib
import sys
import types

import pytest
import sqlalchemy as sa
from alembic import command
from alembic.config import Config as AlembicConfig

from config import TestConfig
from maie_bridge import create_app
from maie_bridge.extensions import db

ROOT = pathlib.Path(__file__).resolve().parents[1]


@pytest.fixture
def migrated_app(tmp_path, monkeypatch):
    class FileDbConfig(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{(tmp_path / 'migrate.db').as_posix()}"

    app = create_app(FileDbConfig)
    # env.py loads the app from wsgi
    monkeypatch.setitem(sys.modules, "wsgi", types.SimpleNamespace(app=app))
    cfg = AlembicConfig()
    cfg.set_main_option("script_location", str(ROOT / "alembic"))
    return app, cfg


def _tables(app):
    with app.app_context():
        return set(sa.inspect(db.engine).get_table_names())


def test_upgrade_creates_schema_on_app_engine(migrated_app):
    app, cfg = migrated_app
    command.upgrade(cfg, "head")

    assert {"users", "templates", "processing_results", "alembic_version"} <= _tables(app)
    with app.app_context():
        indexes = {ix["name"] for ix in sa.inspect(db.engine).get_indexes("templates")}
    assert "templates_ownerId_idx" in indexes


def test_downgrade_drops_schema(migrated_app):
    app, cfg = migrated_app
    command.upgrade(cfg, "head")
    command.downgrade(cfg, "base")

    assert not {"users", "templates", "processing_results"} & _tables(app)
