"""Alembic environment bound to the maie_bridge app.

Migrations run on the engine the app itself uses, so relative sqlite paths
resolve the same way (under the instance folder) and driver events land in
the application log.
"""
import logging
from logging.config import fileConfig

from alembic import context

from maie_bridge.extensions import db, persistence
from wsgi import app

config = context.config
if config.config_file_name is not None:
    # keep the app's own loggers alive
    fileConfig(config.config_file_name, disable_existing_loggers=False)

logger = logging.getLogger("alembic.env")

target_metadata = db.metadata


def run_migrations_offline():
    with app.app_context():
        url = persistence.acquire().url.render_as_string(hide_password=False)
    context.configure(url=url, target_metadata=target_metadata,
                      literal_binds=True, compare_type=True, render_as_batch=True)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    with app.app_context():
        engine = persistence.acquire()
        logger.info("Migrating %s", engine.url.render_as_string(hide_password=True))
        with engine.connect() as connection:
            context.configure(connection=connection, target_metadata=target_metadata,
                              compare_type=True, render_as_batch=True)
            with context.begin_transaction():
                context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
