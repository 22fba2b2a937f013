"""Alembic environment for habitos."""

from __future__ import annotations

import sys
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from flask import current_app, has_app_context
from sqlalchemy import engine_from_config, pool

sys.path.append(str(Path(__file__).resolve().parents[2]))

from habitos import create_app  # noqa: E402
from habitos.extensions import db  # noqa: E402

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

if config.config_file_name:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = db.metadata


def get_url() -> str:
    # An explicit URL (tests, ad-hoc runs) wins over the app configuration.
    explicit = config.get_main_option("sqlalchemy.url")
    if explicit:
        return explicit
    if has_app_context():
        # `flask db ...` runs inside the configured app.
        return current_app.config["SQLALCHEMY_DATABASE_URI"]
    app = create_app(config.get_main_option("habitos_env", "development"))
    return app.config["SQLALCHEMY_DATABASE_URI"]


def _load_models() -> None:
    from habitos.core.users import models as user_models  # noqa: F401
    from habitos.domains.habits.models import habit_models  # noqa: F401
    from habitos.habitos_platform.outbox import models as outbox_models  # noqa: F401


def run_migrations_offline() -> None:
    url = get_url()
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = get_url()

    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


_load_models()

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
