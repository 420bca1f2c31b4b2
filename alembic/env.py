"""Alembic environment for the farm database: DATABASE_URL from app settings, Base.metadata for autogenerate."""

import logging
import os
from logging.config import fileConfig
from typing import Any

from alembic import context
from sqlalchemy import create_engine
from sqlalchemy.pool import NullPool

os.environ.setdefault("APP_ENV", "dev")
from farmapp.core.config import settings
from farmapp.core.database import APPLICATION_NAME

# Importing the package registers every table on Base.metadata.
from farmapp.models import Base

config = context.config
if config.config_file_name is not None and config.get_section("loggers") is not None:
    fileConfig(config.config_file_name)
logger = logging.getLogger("alembic.env")

target_metadata = Base.metadata


def _skip_empty_autogenerate(context_: Any, revision: Any, directives: list) -> None:
    """Do not write a revision file when autogenerate finds no schema changes."""
    if getattr(config.cmd_opts, "autogenerate", False) and directives[0].upgrade_ops.is_empty():
        directives[:] = []
        logger.info("No schema changes detected; no revision written.")


def _configure(**kwargs: Any) -> None:
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        process_revision_directives=_skip_empty_autogenerate,
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Emit SQL for the farm schema without connecting."""
    _configure(
        url=settings.DATABASE_URL,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Migrate over a single unpooled connection; no statement timeout for DDL."""
    connectable = create_engine(
        settings.DATABASE_URL,
        poolclass=NullPool,
        connect_args={"application_name": f"{APPLICATION_NAME}-migrations"},
    )
    with connectable.connect() as connection:
        _configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
