"""Alembic environment: migrations run over a sync psycopg2 connection."""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from eduassist.config import get_settings
from eduassist.db.base import Base
from eduassist.db import models  # noqa: F401 - registers tables on Base.metadata

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
settings = get_settings()

MIGRATION_OPTIONS = {
    "target_metadata": target_metadata,
    "compare_type": True,
    "compare_server_default": True,
}


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of connecting."""
    context.configure(
        url=settings.database_url_sync,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **MIGRATION_OPTIONS,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(settings.database_url_sync, poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, **MIGRATION_OPTIONS)

        with context.begin_transaction():
            context.run_migrations()

    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
