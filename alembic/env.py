import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

config = context.config

if config.config_file_name is not None and os.path.exists(config.config_file_name):
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = None


def _get_url() -> str:
    """Resolve the database URL.

    ``initialize_db()`` sets ``sqlalchemy.url`` from the RENTROLL_* settings;
    running ``alembic`` by hand falls back to the same settings.
    """
    url = config.get_main_option("sqlalchemy.url")
    if url and config.attributes.get("configured_by_app"):
        return url

    from rentroll.settings import settings

    if settings.db_url:
        return settings.db_url
    return f"sqlite:///{os.path.abspath(settings.db_path)}"


def run_migrations_offline() -> None:
    context.configure(
        url=_get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(_get_url(), poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=True,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
