"""Alembic migration environment for the daily_checkin schema.

Online migrations reuse the application engine, so SQLite connections get
the same foreign-key pragma as the running service.
"""
from logging.config import fileConfig

from alembic import context

from daily_checkin.config import settings
from daily_checkin.database import Base, engine

# Register every table on Base.metadata for autogenerate
from daily_checkin.models.user import User                  # noqa: F401
from daily_checkin.models.contact import EmergencyContact   # noqa: F401
from daily_checkin.models.check_in import CheckIn           # noqa: F401
from daily_checkin.models.scan_run import ScanRun           # noqa: F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# SQLite cannot ALTER constraints in place; batch mode recreates the table
_render_as_batch = settings.DATABASE_URL.startswith("sqlite")


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of touching the database."""
    context.configure(
        url=settings.DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=_render_as_batch,
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=_render_as_batch,
            compare_type=True,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
