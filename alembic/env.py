"""Alembic environment for the crew booking schema.

The database URL always comes from ``crew_booking.config.settings`` (and so
from ``DATABASE_URL`` / ``.env``), never from alembic.ini.
"""
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from crew_booking.config import settings
from crew_booking.database import Base

# Registers every table on Base.metadata for autogenerate
from crew_booking.models.inquiry import Inquiry    # noqa: F401
from crew_booking.models.crew import Crew          # noqa: F401
from crew_booking.models.event import Event        # noqa: F401
from crew_booking.models.booking import Booking    # noqa: F401

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)


def _shared_options(url: str) -> dict:
    # SQLite cannot ALTER constraints in place; batch mode recreates the table.
    return {
        "target_metadata": Base.metadata,
        "compare_type": True,
        "render_as_batch": url.startswith("sqlite"),
    }


def run_offline(url: str) -> None:
    """Emit SQL to stdout instead of touching a database."""
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_shared_options(url),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_online(url: str) -> None:
    engine = create_engine(url, poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            context.configure(connection=connection, **_shared_options(url))
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_offline(settings.DATABASE_URL)
else:
    run_online(settings.DATABASE_URL)
