"""Alembic environment for the users schema; DATABASE_URL comes from app settings."""

from logging.config import fileConfig

from alembic import context

from app.core.config import get_settings
from app.core.database import create_db_engine
from app.models import Base, User  # noqa: F401  (registers the users table)

config = context.config
# alembic.ini carries no logging sections; only configure logging when it does.
if config.config_file_name is not None:
    try:
        fileConfig(config.config_file_name)
    except KeyError:
        pass

settings = get_settings()
target_metadata = Base.metadata
# SQLite cannot ALTER most constraints in place; batch mode rebuilds the table.
is_sqlite = settings.DATABASE_URL.startswith("sqlite")


def run_migrations_offline() -> None:
    """Emit SQL for the users schema without a live connection."""
    context.configure(
        url=settings.DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=is_sqlite,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations using the same engine options (timeouts) as the app."""
    connectable = create_db_engine(settings)
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=is_sqlite,
        )
        with context.begin_transaction():
            context.run_migrations()
    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
