"""
Alembic env.py

Migrations target the same DATABASE_URL as the app (movienight.core.config,
read from the environment or .env). Out of the box that is the SQLite file
./movienight.db; set DATABASE_URL to a postgresql:// URL (and install the
`postgres` extra) to migrate a Postgres database instead.

SQLite cannot ALTER most columns in place, so on SQLite migrations run in
batch mode (copy-and-move tables).

Usage:
  cd backend
  alembic upgrade head          # Create / update the schema
  alembic downgrade base        # Drop everything
  alembic revision --autogenerate -m "add_some_column"
"""
import os
import sys
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

# ── Make movienight importable when running from backend/ ─────────────────────
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from movienight.core.config import settings
from movienight.db.models import Base  # noqa: F401  registers every table on Base.metadata

config = context.config
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of touching the database."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=_is_sqlite(url),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
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


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
