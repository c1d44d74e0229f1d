import os
import sys
from logging.config import fileConfig
from pathlib import Path

from alembic import context

alembic_config = context.config
if alembic_config.config_file_name is not None:
    fileConfig(alembic_config.config_file_name)

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from sqlmodel import SQLModel  # noqa: E402

from app.core.config import settings  # noqa: E402
from app.db import base  # noqa: F401,E402  registra Contact e Phone
from app.db.session import build_engine  # noqa: E402

# Ordem: variável DATABASE_URL, sqlalchemy.url do alembic.ini, Settings
DATABASE_URL = (
    os.getenv("DATABASE_URL")
    or alembic_config.get_main_option("sqlalchemy.url")
    or settings.database_url
)

target_metadata = SQLModel.metadata


def run_offline() -> None:
    context.configure(url=DATABASE_URL, target_metadata=target_metadata, literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()


def run_online() -> None:
    migration_engine = build_engine(DATABASE_URL)
    try:
        with migration_engine.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                # SQLite não suporta ALTER TABLE completo
                render_as_batch=connection.dialect.name == "sqlite",
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        migration_engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    run_online()
