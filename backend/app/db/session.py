import os
from typing import Any, Generator

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from app.core.config import settings
from app.core.logging_setup import logger


def _build_connect_args(database_url: str) -> dict[str, Any]:
    connect_args: dict[str, Any] = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    elif database_url.startswith("postgresql"):
        client_encoding = os.getenv("POSTGRES_CLIENT_ENCODING", "UTF8")
        connect_args["options"] = f"-c client_encoding={client_encoding}"
    return connect_args


def build_engine(database_url: str, *, echo: bool = False) -> Engine:
    """Cria o engine do banco; no SQLite habilita chaves estrangeiras e lower() Unicode."""
    built = create_engine(
        database_url,
        echo=echo,
        future=True,
        connect_args=_build_connect_args(database_url),
    )
    if database_url.startswith("sqlite"):
        event.listen(built, "connect", _configure_sqlite_connection)
    return built


def _unicode_lower(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


def _configure_sqlite_connection(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
    # lower() nativo do SQLite só converte ASCII; ilike depende dele
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


engine = build_engine(settings.database_url, echo=settings.debug)


def init_db() -> None:
    # Garante que todos os modelos estejam registrados no metadata
    import app.db.base  # noqa: F401

    SQLModel.metadata.create_all(bind=engine)
    logger.info("Tabelas verificadas em %s", engine.url.render_as_string(hide_password=True))


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session
