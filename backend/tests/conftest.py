from __future__ import annotations

import os
import uuid
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text
from sqlmodel import Session, SQLModel, create_engine

from app.api.deps import get_db, get_weather_provider
from app.db import session as db_session_module
from app.db.base import Contact, Phone  # noqa: F401 ensure models are registered
from app.db.session import build_engine
from app.main import app
from app.services.weather import WeatherError, WeatherErrorKind, WeatherReading, WeatherResult


class FakeWeatherProvider:
    """Provedor de clima em memória; registra as cidades consultadas."""

    def __init__(self, result: WeatherResult | None = None) -> None:
        self.result: WeatherResult = result or WeatherReading(
            temperature=25,
            condition_code="28",
            condition="Tempo limpo",
            currently="dia",
            city="São Paulo, SP",
            suggestion="Convide seu contato para fazer alguma atividade ao ar livre",
        )
        self.calls: list[str] = []

    def get_weather(self, city: str) -> WeatherResult:
        self.calls.append(city)
        return self.result

    def fail_with(self, kind: WeatherErrorKind, message: str = "falha") -> None:
        self.result = WeatherError(error=kind, message=message)


@pytest.fixture()
def db_engine(tmp_path):
    test_database_url = os.getenv("TEST_DATABASE_URL")
    if not test_database_url:
        db_path = tmp_path / f"test_{uuid.uuid4().hex}.db"
        test_database_url = f"sqlite:///{db_path}"

    is_postgres = test_database_url.startswith("postgresql")

    admin_engine = None
    schema_name = None

    if is_postgres:
        schema_name = f"test_{uuid.uuid4().hex}"
        admin_engine = create_engine(test_database_url, future=True)
        with admin_engine.connect() as conn:
            conn.execution_options(isolation_level="AUTOCOMMIT").execute(
                text(f'CREATE SCHEMA IF NOT EXISTS "{schema_name}"')
            )
        client_encoding = os.getenv("POSTGRES_CLIENT_ENCODING", "UTF8")
        connect_args = {"options": f"-csearch_path={schema_name},public -cclient_encoding={client_encoding}"}
        engine = create_engine(test_database_url, connect_args=connect_args, future=True)
    else:
        engine = build_engine(test_database_url)

    SQLModel.metadata.create_all(bind=engine)

    original_engine = db_session_module.engine
    db_session_module.engine = engine

    def override_get_db():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    yield engine

    app.dependency_overrides.pop(get_db, None)
    db_session_module.engine = original_engine
    engine.dispose()
    if is_postgres and admin_engine and schema_name:
        with admin_engine.connect() as conn:
            conn.execution_options(isolation_level="AUTOCOMMIT").execute(
                text(f'DROP SCHEMA IF EXISTS "{schema_name}" CASCADE')
            )
        admin_engine.dispose()


@pytest.fixture()
def weather_provider() -> FakeWeatherProvider:
    provider = FakeWeatherProvider()
    app.dependency_overrides[get_weather_provider] = lambda: provider
    yield provider
    app.dependency_overrides.pop(get_weather_provider, None)


@pytest.fixture()
def client(db_engine, weather_provider) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def db_session(db_engine) -> Session:
    with Session(db_engine) as session:
        yield session


def contact_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "name": "João Silva",
        "email": f"contato_{uuid.uuid4().hex[:8]}@example.com",
        "zip_code": "01310-100",
        "street": "Avenida Paulista",
        "number": "1000",
        "neighborhood": "Bela Vista",
        "city": "São Paulo",
        "state": "SP",
        "complement": "Sala 5",
    }
    payload.update(overrides)
    return payload
