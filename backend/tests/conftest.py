"""
Shared pytest fixtures for the familygen API tests.

Each test gets its own SQLite file database; the schema is created with
Base.metadata.create_all and the app's get_db dependency is pointed at it.
"""
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import NullPool

from familygen.db import Base, get_db
from familygen.main import app

STRONG_PASSWORD = "Abcdef1!"


# ---------------------------------------------------------------------------
# Application / database lifecycle
# ---------------------------------------------------------------------------

@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "familygen-test.db"
    sync_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()
    return path


def client_for(path):
    """TestClient whose get_db sessions point at the SQLite file `path`."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{path}", poolclass=NullPool)
    session_maker = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

    async def _get_test_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = _get_test_db
    return TestClient(app)


@pytest.fixture
def client(db_path):
    yield client_for(db_path)
    app.dependency_overrides.clear()


def fetch_all(path, sql, **params):
    """Read rows straight from the test database, bypassing the API."""
    engine = create_engine(f"sqlite:///{path}")
    try:
        with engine.connect() as conn:
            return conn.execute(text(sql), params).all()
    finally:
        engine.dispose()


# ---------------------------------------------------------------------------
# Request helpers
# ---------------------------------------------------------------------------

def years_ago(years: int) -> str:
    return date(date.today().year - years, 1, 1).isoformat()


def patient_payload(email="ana@example.com", **overrides):
    body = {
        "nome": "Ana Souza",
        "email": email,
        "senha": STRONG_PASSWORD,
        "sexo": "F",
        "data_nascimento": years_ago(30),
    }
    body.update(overrides)
    return body


def professional_payload(email="dr.lima@example.com", **overrides):
    body = {"nome": "Dr. Lima", "email": email, "senha": STRONG_PASSWORD}
    body.update(overrides)
    return body


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register_patient(client):
    def _register(email="ana@example.com", **overrides):
        resp = client.post("/auth/paciente/cadastro", json=patient_payload(email, **overrides))
        assert resp.status_code == 201, resp.json()
        return resp.json()
    return _register


@pytest.fixture
def register_professional(client):
    def _register(email="dr.lima@example.com", **overrides):
        resp = client.post("/auth/profissional/cadastro", json=professional_payload(email, **overrides))
        assert resp.status_code == 201, resp.json()
        return resp.json()
    return _register
