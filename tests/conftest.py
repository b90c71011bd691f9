"""
Shared fixtures: an in-memory database, a temporary media root and an API
client wired to both.
"""
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel

from portfolio.api.dependencies import get_payload_store
from portfolio.core.config import settings
from portfolio.core.database import build_engine, get_session
from portfolio.core.security import hash_password_client, hash_password_for_storage
from portfolio.main import create_app
from portfolio.services.payload_store import PayloadStore
from tests.lib import AdminCredential, PortfolioApiClient

ADMIN_PASSWORD = "integration-secret"


@pytest.fixture
def db_engine() -> Generator[Engine, None, None]:
    engine = build_engine("sqlite://")
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def payload_store(tmp_path) -> PayloadStore:
    return PayloadStore(tmp_path / "media", max_width=64, max_height=64)


@pytest.fixture
def admin(monkeypatch) -> AdminCredential:
    monkeypatch.setattr(
        settings, "admin_password_hash", hash_password_for_storage(ADMIN_PASSWORD, rounds=4)
    )
    return AdminCredential(password=ADMIN_PASSWORD, proof=hash_password_client(ADMIN_PASSWORD))


@pytest.fixture
def api_client(db_engine, payload_store, admin) -> Generator[PortfolioApiClient, None, None]:
    app = create_app()

    def _session_override() -> Generator[Session, None, None]:
        with Session(db_engine) as session:
            yield session

    app.dependency_overrides[get_session] = _session_override
    app.dependency_overrides[get_payload_store] = lambda: payload_store
    # Not entered as a context manager: the lifespan would create tables on
    # the configured database instead of the test engine.
    client = TestClient(app)
    yield PortfolioApiClient(client)
    client.close()
