"""Pytest configuration and shared fixtures."""

import time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from transfer_api.config.database.db_config import Base, build_engine, build_session_factory
from transfer_api.config.project_config import Settings
from transfer_api.main import create_app
from transfer_api.transactions.transaction_model import TransactionDB
from transfer_api.transactions.transaction_repository import TransactionRepository


@pytest.fixture
def database_url(tmp_path):
    """Fixture providing a fresh SQLite database file per test."""
    return f"sqlite:///{tmp_path / 'transactions.db'}"


@pytest.fixture
def engine(database_url):
    engine = build_engine(database_url)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def repository(engine):
    return TransactionRepository(build_session_factory(engine))


@pytest.fixture
def row_count(engine):
    """Fixture returning a function that counts stored rows for a transaction id."""

    def count(transaction_id: str) -> int:
        with engine.connect() as conn:
            stmt = select(func.count()).select_from(TransactionDB).where(
                TransactionDB.transaction_id == transaction_id
            )
            return conn.execute(stmt).scalar_one()

    return count


@pytest.fixture
def settings(monkeypatch, database_url):
    monkeypatch.setenv("DATABASE_URL", database_url)
    monkeypatch.setenv("CONFIRMATION_DELAY_SECONDS", "0.3")
    monkeypatch.setenv("SHUTDOWN_GRACE_SECONDS", "3")
    monkeypatch.setenv("SERVICE_NAME", "Test Transaction Service")
    return Settings()


@pytest.fixture
def client(settings, engine):
    app = create_app(settings)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def wait_for_status(client):
    """Fixture returning a function that polls the query endpoint until a status is reached."""

    def wait(transaction_id: str, status: str, timeout: float = 5.0) -> dict:
        deadline = time.monotonic() + timeout
        while True:
            body = client.get(f"/transactions/{transaction_id}").json()
            if body.get("status") == status or time.monotonic() > deadline:
                return body
            time.sleep(0.05)

    return wait


@pytest.fixture
def sample_payload():
    """Fixture providing a valid webhook payload."""
    return {
        "transaction_id": "txn_abc123def456",
        "source_account": "acc_user_789",
        "destination_account": "acc_merchant_456",
        "amount": 1500,
        "currency": "INR",
    }
