"""Tests for the SQLAlchemy transaction repository."""

import datetime

import pytest
from sqlalchemy import text

from transfer_api.transactions.transaction_errors import DuplicateTransactionError, StoreError
from transfer_api.transactions.transaction_model import TransactionDB, TransactionStatus

CREATED = datetime.datetime(2024, 1, 1, 12, 0, tzinfo=datetime.timezone.utc)


def make_record(transaction_id: str = "t1", amount: int = 15000) -> TransactionDB:
    return TransactionDB(
        transaction_id=transaction_id,
        source_account="A",
        destination_account="B",
        amount=amount,
        currency="INR",
        status=TransactionStatus.PROCESSING.value,
        created_at=CREATED,
        processed_at=None,
        updated_at=CREATED,
    )


class TestTransactionRepository:
    """Test suite for TransactionRepository."""

    def test_insert_and_get(self, repository):
        repository.insert(make_record())

        record = repository.get_by_id("t1")

        assert record is not None
        assert record.amount == 15000
        assert record.status == "PROCESSING"
        assert record.processed_at is None

    def test_get_unknown_returns_none(self, repository):
        assert repository.get_by_id("missing") is None

    def test_insert_conflict_raises_duplicate(self, repository, row_count):
        repository.insert(make_record())

        with pytest.raises(DuplicateTransactionError):
            repository.insert(make_record())

        assert row_count("t1") == 1

    def test_non_unique_integrity_error_is_store_error(self, repository, row_count):
        with pytest.raises(StoreError):
            repository.insert(make_record(amount=0))

        assert row_count("t1") == 0

    def test_unbindable_amount_is_store_error(self, repository, row_count):
        # beyond a signed 64-bit integer; the driver raises OverflowError
        with pytest.raises(StoreError):
            repository.insert(make_record(amount=10**19))

        assert row_count("t1") == 0

    def test_update_with_expected_status(self, repository):
        repository.insert(make_record())
        now = datetime.datetime.now(datetime.timezone.utc)
        fields = {"status": TransactionStatus.PROCESSED.value, "processed_at": now, "updated_at": now}

        assert repository.update("t1", fields, TransactionStatus.PROCESSING) is True
        # already PROCESSED: a second forward transition changes nothing
        assert repository.update("t1", fields, TransactionStatus.PROCESSING) is False

        record = repository.get_by_id("t1")
        assert record.status == "PROCESSED"
        assert record.processed_at is not None

    def test_update_unknown_returns_false(self, repository):
        assert repository.update("missing", {"updated_at": CREATED}) is False

    def test_database_failure_is_store_error(self, repository, engine):
        with engine.begin() as conn:
            conn.execute(text("DROP TABLE transactions"))

        with pytest.raises(StoreError):
            repository.get_by_id("t1")
        with pytest.raises(StoreError):
            repository.insert(make_record())
        with pytest.raises(StoreError):
            repository.update("t1", {"updated_at": CREATED})
