# transfer_api/transactions/transaction_repository.py
import logging
from typing import Any, Dict, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from transfer_api.config.database.db_helper import get_session
from transfer_api.transactions.transaction_errors import DuplicateTransactionError, StoreError
from transfer_api.transactions.transaction_model import TransactionDB, TransactionStatus

logger = logging.getLogger(__name__)

# DBAPI drivers raise these directly for values they cannot bind
STORE_ERRORS = (SQLAlchemyError, OverflowError, ValueError)


class TransactionRepository:
    """
    Durable transaction records keyed by ``transaction_id``.

    Every call opens its own session, so the repository is safe to use from
    worker threads. Persistence failures surface as ``StoreError``; a unique
    key conflict on insert surfaces as ``DuplicateTransactionError``.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def get_by_id(self, transaction_id: str) -> Optional[TransactionDB]:
        try:
            with get_session(self._session_factory) as db:
                stmt = select(TransactionDB).where(TransactionDB.transaction_id == transaction_id)
                return db.execute(stmt).scalar_one_or_none()
        except STORE_ERRORS as e:
            logger.error(f"Failed to load transaction {transaction_id}: {e}")
            raise StoreError("Database error") from e

    def insert(self, record: TransactionDB) -> None:
        try:
            with get_session(self._session_factory) as db:
                db.add(record)
                db.commit()
        except IntegrityError as e:
            # the unique key is the only constraint a validated record can hit,
            # but confirm before reporting a duplicate
            if self.get_by_id(record.transaction_id) is not None:
                raise DuplicateTransactionError(
                    f"Transaction {record.transaction_id} already exists"
                ) from e
            logger.error(f"Failed to insert transaction {record.transaction_id}: {e}")
            raise StoreError("Failed to process transaction") from e
        except STORE_ERRORS as e:
            logger.error(f"Failed to insert transaction {record.transaction_id}: {e}")
            raise StoreError("Failed to process transaction") from e

    def update(
        self,
        transaction_id: str,
        fields: Dict[str, Any],
        expected_status: Optional[TransactionStatus] = None,
    ) -> bool:
        """
        Apply ``fields`` to the record, optionally only while it has ``expected_status``.

        Returns True when a row was changed.
        """
        stmt = update(TransactionDB).where(TransactionDB.transaction_id == transaction_id)
        if expected_status is not None:
            stmt = stmt.where(TransactionDB.status == expected_status.value)
        stmt = stmt.values(**fields)
        try:
            with get_session(self._session_factory) as db:
                result = db.execute(stmt)
                db.commit()
                return result.rowcount == 1
        except STORE_ERRORS as e:
            logger.error(f"Failed to update transaction {transaction_id}: {e}")
            raise StoreError("Database error") from e
