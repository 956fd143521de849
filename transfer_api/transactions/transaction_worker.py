# transfer_api/transactions/transaction_worker.py
import asyncio
import datetime
import logging

from transfer_api.transactions.confirmation import ConfirmationBackend
from transfer_api.transactions.dedup_registry import DedupRegistry
from transfer_api.transactions.transaction_errors import StoreError
from transfer_api.transactions.transaction_model import TransactionStatus
from transfer_api.transactions.transaction_repository import TransactionRepository

logger = logging.getLogger(__name__)


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class CompletionWorker:
    """
    Completes one admitted transaction in the background.

    Nobody awaits the outcome: success or failure is only visible through
    the stored record. On failure the record stays PROCESSING with a fresh
    ``updated_at`` so an out-of-band retry can find it.
    """

    def __init__(
        self,
        repository: TransactionRepository,
        registry: DedupRegistry,
        confirmation: ConfirmationBackend,
    ):
        self._repository = repository
        self._registry = registry
        self._confirmation = confirmation

    async def run(self, transaction_id: str) -> None:
        logger.info(f"Starting background processing for transaction {transaction_id}")
        try:
            await self._confirmation.confirm(transaction_id)
            now = utcnow()
            completed = await asyncio.to_thread(
                self._repository.update,
                transaction_id,
                {"status": TransactionStatus.PROCESSED.value, "processed_at": now, "updated_at": now},
                TransactionStatus.PROCESSING,
            )
            if completed:
                logger.info(f"Transaction {transaction_id} processed successfully")
            else:
                logger.warning(f"Transaction {transaction_id} was not in PROCESSING state, left unchanged")
        except Exception:
            logger.exception(f"Background processing failed for transaction {transaction_id}")
            await self._keep_retry_eligible(transaction_id)
        finally:
            self._registry.release(transaction_id)

    async def _keep_retry_eligible(self, transaction_id: str) -> None:
        try:
            await asyncio.to_thread(
                self._repository.update,
                transaction_id,
                {"updated_at": utcnow()},
                TransactionStatus.PROCESSING,
            )
            logger.info(f"Transaction {transaction_id} left in PROCESSING for retry")
        except StoreError as e:
            logger.error(f"Could not refresh transaction {transaction_id} after failure: {e}")
