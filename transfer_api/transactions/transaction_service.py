# transfer_api/transactions/transaction_service.py
import asyncio
import enum
import functools
import logging
from dataclasses import dataclass
from typing import Any

from transfer_api.transactions.dedup_registry import DedupRegistry
from transfer_api.transactions.task_scheduler import TaskScheduler
from transfer_api.transactions.transaction_errors import (
    DuplicateTransactionError,
    TransactionNotFoundError,
)
from transfer_api.transactions.transaction_model import TransactionDB, TransactionStatus
from transfer_api.transactions.transaction_repository import TransactionRepository
from transfer_api.transactions.transaction_worker import CompletionWorker, utcnow
from transfer_api.transactions.transactions_schema import WebhookPayload, parse_webhook_payload

logger = logging.getLogger(__name__)


class AdmissionOutcome(str, enum.Enum):
    NEW = "new"
    DUPLICATE = "duplicate"


@dataclass(frozen=True)
class Admission:
    transaction_id: str
    outcome: AdmissionOutcome


class TransactionService:
    """
    Intake gate and read path for webhook transactions.

    ``admit`` accepts each transaction id at most once: the dedup registry
    absorbs redeliveries while a completion is in flight in this process,
    and the store's unique key absorbs everything else. Only an admission
    that inserted the record schedules a completion worker.

    Validation failures raise ``InvalidTransactionError`` and persistence
    failures raise ``StoreError``; neither leaves a registry entry behind.
    """

    def __init__(
        self,
        repository: TransactionRepository,
        registry: DedupRegistry,
        scheduler: TaskScheduler,
        worker: CompletionWorker,
        default_currency: str = "INR",
    ):
        self._repository = repository
        self._registry = registry
        self._scheduler = scheduler
        self._worker = worker
        self._default_currency = default_currency

    async def admit(self, payload: Any) -> Admission:
        request = parse_webhook_payload(payload, self._default_currency)
        transaction_id = request.transaction_id

        if not self._registry.try_acquire(transaction_id):
            logger.info(f"Transaction {transaction_id} is already being processed")
            return Admission(transaction_id, AdmissionOutcome.DUPLICATE)

        record = self._new_record(request)
        # a thread cannot be cancelled: if the caller is, the insert still runs
        # and _finish_detached_insert completes the admission
        insert = asyncio.ensure_future(asyncio.to_thread(self._repository.insert, record))
        try:
            await asyncio.shield(insert)
        except DuplicateTransactionError:
            self._registry.release(transaction_id)
            logger.info(f"Transaction {transaction_id} already exists")
            return Admission(transaction_id, AdmissionOutcome.DUPLICATE)
        except asyncio.CancelledError:
            insert.add_done_callback(functools.partial(self._finish_detached_insert, transaction_id))
            raise
        except Exception:
            self._registry.release(transaction_id)
            raise

        logger.info(f"Transaction {transaction_id} inserted successfully, starting background processing")
        self._schedule_completion(transaction_id)
        return Admission(transaction_id, AdmissionOutcome.NEW)

    def _schedule_completion(self, transaction_id: str) -> None:
        self._scheduler.schedule(self._worker.run(transaction_id), name=f"complete-{transaction_id}")

    def _finish_detached_insert(self, transaction_id: str, insert: asyncio.Future) -> None:
        if insert.cancelled() or insert.exception() is not None:
            self._registry.release(transaction_id)
            return
        logger.info(f"Transaction {transaction_id} inserted after its request was cancelled")
        self._schedule_completion(transaction_id)

    async def get(self, transaction_id: str) -> TransactionDB:
        record = await asyncio.to_thread(self._repository.get_by_id, transaction_id)
        if record is None:
            raise TransactionNotFoundError("Transaction not found")
        return record

    @staticmethod
    def _new_record(request: WebhookPayload) -> TransactionDB:
        now = utcnow()
        return TransactionDB(
            transaction_id=request.transaction_id,
            source_account=request.source_account,
            destination_account=request.destination_account,
            amount=request.amount_minor,
            currency=request.currency,
            status=TransactionStatus.PROCESSING.value,
            created_at=now,
            processed_at=None,
            updated_at=now,
        )
