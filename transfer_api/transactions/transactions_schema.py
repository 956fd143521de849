# transfer_api/transactions/transactions_schema.py
import logging
import math
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, field_validator
from pydantic import ValidationError as PydanticValidationError

from transfer_api.transactions.money import MAX_MINOR_UNITS, to_major_units, to_minor_units
from transfer_api.transactions.transaction_errors import InvalidTransactionError
from transfer_api.transactions.transaction_model import TransactionDB

logger = logging.getLogger(__name__)


class WebhookPayload(BaseModel):
    """Inbound transfer notification, amount in major units."""

    model_config = ConfigDict(extra="ignore")

    transaction_id: str = Field(min_length=1)
    source_account: str = Field(min_length=1)
    destination_account: str = Field(min_length=1)
    amount: Union[StrictInt, StrictFloat]
    currency: Optional[str] = None

    @field_validator("amount")
    @classmethod
    def amount_must_be_positive(cls, v: Union[int, float]) -> Union[int, float]:
        if not math.isfinite(v) or v <= 0:
            raise ValueError("amount must be a positive number")
        minor = to_minor_units(v)
        if minor <= 0:
            raise ValueError("amount is smaller than one minor currency unit")
        if minor > MAX_MINOR_UNITS:
            raise ValueError("amount is too large")
        return v

    @property
    def amount_minor(self) -> int:
        return to_minor_units(self.amount)


def _describe_errors(exc: PydanticValidationError) -> str:
    parts = []
    for error in exc.errors():
        field = ".".join(str(p) for p in error["loc"]) or "body"
        parts.append(f"{field}: {error['msg']}")
    return "; ".join(parts)


def parse_webhook_payload(payload: Any, default_currency: str) -> WebhookPayload:
    """
    Validate a raw webhook body.

    Raises InvalidTransactionError on any violation; a missing, null or
    empty currency is replaced by ``default_currency``.
    """
    if not isinstance(payload, dict):
        raise InvalidTransactionError("Request body must be a JSON object")
    try:
        parsed = WebhookPayload(**payload)
    except PydanticValidationError as e:
        message = _describe_errors(e)
        logger.warning(f"Rejected webhook payload for {payload.get('transaction_id', 'unknown')}: {message}")
        raise InvalidTransactionError(message) from e
    if not parsed.currency:
        parsed = parsed.model_copy(update={"currency": default_currency})
    return parsed


class TransactionAck(BaseModel):
    acknowledged: bool = True
    transaction_id: str
    status: str = "processing"


class TransactionOut(BaseModel):
    transaction_id: str
    source_account: str
    destination_account: str
    amount: float
    currency: str
    status: str
    created_at: datetime
    processed_at: Optional[datetime] = None
    updated_at: datetime

    @classmethod
    def from_record(cls, record: TransactionDB) -> "TransactionOut":
        return cls(
            transaction_id=record.transaction_id,
            source_account=record.source_account,
            destination_account=record.destination_account,
            amount=to_major_units(record.amount),
            currency=record.currency,
            status=record.status,
            created_at=record.created_at,
            processed_at=record.processed_at,
            updated_at=record.updated_at,
        )
