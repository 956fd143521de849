"""
Confirmation backends for the completion worker.

The worker awaits ``confirm`` before marking a transaction PROCESSED. The
real confirmation is an external system; ``DelayedConfirmation`` stands in
for it with a fixed latency.
"""

import asyncio
import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class ConfirmationBackend(Protocol):
    """
    Protocol for the external confirmation step.

    Methods
    -------
    confirm(transaction_id: str) -> None
        Complete the confirmation for one transaction, raising on failure.
    """

    async def confirm(self, transaction_id: str) -> None:
        ...


class DelayedConfirmation:
    """Confirms every transaction after a fixed delay."""

    def __init__(self, delay_s: float):
        self.delay_s = delay_s

    async def confirm(self, transaction_id: str) -> None:
        logger.debug(f"Waiting {self.delay_s:.1f}s for confirmation of {transaction_id}")
        await asyncio.sleep(self.delay_s)
