import threading
from typing import Set


class DedupRegistry:
    """Process-local set of transaction ids whose completion is in flight.

    Only a fast path for redeliveries hitting the same process: the unique
    key in the store still decides what is a duplicate.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._ids: Set[str] = set()

    def try_acquire(self, transaction_id: str) -> bool:
        """Register ``transaction_id``; False if it is already registered."""
        with self._lock:
            if transaction_id in self._ids:
                return False
            self._ids.add(transaction_id)
            return True

    def release(self, transaction_id: str) -> None:
        with self._lock:
            self._ids.discard(transaction_id)

    def __contains__(self, transaction_id: object) -> bool:
        with self._lock:
            return transaction_id in self._ids

    def __len__(self) -> int:
        with self._lock:
            return len(self._ids)
