import asyncio
import logging
from typing import Coroutine, List, Optional, Set

logger = logging.getLogger(__name__)


class TaskScheduler:
    """Runs fire-and-forget coroutines on the current event loop.

    Holds a reference to each task until it finishes so the loop cannot
    garbage-collect it mid-flight.
    """

    def __init__(self):
        self._tasks: Set[asyncio.Task] = set()

    def schedule(self, coro: Coroutine, name: Optional[str] = None) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self, timeout: Optional[float] = None) -> List[asyncio.Task]:
        """Wait for scheduled tasks; returns the ones still running after ``timeout``."""
        if not self._tasks:
            return []
        _, still_running = await asyncio.wait(set(self._tasks), timeout=timeout)
        if still_running:
            names = ", ".join(sorted(t.get_name() for t in still_running))
            logger.warning(f"{len(still_running)} background tasks still running: {names}")
        return list(still_running)
