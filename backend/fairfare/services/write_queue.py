"""
Best-effort queue for fire-and-forget remote writes.

Jobs run one at a time on a background task. A failed job is logged and
never retried; local state is not rolled back. When the queue is full new
jobs are dropped with a warning.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

Job = Callable[[], Awaitable[Any]]


class WriteQueue:
    """Bounded queue of remote write jobs with logged outcomes."""

    def __init__(self, maxsize: int = 100):
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._worker: Optional[asyncio.Task] = None
        self.completed = 0
        self.failed = 0
        self.dropped = 0

    def submit(self, description: str, job: Job) -> bool:
        """Enqueue a job; returns False if it was dropped."""
        try:
            self._queue.put_nowait((description, job))
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(f"Write queue full, dropping: {description}")
            return False
        return True

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    async def start(self):
        """Start the background worker on the running loop."""
        if self._worker is None:
            self._worker = asyncio.create_task(self._run())

    async def _run(self):
        while True:
            description, job = await self._queue.get()
            try:
                await self._execute(description, job)
            finally:
                self._queue.task_done()

    async def _execute(self, description: str, job: Job):
        try:
            await job()
        except Exception as e:
            self.failed += 1
            logger.warning(f"Remote write failed ({description}): {e}")
        else:
            self.completed += 1
            logger.debug(f"Remote write done ({description})")

    async def drain(self):
        """Wait until every queued job has run."""
        if self._worker is not None:
            await self._queue.join()
            return
        # No worker: run jobs inline
        while not self._queue.empty():
            description, job = self._queue.get_nowait()
            try:
                await self._execute(description, job)
            finally:
                self._queue.task_done()

    async def stop(self):
        """Finish queued jobs and stop the worker."""
        await self.drain()
        if self._worker is not None:
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
            self._worker = None
