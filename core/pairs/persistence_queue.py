# ruff: noqa: BLE001
"""Asynchronous write-through queue for channel pair persistence.

Graph mutations enqueue store writes here and return immediately. A single worker task runs
the writes in order, each bounded by a timeout. Failures are logged and never reach the
caller; the in-memory graph stays authoritative.
"""

from __future__ import annotations

import asyncio
import contextlib
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from core.pairs.store import PersistenceError
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Awaitable, Callable

__all__: list[str] = ["PersistenceJob", "PersistenceQueue"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


@dataclass
class PersistenceJob:
    """One queued write.

    Attributes:
        description (str): Label used in log messages.
        func (Callable[..., Awaitable[Any]]): Coroutine function performing the write.
        args (tuple[Any, ...]): Positional arguments for ``func``.
    """

    description: str
    func: Callable[..., Awaitable[Any]]
    args: tuple[Any, ...] = ()


class PersistenceQueue:
    """FIFO queue of persistence writes drained by one worker task.

    Args:
        write_timeout (float): Seconds allowed per write before it is abandoned and logged.
    """

    def __init__(self, write_timeout: float = 5.0) -> None:
        self.write_timeout: float = write_timeout
        self._queue: asyncio.Queue[PersistenceJob] = asyncio.Queue()
        self._worker: asyncio.Task[None] | None = None
        self.failures: int = 0

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    @property
    def is_running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    async def component_load(self) -> None:
        """Start the worker task."""
        if self.is_running:
            return
        self._worker = asyncio.create_task(self._run(), name="pair-persistence")
        logger.info("Persistence queue started")

    async def component_teardown(self) -> None:
        """Drain the queued writes (bounded by the write timeout per job) and stop the worker."""
        if self._worker is None:
            return
        try:
            await asyncio.wait_for(self._queue.join(), timeout=self.write_timeout * max(self.pending, 1))
        except TimeoutError:
            logger.error("Persistence queue shut down with %d unwritten jobs", self.pending)
        self._worker.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._worker
        self._worker = None
        logger.info("Persistence queue stopped")

    def submit(self, description: str, func: Callable[..., Awaitable[Any]], *args: Any) -> None:
        """Queue a write. Never blocks and never raises for write failures."""
        self._queue.put_nowait(PersistenceJob(description=description, func=func, args=args))
        logger.debug("Queued persistence job '%s' (pending: %d)", description, self.pending)

    async def wait_idle(self) -> None:
        """Wait until every queued write has been attempted."""
        await self._queue.join()

    async def _run(self) -> None:
        while True:
            job: PersistenceJob = await self._queue.get()
            try:
                await self._execute(job)
            finally:
                self._queue.task_done()

    async def _execute(self, job: PersistenceJob) -> None:
        try:
            await asyncio.wait_for(job.func(*job.args), timeout=self.write_timeout)
        except TimeoutError:
            self.failures += 1
            logger.error("Persistence job '%s' timed out after %.1f sec", job.description, self.write_timeout)
        except PersistenceError as err:
            self.failures += 1
            logger.error("Persistence job '%s' failed: %s", job.description, err)
        except Exception:
            self.failures += 1
            logger.exception("Persistence job '%s' failed unexpectedly", job.description)
        else:
            logger.debug("Persistence job '%s' completed", job.description)
