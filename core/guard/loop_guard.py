"""Loop guard.

A set of identifiers with a fixed time-to-live. Membership alone is the test. Expired
identifiers are treated as absent on lookup and physically removed by ``sweep``.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable, Hashable

__all__: list[str] = ["LoopGuard"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class LoopGuard:
    """Time-bounded membership set.

    The relay keeps two instances: one keyed by message id (inbound and relayed messages) and
    a companion keyed by (message id, target tag) for the reaction path.

    Args:
        ttl (float): Seconds an identifier stays held after ``mark``.
        name (str): Label used in log messages.
        clock (Callable[[], float]): Monotonic time source.
    """

    def __init__(self, ttl: float, *, name: str = "loop_guard", clock: Callable[[], float] = time.monotonic) -> None:
        if ttl <= 0:
            msg: str = f"ttl must be positive, got {ttl}"
            raise ValueError(msg)
        self.ttl: float = ttl
        self.name: str = name
        self._clock: Callable[[], float] = clock
        self._expires_at: dict[Hashable, float] = {}

    def __len__(self) -> int:
        return len(self._expires_at)

    def seen(self, key: Hashable) -> bool:
        """Return True while ``key`` is held."""
        expires_at: float | None = self._expires_at.get(key)
        if expires_at is None:
            return False
        if self._clock() >= expires_at:
            del self._expires_at[key]
            return False
        return True

    def mark(self, key: Hashable) -> None:
        """Hold ``key`` for the guard's TTL, restarting the window if it is already held."""
        self._expires_at[key] = self._clock() + self.ttl

    def discard(self, key: Hashable) -> None:
        """Release ``key`` before its TTL runs out."""
        self._expires_at.pop(key, None)

    def check_and_mark(self, key: Hashable) -> bool:
        """Mark ``key`` and report whether it was already held.

        Returns:
            bool: True if the key was held before this call.
        """
        if self.seen(key):
            return True
        self.mark(key)
        return False

    def sweep(self) -> int:
        """Drop expired identifiers.

        Returns:
            int: Number of removed identifiers.
        """
        now: float = self._clock()
        expired: list[Hashable] = [key for key, expires_at in self._expires_at.items() if now >= expires_at]
        for key in expired:
            del self._expires_at[key]
        if expired:
            logger.debug("'%s' swept %d expired ids", self.name, len(expired))
        return len(expired)
