"""Per-identity throughput limits.

Two independent policies:

* ``CooldownLimiter`` admits at most one action per (user, channel) per cooldown interval.
  Used for ordinary channel-to-channel relay.
* ``BurstLimiter`` admits up to N actions per (user, guild, channel) per window, optionally
  disabled per channel. Used for reaction-triggered translation.

Both are advisory. A rejected action is dropped silently by the caller. Windows reset lazily
on the next access; ``sweep`` only forgets keys that have gone quiet.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from models.rate_models import BurstKey, BurstWindow, CooldownKey
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable

__all__: list[str] = ["BurstLimiter", "CooldownLimiter"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class CooldownLimiter:
    """Single-timestamp cooldown keyed by (user, channel).

    Args:
        cooldown (float): Minimum seconds between admitted actions. Zero admits everything.
        max_tracked_keys (int): Key count above which stale keys are purged on admit.
        clock (Callable[[], float]): Monotonic time source.
    """

    def __init__(
        self, cooldown: float, *, max_tracked_keys: int = 5000, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self.cooldown: float = cooldown
        self.max_tracked_keys: int = max_tracked_keys
        self._clock: Callable[[], float] = clock
        self._last_admitted: dict[CooldownKey, float] = {}

    def __len__(self) -> int:
        return len(self._last_admitted)

    def admit(self, key: CooldownKey) -> bool:
        """Admit the action unless the key was admitted within the cooldown window."""
        now: float = self._clock()
        last: float | None = self._last_admitted.get(key)
        if last is not None and now - last < self.cooldown:
            logger.debug("Cooldown active for %s", key)
            return False

        self._last_admitted[key] = now
        if len(self._last_admitted) > self.max_tracked_keys:
            self._purge_stale(now)
        return True

    def _purge_stale(self, now: float) -> int:
        horizon: float = self.cooldown * 2
        stale: list[CooldownKey] = [key for key, last in self._last_admitted.items() if now - last > horizon]
        for key in stale:
            del self._last_admitted[key]
        logger.debug("Purged %d stale cooldown keys", len(stale))
        return len(stale)

    def sweep(self) -> int:
        return self._purge_stale(self._clock())


class BurstLimiter:
    """Counting window keyed by (user, guild, channel).

    Args:
        max_actions (int): Actions admitted per window.
        window (float): Window length in seconds.
        clock (Callable[[], float]): Monotonic time source.
    """

    def __init__(self, max_actions: int, window: float, *, clock: Callable[[], float] = time.monotonic) -> None:
        self.max_actions: int = max_actions
        self.window: float = window
        self._clock: Callable[[], float] = clock
        self._windows: dict[BurstKey, BurstWindow] = {}

    def __len__(self) -> int:
        return len(self._windows)

    def admit(self, key: BurstKey, *, enabled: bool = True) -> bool:
        """Count the action against the key's window.

        Args:
            key (BurstKey): (user id, guild id, channel id).
            enabled (bool): False bypasses the limit and always admits.

        Returns:
            bool: True if the action is admitted.
        """
        if not enabled:
            return True

        now: float = self._clock()
        state: BurstWindow | None = self._windows.get(key)
        if state is None or now >= state.reset_at:
            self._windows[key] = BurstWindow(count=1, reset_at=now + self.window)
            return True

        if state.count >= self.max_actions:
            logger.debug("Burst quota exhausted for %s", key)
            return False
        state.count += 1
        return True

    def sweep(self) -> int:
        """Drop windows whose reset deadline passed more than one window ago."""
        now: float = self._clock()
        stale: list[BurstKey] = [key for key, state in self._windows.items() if now - state.reset_at > self.window]
        for key in stale:
            del self._windows[key]
        return len(stale)
