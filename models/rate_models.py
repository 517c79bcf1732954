"""Models for rate limiter state."""

from __future__ import annotations

from dataclasses import dataclass

__all__: list[str] = ["BurstKey", "BurstWindow", "CooldownKey"]

type CooldownKey = tuple[int, int]
"""(user id, channel id)"""

type BurstKey = tuple[int, int, int]
"""(user id, guild id, channel id)"""


@dataclass
class BurstWindow:
    """Counting window for the burst policy.

    Attributes:
        count (int): Actions counted in the current window. Never negative.
        reset_at (float): Monotonic time after which the window restarts.
    """

    count: int
    reset_at: float
