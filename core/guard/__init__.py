"""Loop prevention and rate limiting for the relay."""

from __future__ import annotations

from core.guard.loop_guard import LoopGuard
from core.guard.rate_limiter import BurstLimiter, CooldownLimiter

__all__: list[str] = ["BurstLimiter", "CooldownLimiter", "LoopGuard"]
