"""Read-only status snapshot exposed to the administrative command surface."""

from __future__ import annotations

from dataclasses import dataclass, field

__all__: list[str] = ["RelayStatus", "SweepReport"]


@dataclass
class RelayStatus:
    """Relay status counters.

    Attributes:
        pair_count (int): Channel pairs loaded across all guilds.
        guild_pair_count (int | None): Pairs of the queried guild, if one was given.
        cache_size (int): Translation cache entries currently held.
        cache_hits (int): Cache hits since start.
        cache_misses (int): Cache misses since start.
        loop_guard_size (int): Message ids held by the loop guard.
        reaction_guard_size (int): (message id, target tag) keys held by the reaction guard.
        cooldown_keys (int): Identities tracked by the cooldown limiter.
        burst_keys (int): Identities tracked by the burst limiter.
        providers (list[str]): Active providers in chain order.
        persistence_failures (int): Failed persistence writes since start.
    """

    pair_count: int
    cache_size: int
    loop_guard_size: int
    reaction_guard_size: int
    cooldown_keys: int
    burst_keys: int
    guild_pair_count: int | None = None
    cache_hits: int = 0
    cache_misses: int = 0
    providers: list[str] = field(default_factory=list)
    persistence_failures: int = 0


@dataclass
class SweepReport:
    """Number of entries removed by one maintenance sweep, per collection."""

    cache: int = 0
    loop_guard: int = 0
    reaction_guard: int = 0
    cooldown: int = 0
    burst: int = 0

    @property
    def total(self) -> int:
        return self.cache + self.loop_guard + self.reaction_guard + self.cooldown + self.burst
