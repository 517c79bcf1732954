"""Channel pair graph and its persistence."""

from __future__ import annotations

from core.pairs.graph import (
    ChannelPairGraph,
    DuplicatePairError,
    PairGraphError,
    PairNotFoundError,
    PairValidationError,
)
from core.pairs.persistence_queue import PersistenceQueue
from core.pairs.store import PairStore, PersistenceError

__all__: list[str] = [
    "ChannelPairGraph",
    "DuplicatePairError",
    "PairGraphError",
    "PairNotFoundError",
    "PairStore",
    "PairValidationError",
    "PersistenceError",
    "PersistenceQueue",
]
