from __future__ import annotations

import pytest

from models.config_models import Config


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now: float = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def config() -> Config:
    cfg = Config()
    cfg.TRANSLATION.RETRY_DELAY = 0.0
    return cfg

