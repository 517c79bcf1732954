from __future__ import annotations

from typing import TYPE_CHECKING

from core.guard.rate_limiter import BurstLimiter, CooldownLimiter

if TYPE_CHECKING:
    from tests.conftest import FakeClock


class TestCooldownLimiter:
    def test_second_action_within_cooldown_is_rejected(self, clock: FakeClock) -> None:
        limiter = CooldownLimiter(1.0, clock=clock)

        assert limiter.admit((1, 10))
        clock.advance(0.5)
        assert not limiter.admit((1, 10))
        clock.advance(0.5)
        assert limiter.admit((1, 10))

    def test_rejection_does_not_extend_cooldown(self, clock: FakeClock) -> None:
        limiter = CooldownLimiter(1.0, clock=clock)
        limiter.admit((1, 10))
        clock.advance(0.75)
        limiter.admit((1, 10))
        clock.advance(0.25)

        assert limiter.admit((1, 10))

    def test_keys_are_independent(self, clock: FakeClock) -> None:
        limiter = CooldownLimiter(5.0, clock=clock)

        assert limiter.admit((1, 10))
        assert limiter.admit((1, 11))
        assert limiter.admit((2, 10))

    def test_zero_cooldown_admits_everything(self, clock: FakeClock) -> None:
        limiter = CooldownLimiter(0.0, clock=clock)

        assert all(limiter.admit((1, 10)) for _ in range(5))

    def test_stale_keys_purged_when_over_threshold(self, clock: FakeClock) -> None:
        limiter = CooldownLimiter(1.0, max_tracked_keys=2, clock=clock)
        limiter.admit((1, 1))
        limiter.admit((2, 1))
        clock.advance(2.5)
        limiter.admit((3, 1))

        assert len(limiter) == 1

    def test_sweep_keeps_recent_keys(self, clock: FakeClock) -> None:
        limiter = CooldownLimiter(1.0, clock=clock)
        limiter.admit((1, 1))
        clock.advance(3)
        limiter.admit((2, 1))

        assert limiter.sweep() == 1
        assert len(limiter) == 1


class TestBurstLimiter:
    def test_admits_up_to_max_then_rejects(self, clock: FakeClock) -> None:
        limiter = BurstLimiter(3, 60.0, clock=clock)
        key = (1, 100, 10)

        assert [limiter.admit(key) for _ in range(4)] == [True, True, True, False]

    def test_window_reset_starts_count_at_one(self, clock: FakeClock) -> None:
        limiter = BurstLimiter(2, 60.0, clock=clock)
        key = (1, 100, 10)
        limiter.admit(key)
        limiter.admit(key)
        assert not limiter.admit(key)

        clock.advance(60)

        assert limiter.admit(key)
        assert limiter.admit(key)
        assert not limiter.admit(key)

    def test_disabled_always_admits_without_tracking(self, clock: FakeClock) -> None:
        limiter = BurstLimiter(1, 60.0, clock=clock)
        key = (1, 100, 10)

        assert all(limiter.admit(key, enabled=False) for _ in range(5))
        assert len(limiter) == 0

    def test_sweep_drops_windows_idle_for_a_full_window(self, clock: FakeClock) -> None:
        limiter = BurstLimiter(5, 10.0, clock=clock)
        limiter.admit((1, 100, 10))
        clock.advance(15)
        limiter.admit((2, 100, 10))
        clock.advance(6)

        assert limiter.sweep() == 1
        assert len(limiter) == 1
