from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from core.guard.loop_guard import LoopGuard

if TYPE_CHECKING:
    from tests.conftest import FakeClock


def test_marked_id_is_seen_until_ttl_elapses(clock: FakeClock) -> None:
    guard = LoopGuard(30.0, clock=clock)
    guard.mark(1)

    assert guard.seen(1)
    clock.advance(29.5)
    assert guard.seen(1)
    clock.advance(0.5)
    assert not guard.seen(1)
    assert len(guard) == 0


def test_unmarked_id_is_not_seen(clock: FakeClock) -> None:
    guard = LoopGuard(30.0, clock=clock)

    assert not guard.seen(99)


def test_mark_restarts_window(clock: FakeClock) -> None:
    guard = LoopGuard(10.0, clock=clock)
    guard.mark(1)
    clock.advance(8)
    guard.mark(1)
    clock.advance(8)

    assert guard.seen(1)


def test_check_and_mark_reports_previous_membership(clock: FakeClock) -> None:
    guard = LoopGuard(300.0, name="reaction_guard", clock=clock)

    assert guard.check_and_mark((10, "es")) is False
    assert guard.check_and_mark((10, "es")) is True
    assert guard.check_and_mark((10, "fr")) is False


def test_discard_releases_held_id(clock: FakeClock) -> None:
    guard = LoopGuard(300.0, clock=clock)
    guard.mark((100, "es"))

    guard.discard((100, "es"))
    guard.discard((101, "es"))

    assert not guard.seen((100, "es"))
    assert len(guard) == 0


def test_sweep_drops_only_expired_ids(clock: FakeClock) -> None:
    guard = LoopGuard(10.0, clock=clock)
    guard.mark(1)
    clock.advance(6)
    guard.mark(2)
    clock.advance(5)

    assert guard.sweep() == 1
    assert not guard.seen(1)
    assert guard.seen(2)


@pytest.mark.parametrize("ttl", [0, -5.0])
def test_non_positive_ttl_is_rejected(ttl: float) -> None:
    with pytest.raises(ValueError, match="ttl must be positive"):
        LoopGuard(ttl)
