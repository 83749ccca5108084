"""Tests for session aggregation and best-time bookkeeping."""

import pytest

from greenwave.core.session import LevelRecord, ScoreKeeper, SessionState
from greenwave.persistence.best_times import InMemoryBestTimeStore

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def _record(level_id: int, time: float, stars: int) -> LevelRecord:
    return LevelRecord(
        level_id=level_id, finish_time=time, stars=stars, smoothness_raw=12.34
    )


class _BrokenStore:
    """Store whose backend is unavailable."""

    def read(self, level_id: int) -> float | None:
        raise OSError("storage unavailable")

    def write(self, level_id: int, time: float) -> None:
        raise OSError("storage unavailable")


# ---------------------------------------------------------------------------
# SessionState
# ---------------------------------------------------------------------------


def test_inactive_session_ignores_records() -> None:
    """Levels won outside a session are not tracked."""
    session = SessionState()
    assert session.add(_record(2, 10.0, 3)) is False
    assert session.records == []


def test_session_totals_and_average() -> None:
    """Total time sums finish times; average stars rounds to one decimal."""
    session = SessionState()
    session.start()
    for level_id, (time, stars) in enumerate([(10.0, 3), (12.5, 2), (9.0, 2)], 1):
        assert session.add(_record(level_id, time, stars))

    assert session.total_time() == pytest.approx(31.5)
    assert session.average_stars() == 2.3
    assert session.is_complete([1, 2, 3])
    assert not session.is_complete([1, 2, 3, 4])


def test_rewinning_a_level_replaces_its_record() -> None:
    """A level won twice keeps one record, holding the latest result."""
    session = SessionState()
    session.start()
    session.add(_record(1, 10.0, 3))
    session.add(_record(2, 12.0, 1))
    session.add(_record(2, 11.0, 2))

    assert [r.level_id for r in session.records] == [1, 2]
    assert session.records[1].finish_time == 11.0
    assert session.records[1].stars == 2
    assert not session.is_complete([1, 2, 3])
    assert session.is_complete([1, 2])


def test_completion_needs_every_level_in_order() -> None:
    """Matching the level count is not enough; the ids must match."""
    session = SessionState()
    session.start()
    session.add(_record(2, 10.0, 3))
    session.add(_record(3, 10.0, 3))
    session.add(_record(4, 10.0, 3))
    assert not session.is_complete([1, 2, 3])

    session.reset()
    assert not session.is_complete([])


def test_average_stars_rounds_halves_up() -> None:
    """A mean of 2.25 shows as 2.3, not the 2.2 of banker's rounding."""
    session = SessionState()
    session.start()
    for level_id, stars in enumerate([3, 2, 2, 2], 1):
        session.add(_record(level_id, 10.0, stars))

    assert session.average_stars() == 2.3
    assert session.summary().average_stars == 2.3


def test_summary_uses_two_roundings() -> None:
    """One decimal for the text, nearest whole star (halves up) for glyphs."""
    session = SessionState()
    session.start()
    session.add(_record(1, 10.0, 3))
    session.add(_record(2, 11.0, 2))

    summary = session.summary()
    assert summary.average_stars == 2.5
    assert summary.rounded_stars == 3
    assert summary.star_glyphs == "★★★"
    assert len(summary.records) == 2


def test_start_and_reset_clear_records() -> None:
    """Starting again or resetting drops earlier records."""
    session = SessionState()
    session.start()
    session.add(_record(1, 10.0, 3))
    session.start()
    assert session.records == []
    session.add(_record(1, 10.0, 3))
    session.reset()
    assert session.active is False
    assert session.records == []
    assert session.average_stars() == 0.0


# ---------------------------------------------------------------------------
# ScoreKeeper
# ---------------------------------------------------------------------------


def test_first_time_is_a_record() -> None:
    """With no history any finish is a new best and is persisted."""
    store = InMemoryBestTimeStore()
    keeper = ScoreKeeper(store)
    assert keeper.record(1, 12.0) is True
    assert keeper.best_time(1) == 12.0
    assert store.times == {1: 12.0}


def test_only_strictly_faster_times_replace_best() -> None:
    """Equal or slower times leave the best untouched."""
    store = InMemoryBestTimeStore({1: 12.0})
    keeper = ScoreKeeper(store)
    assert keeper.record(1, 13.0) is False
    assert keeper.record(1, 12.0) is False
    assert keeper.record(1, 11.5) is True
    assert store.times[1] == 11.5


def test_default_store_is_a_no_op() -> None:
    """Without a store, bests live only in the in-process cache."""
    keeper = ScoreKeeper()
    assert keeper.best_time(4) is None
    assert keeper.record(4, 20.0) is True
    assert keeper.best_time(4) == 20.0


def test_broken_store_degrades_gracefully() -> None:
    """Store errors are swallowed; the cache still works."""
    keeper = ScoreKeeper(_BrokenStore())
    assert keeper.best_time(1) is None
    assert keeper.record(1, 15.0) is True
    assert keeper.best_time(1) == 15.0
    assert keeper.record(1, 16.0) is False
