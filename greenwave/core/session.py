"""Multi-level session tracking and best-time bookkeeping.

A session spans one run through the whole catalog, from level 1 to the
final level.  Each won level contributes a :class:`LevelRecord`; once
every level has a record the session can be summarised for the
"full run" screen and an optional leaderboard submission.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from greenwave.core.scoring import round_half_up, round_tenths, star_display
from greenwave.persistence.best_times import BestTimeStore, NullBestTimeStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LevelRecord:
    """Outcome of one won level within a session.

    Attributes:
        level_id: 1-based catalog id of the level.
        finish_time: Elapsed attempt time at the win, in seconds.
        stars: Star rating (1-3).
        smoothness_raw: Accumulated speed change of the winning attempt.
    """

    level_id: int
    finish_time: float
    stars: int
    smoothness_raw: float


@dataclass(frozen=True)
class SessionSummary:
    """Aggregate of a completed session.

    Attributes:
        total_time: Sum of every level's finish time.
        average_stars: Mean star rating rounded half up to one decimal.
        records: The per-level records in completion order.
    """

    total_time: float
    average_stars: float
    records: tuple[LevelRecord, ...]

    @property
    def rounded_stars(self) -> int:
        """Average stars rounded to a whole number of glyphs."""
        return round_half_up(self.average_stars)

    @property
    def star_glyphs(self) -> str:
        return star_display(self.rounded_stars)


class SessionState:
    """Mutable record of the levels won during the current session.

    Attributes:
        active: Whether a session is in progress.
        records: At most one record per level, in the order each level
            was first won.  Winning a level again replaces its record.
    """

    __slots__ = ("active", "records")

    def __init__(self) -> None:
        self.active: bool = False
        self.records: list[LevelRecord] = []

    def start(self) -> None:
        """Begin a fresh session, discarding any previous records."""
        self.active = True
        self.records = []

    def reset(self) -> None:
        """End the session and drop its records."""
        self.active = False
        self.records = []

    def add(self, record: LevelRecord) -> bool:
        """Store *record* if a session is active.

        A record for a level already in the session replaces the earlier
        one in place.

        Returns:
            ``True`` if the record was stored.
        """
        if not self.active:
            return False
        for i, existing in enumerate(self.records):
            if existing.level_id == record.level_id:
                self.records[i] = record
                return True
        self.records.append(record)
        return True

    def is_complete(self, level_ids: Iterable[int]) -> bool:
        """Whether the session holds exactly one record per id, in order."""
        return self.active and [r.level_id for r in self.records] == list(level_ids)

    def total_time(self) -> float:
        return sum(r.finish_time for r in self.records)

    def average_stars(self) -> float:
        """Mean stars across records, rounded to one decimal (0.0 if empty)."""
        if not self.records:
            return 0.0
        return round_tenths(sum(r.stars for r in self.records) / len(self.records))

    def summary(self) -> SessionSummary:
        return SessionSummary(
            total_time=self.total_time(),
            average_stars=self.average_stars(),
            records=tuple(self.records),
        )


class ScoreKeeper:
    """Best completion time per level, cached in front of a store.

    Store failures are logged and otherwise ignored: a broken store only
    means a best time is not remembered.
    """

    __slots__ = ("store", "_cache")

    def __init__(self, store: BestTimeStore | None = None) -> None:
        self.store: BestTimeStore = store if store is not None else NullBestTimeStore()
        self._cache: dict[int, float] = {}

    def best_time(self, level_id: int) -> float | None:
        """Return the best recorded time for *level_id*, if any."""
        if level_id in self._cache:
            return self._cache[level_id]
        try:
            stored = self.store.read(level_id)
        except Exception:
            logger.warning("Best-time store read failed", exc_info=True)
            return None
        if stored is not None:
            self._cache[level_id] = stored
        return stored

    def record(self, level_id: int, finish_time: float) -> bool:
        """Submit a finish time.

        The time is kept only if there is no previous best or it is
        strictly faster.

        Returns:
            ``True`` if *finish_time* is a new record.
        """
        previous = self.best_time(level_id)
        if previous is not None and finish_time >= previous:
            return False

        self._cache[level_id] = finish_time
        try:
            self.store.write(level_id, finish_time)
        except Exception:
            logger.warning("Best-time store write failed", exc_info=True)
        logger.debug("New best time for level %d: %.2fs", level_id, finish_time)
        return True
