"""Full-run leaderboard boundary.

The core submits once per completed session and only cares whether the
submission succeeded.  Network transport is left to the embedding
application; this module defines the contract, the payload shape, and
username validation.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from greenwave.core.session import LevelRecord, SessionSummary

USERNAME_MIN_LENGTH: int = 3
USERNAME_MAX_LENGTH: int = 20
_USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9 _-]+$")

# Entries returned by ``top`` when no limit is given.
DEFAULT_TOP_N: int = 10


class LeaderboardSubmitter(Protocol):
    """Collaborator that publishes a completed session."""

    def submit(
        self,
        username: str,
        total_time: float,
        average_stars: float,
        levels: list[dict[str, Any]],
    ) -> bool: ...


class NullLeaderboard:
    """Submitter used when no leaderboard is configured.  Always fails."""

    def submit(
        self,
        username: str,
        total_time: float,
        average_stars: float,
        levels: list[dict[str, Any]],
    ) -> bool:
        return False


class InMemoryLeaderboard:
    """Leaderboard held in memory, ranked by ascending total time."""

    def __init__(self) -> None:
        self.entries: list[dict[str, Any]] = []

    def submit(
        self,
        username: str,
        total_time: float,
        average_stars: float,
        levels: list[dict[str, Any]],
    ) -> bool:
        self.entries.append(
            {
                "username": username,
                "totalTime": round(total_time, 1),
                "averageStars": average_stars,
                "levels": list(levels),
            }
        )
        return True

    def top(self, limit: int = DEFAULT_TOP_N) -> list[dict[str, Any]]:
        """Return the fastest *limit* entries."""
        return sorted(self.entries, key=lambda e: e["totalTime"])[:limit]


def validate_username(username: str) -> str:
    """Check a leaderboard name and return it trimmed.

    Raises:
        ValueError: If the trimmed name is shorter than 3 or longer than
            20 characters, or uses characters other than letters, digits,
            spaces, ``_`` and ``-``.
    """
    trimmed = username.strip()
    if len(trimmed) < USERNAME_MIN_LENGTH:
        raise ValueError(
            f"Username must be at least {USERNAME_MIN_LENGTH} characters"
        )
    if len(trimmed) > USERNAME_MAX_LENGTH:
        raise ValueError(
            f"Username must be {USERNAME_MAX_LENGTH} characters or less"
        )
    if not _USERNAME_PATTERN.match(trimmed):
        raise ValueError(
            "Username can only contain letters, numbers, spaces, _, and -"
        )
    return trimmed


def level_breakdown(records: Sequence[LevelRecord]) -> list[dict[str, Any]]:
    """Per-level payload rows with time and smoothness to one decimal."""
    return [
        {
            "level": r.level_id,
            "time": round(r.finish_time, 1),
            "stars": r.stars,
            "smoothness": round(r.smoothness_raw, 1),
        }
        for r in records
    ]


def build_payload(username: str, summary: SessionSummary) -> dict[str, Any]:
    """Assemble the submission body for a completed session."""
    return {
        "username": username,
        "totalTime": round(summary.total_time, 1),
        "averageStars": summary.average_stars,
        "levels": level_breakdown(summary.records),
    }
