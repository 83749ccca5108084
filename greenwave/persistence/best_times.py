"""Best-time stores.

The simulation core only needs ``read`` and ``write``.  Every store here
degrades quietly: an unavailable backend reads as empty and drops writes.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class BestTimeStore(Protocol):
    """Persistence collaborator for per-level best times."""

    def read(self, level_id: int) -> float | None: ...

    def write(self, level_id: int, time: float) -> None: ...


class NullBestTimeStore:
    """A store that remembers nothing."""

    def read(self, level_id: int) -> float | None:
        return None

    def write(self, level_id: int, time: float) -> None:
        return None


class InMemoryBestTimeStore:
    """Process-local store, mainly for tests and headless runs."""

    def __init__(self, initial: dict[int, float] | None = None) -> None:
        self.times: dict[int, float] = dict(initial or {})

    def read(self, level_id: int) -> float | None:
        return self.times.get(level_id)

    def write(self, level_id: int, time: float) -> None:
        self.times[level_id] = time


class JsonBestTimeStore:
    """Best times kept in a JSON object file, ``{"<level id>": seconds}``.

    A missing, unreadable or malformed file reads as empty; write errors
    are logged and dropped.
    """

    def __init__(self, path: Path | str) -> None:
        self.path: Path = Path(path)

    def load_all(self) -> dict[int, float]:
        """Return every stored time keyed by level id."""
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as fh:
                raw = json.load(fh)
        except (OSError, ValueError):
            logger.warning("Could not read best times from %s", self.path, exc_info=True)
            return {}
        if not isinstance(raw, dict):
            logger.warning("Ignoring best-time file %s: not a JSON object", self.path)
            return {}

        times: dict[int, float] = {}
        for key, value in raw.items():
            try:
                times[int(key)] = float(value)
            except (TypeError, ValueError):
                logger.warning("Ignoring malformed best-time entry %r: %r", key, value)
        return times

    def read(self, level_id: int) -> float | None:
        return self.load_all().get(level_id)

    def write(self, level_id: int, time: float) -> None:
        times = self.load_all()
        times[level_id] = time
        payload = {str(k): v for k, v in sorted(times.items())}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, indent=2)
        except OSError:
            logger.warning("Could not save best times to %s", self.path, exc_info=True)
