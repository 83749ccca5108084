"""Frame clock that turns wall-clock timestamps into simulation ticks."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class FrameClock:
    """Derives a bounded tick length from successive frame timestamps.

    The first sample only primes the clock.  A delta larger than
    ``max_delta`` (a dropped or backgrounded frame) is discarded so the
    simulation never takes one large, unrealistic jump; the next
    normal-sized delta resumes ticking.

    Attributes:
        max_delta: Largest delta, in seconds, that is still simulated.
        skipped_frames: Number of frames discarded so far.
    """

    __slots__ = ("max_delta", "skipped_frames", "_last_timestamp")

    def __init__(self, max_delta: float = 0.1) -> None:
        if max_delta <= 0.0:
            raise ValueError("max_delta must be > 0.")
        self.max_delta: float = max_delta
        self.skipped_frames: int = 0
        self._last_timestamp: float | None = None

    def tick(self, timestamp: float) -> float | None:
        """Record a frame timestamp (seconds, monotonic).

        Returns:
            The delta to simulate, or ``None`` if this frame must not
            advance the simulation (first frame, non-positive delta, or a
            delta above ``max_delta``).
        """
        last = self._last_timestamp
        self._last_timestamp = timestamp
        if last is None:
            return None

        delta: float = timestamp - last
        if delta <= 0.0:
            return None
        if delta > self.max_delta:
            self.skipped_frames += 1
            logger.debug("Skipping frame with delta %.3fs", delta)
            return None
        return delta

    def reset(self) -> None:
        """Forget the last timestamp so the next frame primes the clock."""
        self._last_timestamp = None
