"""Cyclic traffic-light model for the Green Wave simulation core.

Every light repeats the same four-phase cycle::

    Red -> YellowPreGreen -> Green -> BlinkingYellowPreRed -> Red ...

The phase at any instant is a pure function of the light's configuration
and the attempt's elapsed time.  Intervals are half-open, so at an exact
boundary instant the later phase wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Fixed transition durations shared by every light (seconds).
YELLOW_BEFORE_GREEN: float = 1.0
YELLOW_AFTER_GREEN: float = 1.5


class Phase(Enum):
    """The four phases of a light's repeating cycle, in cycle order."""

    RED = "red"
    YELLOW_PRE_GREEN = "yellow"
    GREEN = "green"
    BLINKING_YELLOW_PRE_RED = "blinking-yellow"

    @property
    def passable(self) -> bool:
        """Whether crossing the light in this phase keeps the attempt alive."""
        return self is not Phase.RED


@dataclass(frozen=True)
class TrafficLightConfig:
    """Immutable, authored description of a single traffic light.

    Attributes:
        position: World-space position of the stop line.
        green_duration: Length of the green phase in seconds (> 0).
        red_duration: Length of the red phase in seconds (> 0).
        phase_offset: Seconds added to the clock before evaluating the
            cycle (>= 0).  Lets neighbouring lights run out of step.
    """

    position: float
    green_duration: float
    red_duration: float
    phase_offset: float = 0.0

    def __post_init__(self) -> None:
        """Validate light parameters."""
        if self.green_duration <= 0.0:
            raise ValueError("green_duration must be > 0.")
        if self.red_duration <= 0.0:
            raise ValueError("red_duration must be > 0.")
        if self.phase_offset < 0.0:
            raise ValueError("phase_offset must be >= 0.")


class TrafficLightRuntime:
    """A configured light plus its one-shot ``passed`` flag for one attempt.

    Attributes:
        config: The authored light configuration.
        passed: Set once, when the car's front first crosses the light.
    """

    __slots__ = ("config", "passed")

    def __init__(self, config: TrafficLightConfig) -> None:
        self.config: TrafficLightConfig = config
        self.passed: bool = False

    def mark_passed(self) -> None:
        """Record the crossing.  The flag never returns to ``False``."""
        self.passed = True

    def __repr__(self) -> str:
        return (
            f"TrafficLightRuntime(position={self.config.position!r}, "
            f"passed={self.passed!r})"
        )


# ---------------------------------------------------------------------------
# Phase arithmetic
# ---------------------------------------------------------------------------


def cycle_duration(config: TrafficLightConfig) -> float:
    """Return the length of one full cycle in seconds."""
    return (
        config.red_duration
        + YELLOW_BEFORE_GREEN
        + config.green_duration
        + YELLOW_AFTER_GREEN
    )


def _phase_bounds(
    config: TrafficLightConfig, time: float
) -> tuple[Phase, float, float]:
    """Locate *time* within the cycle.

    Returns:
        ``(phase, cycle_position, phase_end)`` where ``cycle_position`` is
        in ``[0, cycle_duration)`` and ``phase_end`` is the cycle position
        at which the current phase ends.
    """
    cycle = cycle_duration(config)
    # Float modulo takes the sign of the divisor, so negative sums wrap.
    t = (time + config.phase_offset) % cycle

    red_end = config.red_duration
    yellow_end = red_end + YELLOW_BEFORE_GREEN
    green_end = yellow_end + config.green_duration

    if t < red_end:
        return Phase.RED, t, red_end
    if t < yellow_end:
        return Phase.YELLOW_PRE_GREEN, t, yellow_end
    if t < green_end:
        return Phase.GREEN, t, green_end
    return Phase.BLINKING_YELLOW_PRE_RED, t, cycle


def phase_at(config: TrafficLightConfig, time: float) -> Phase:
    """Return the phase of *config*'s light at elapsed *time*."""
    phase, _, _ = _phase_bounds(config, time)
    return phase


def time_until_next_phase(config: TrafficLightConfig, time: float) -> float:
    """Return the seconds remaining in the phase active at *time*."""
    _, t, phase_end = _phase_bounds(config, time)
    return phase_end - t


def phase_duration(config: TrafficLightConfig, phase: Phase) -> float:
    """Return the total length of *phase* for this light."""
    if phase is Phase.RED:
        return config.red_duration
    if phase is Phase.YELLOW_PRE_GREEN:
        return YELLOW_BEFORE_GREEN
    if phase is Phase.GREEN:
        return config.green_duration
    if phase is Phase.BLINKING_YELLOW_PRE_RED:
        return YELLOW_AFTER_GREEN
    raise ValueError(f"Unknown phase: {phase!r}")


def current_phase_duration(config: TrafficLightConfig, time: float) -> float:
    """Return the total length of the phase active at *time*.

    Used together with :func:`time_until_next_phase` to normalise a
    countdown bar.
    """
    return phase_duration(config, phase_at(config, time))
