"""Core simulation modules for the Green Wave engine."""

from greenwave.core.clock import FrameClock
from greenwave.core.level import LevelCatalog, LevelDefinition, LevelNotFoundError
from greenwave.core.light import (
    YELLOW_AFTER_GREEN,
    YELLOW_BEFORE_GREEN,
    Phase,
    TrafficLightConfig,
    TrafficLightRuntime,
    current_phase_duration,
    cycle_duration,
    phase_at,
    time_until_next_phase,
)
from greenwave.core.physics import CarState, PedalInput, PhysicsConfig, step_car
from greenwave.core.runner import (
    AttemptState,
    AttemptStatus,
    LightSnapshot,
    LossReason,
    SimulationContext,
    Snapshot,
    WinReport,
)
from greenwave.core.scoring import (
    format_time,
    round_half_up,
    round_tenths,
    star_display,
    stars_for,
)
from greenwave.core.session import LevelRecord, ScoreKeeper, SessionState, SessionSummary

__all__ = [
    "AttemptState",
    "AttemptStatus",
    "CarState",
    "FrameClock",
    "LevelCatalog",
    "LevelDefinition",
    "LevelNotFoundError",
    "LevelRecord",
    "LightSnapshot",
    "LossReason",
    "PedalInput",
    "Phase",
    "PhysicsConfig",
    "ScoreKeeper",
    "SessionState",
    "SessionSummary",
    "SimulationContext",
    "Snapshot",
    "TrafficLightConfig",
    "TrafficLightRuntime",
    "WinReport",
    "YELLOW_AFTER_GREEN",
    "YELLOW_BEFORE_GREEN",
    "current_phase_duration",
    "cycle_duration",
    "format_time",
    "phase_at",
    "round_half_up",
    "round_tenths",
    "star_display",
    "stars_for",
    "step_car",
    "time_until_next_phase",
]
