"""Constant-speed feasibility analysis for level authoring.

Answers "at which fixed cruising speeds does a car sail through every
light of this level?"  The model ignores friction and pedal dynamics: a
car at speed ``v`` has its front bumper at each light ``i`` at::

    t_i = (position_i - car_length / 2) / (v * pixels_per_kmh_per_sec)

and the speed is feasible when none of the ``t_i`` lands on red.  It is
an authoring aid for spotting impossible or trivial levels, not a
replacement for playing them.
"""

from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from greenwave.core.level import LevelCatalog, LevelDefinition
from greenwave.core.light import YELLOW_AFTER_GREEN, YELLOW_BEFORE_GREEN
from greenwave.core.physics import PhysicsConfig
from greenwave.core.session import LevelRecord

# ---------------------------------------------------------------------------
# Vectorised phase checks
# ---------------------------------------------------------------------------


def _light_arrays(level: LevelDefinition) -> dict[str, NDArray[np.float64]]:
    lights = level.lights
    red = np.array([light.red_duration for light in lights], dtype=np.float64)
    green = np.array([light.green_duration for light in lights], dtype=np.float64)
    return {
        "position": np.array([light.position for light in lights], dtype=np.float64),
        "offset": np.array([light.phase_offset for light in lights], dtype=np.float64),
        "red": red,
        "cycle": red + YELLOW_BEFORE_GREEN + green + YELLOW_AFTER_GREEN,
    }


def constant_speed_crossing_times(
    level: LevelDefinition,
    speed: float | NDArray[np.float64],
    physics: PhysicsConfig | None = None,
) -> NDArray[np.float64]:
    """Return when a car at constant *speed* reaches each light.

    Args:
        level: Level to analyse.
        speed: A single speed or a 1-D array of speeds in km/h (> 0).
        physics: Tunables; defaults to :class:`PhysicsConfig()`.

    Returns:
        Array of shape ``(n_lights,)`` for a scalar speed, or
        ``(n_speeds, n_lights)`` for an array of speeds.  Lights already
        behind the front bumper at the start cross at time 0.

    Raises:
        ValueError: If any speed is <= 0.
    """
    physics = physics or PhysicsConfig()
    speeds = np.asarray(speed, dtype=np.float64)
    if np.any(speeds <= 0.0):
        raise ValueError("speed must be > 0.")

    arrays = _light_arrays(level)
    distance = np.maximum(arrays["position"] - physics.car_half_length, 0.0)
    rate = np.atleast_1d(speeds)[:, np.newaxis] * physics.pixels_per_kmh_per_sec
    times = distance[np.newaxis, :] / rate
    return times[0] if speeds.ndim == 0 else times


def red_at_crossing(
    level: LevelDefinition,
    speeds: NDArray[np.float64],
    physics: PhysicsConfig | None = None,
) -> NDArray[np.bool_]:
    """Boolean matrix ``(n_speeds, n_lights)``: True where the light is red."""
    arrays = _light_arrays(level)
    times = constant_speed_crossing_times(level, np.atleast_1d(speeds), physics)
    cycle_pos = np.mod(times + arrays["offset"], arrays["cycle"])
    return cycle_pos < arrays["red"]


def feasible_constant_speeds(
    level: LevelDefinition,
    physics: PhysicsConfig | None = None,
    speeds: NDArray[np.float64] | None = None,
) -> NDArray[np.float64]:
    """Return the candidate speeds that cross every light on a passable phase.

    Args:
        level: Level to analyse.
        physics: Tunables; defaults to :class:`PhysicsConfig()`.
        speeds: Candidate speeds in km/h.  Defaults to every whole km/h
            from 1 to ``physics.max_speed``.
    """
    physics = physics or PhysicsConfig()
    if speeds is None:
        speeds = np.arange(1.0, np.floor(physics.max_speed) + 1.0)
    speeds = np.asarray(speeds, dtype=np.float64)
    if not level.lights:
        return speeds
    blocked = red_at_crossing(level, speeds, physics)
    return speeds[~blocked.any(axis=1)]


# ---------------------------------------------------------------------------
# Report tables
# ---------------------------------------------------------------------------


def level_report(
    catalog: LevelCatalog,
    physics: PhysicsConfig | None = None,
) -> pd.DataFrame:
    """Summarise every level's constant-speed feasibility.

    Returns:
        One row per level with columns ``level_id``, ``name``, ``lights``,
        ``finish_position``, ``start_speed``, ``feasible_speeds``,
        ``min_feasible_speed``, ``max_feasible_speed`` (NaN when none)
        and ``start_speed_feasible``.
    """
    physics = physics or PhysicsConfig()
    rows: list[dict[str, Any]] = []
    for level_id, level in zip(catalog.ids(), catalog):
        feasible = feasible_constant_speeds(level, physics)
        start_ok = bool(
            level.start_speed > 0.0
            and feasible_constant_speeds(
                level, physics, np.array([level.start_speed])
            ).size
        )
        rows.append(
            {
                "level_id": level_id,
                "name": level.name,
                "lights": len(level.lights),
                "finish_position": level.finish_position,
                "start_speed": level.start_speed,
                "feasible_speeds": int(feasible.size),
                "min_feasible_speed": float(feasible.min()) if feasible.size else np.nan,
                "max_feasible_speed": float(feasible.max()) if feasible.size else np.nan,
                "start_speed_feasible": start_ok,
            }
        )
    return pd.DataFrame(rows)


def session_table(records: list[LevelRecord] | tuple[LevelRecord, ...]) -> pd.DataFrame:
    """Tabulate session records, one row per won level."""
    return pd.DataFrame(
        [
            {
                "level": r.level_id,
                "time": r.finish_time,
                "stars": r.stars,
                "smoothness": r.smoothness_raw,
            }
            for r in records
        ],
        columns=["level", "time", "stars", "smoothness"],
    )
