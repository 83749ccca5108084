"""Configuration loader for the Green Wave simulation engine."""

from __future__ import annotations

from dataclasses import fields
from pathlib import Path
from typing import Any

import yaml

from greenwave.core.level import LevelCatalog, LevelDefinition
from greenwave.core.light import TrafficLightConfig
from greenwave.core.physics import PhysicsConfig

DATA_DIR: Path = Path(__file__).resolve().parent.parent / "data"
LEVELS_PATH: Path = DATA_DIR / "levels.yaml"

_LEVEL_FIELDS: tuple[str, ...] = ("name", "start_speed", "finish_position", "lights")
_LIGHT_FIELDS: tuple[str, ...] = ("position", "green_duration", "red_duration")
_PHYSICS_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(PhysicsConfig))


def _read_yaml(path: Path | None) -> dict[str, Any]:
    """Read the catalog file and return its top-level mapping."""
    levels_path = path or LEVELS_PATH
    if not levels_path.exists():
        raise FileNotFoundError(f"Level file not found: {levels_path}")

    with open(levels_path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh)

    if not isinstance(data, dict):
        raise ValueError(f"{levels_path}: expected a mapping at the top level")
    return data


def _number(value: Any, where: str, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(
            f"{where}: '{field}' must be numeric, got {type(value).__name__}"
        )
    return float(value)


def _parse_light(entry: Any, where: str) -> TrafficLightConfig:
    if not isinstance(entry, dict):
        raise ValueError(f"{where}: expected a mapping, got {type(entry).__name__}")
    for field in _LIGHT_FIELDS:
        if field not in entry:
            raise ValueError(f"{where} is missing required field '{field}'")
    try:
        return TrafficLightConfig(
            position=_number(entry["position"], where, "position"),
            green_duration=_number(entry["green_duration"], where, "green_duration"),
            red_duration=_number(entry["red_duration"], where, "red_duration"),
            phase_offset=_number(entry.get("offset", 0.0), where, "offset"),
        )
    except ValueError as exc:
        raise ValueError(f"{where}: {exc}") from exc


def load_levels(path: Path | None = None) -> LevelCatalog:
    """Load the level catalog from a YAML file.

    Each entry under ``levels`` is validated and converted into a
    :class:`LevelDefinition`; lights become :class:`TrafficLightConfig`.

    Args:
        path: Optional override for the level file path.

    Returns:
        The ordered :class:`LevelCatalog`.

    Raises:
        FileNotFoundError: If the level file does not exist.
        ValueError: If any entry is missing fields, has non-numeric
            values, or breaks an authoring invariant (light order,
            finish beyond the last light, positive durations).
    """
    data = _read_yaml(path)
    entries = data.get("levels")
    if not isinstance(entries, list) or not entries:
        raise ValueError("Level file must contain a non-empty 'levels' list")

    levels: list[LevelDefinition] = []
    for idx, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ValueError(f"Level entry {idx} must be a mapping")
        where = f"Level entry {idx} ({entry.get('name', '<unknown>')})"

        # --- Validate required fields ---
        for field in _LEVEL_FIELDS:
            if field not in entry:
                raise ValueError(f"{where} is missing required field '{field}'")
        if not isinstance(entry["lights"], list):
            raise ValueError(f"{where}: 'lights' must be a list")

        lights = tuple(
            _parse_light(light, f"{where} light {light_idx}")
            for light_idx, light in enumerate(entry["lights"])
        )
        try:
            levels.append(
                LevelDefinition(
                    name=str(entry["name"]),
                    start_speed=_number(entry["start_speed"], where, "start_speed"),
                    lights=lights,
                    finish_position=_number(
                        entry["finish_position"], where, "finish_position"
                    ),
                )
            )
        except ValueError as exc:
            raise ValueError(f"{where}: {exc}") from exc

    return LevelCatalog(levels)


def load_physics(path: Path | None = None) -> PhysicsConfig:
    """Load physics tunables from the ``physics`` section of the level file.

    Missing keys keep their :class:`PhysicsConfig` defaults; a file
    without a ``physics`` section yields the defaults.

    Raises:
        FileNotFoundError: If the level file does not exist.
        ValueError: On unknown keys, non-numeric values or values that
            fail :class:`PhysicsConfig` validation.
    """
    data = _read_yaml(path)
    section = data.get("physics") or {}
    if not isinstance(section, dict):
        raise ValueError("'physics' must be a mapping")

    unknown = sorted(set(section) - set(_PHYSICS_FIELDS))
    if unknown:
        raise ValueError(f"Unknown physics field(s): {', '.join(unknown)}")

    values = {key: _number(val, "physics", key) for key, val in section.items()}
    return PhysicsConfig(**values)
