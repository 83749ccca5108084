"""Tests for the YAML level catalog and physics loader."""

from pathlib import Path

import pytest

from greenwave.config import load_levels, load_physics
from greenwave.core.level import LevelCatalog, LevelDefinition
from greenwave.core.physics import PedalInput, PhysicsConfig
from greenwave.core.runner import AttemptStatus, SimulationContext

_SHIPPED_NAMES: list[str] = [
    "First light",
    "Easy start",
    "Finding the rhythm",
    "Keep the pace",
    "Speed adjustment",
    "The long road",
    "Patience required",
]


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "levels.yaml"
    path.write_text(text, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Shipped catalog
# ---------------------------------------------------------------------------


def test_catalog_loads_all_seven_levels() -> None:
    """The shipped catalog holds seven levels in play order."""
    catalog = load_levels()
    assert isinstance(catalog, LevelCatalog)
    assert [level.name for level in catalog] == _SHIPPED_NAMES
    for level in catalog:
        assert isinstance(level, LevelDefinition)


def test_catalog_light_counts_and_layout() -> None:
    """Every level has 1-7 ascending lights before its finish line."""
    for level in load_levels():
        assert 1 <= len(level.lights) <= 7
        positions = [light.position for light in level.lights]
        assert positions == sorted(positions)
        assert level.finish_position > positions[-1]


def test_tutorial_level_layout() -> None:
    """Level 1 is one 4 s green / 2 s red light at 600, finish at 900."""
    level = load_levels().get(1)
    assert level.start_speed == 40.0
    assert level.finish_position == 900.0
    (light,) = level.lights
    assert (light.position, light.green_duration, light.red_duration, light.phase_offset) == (
        600.0,
        4.0,
        2.0,
        0.0,
    )


def test_shipped_physics_matches_defaults() -> None:
    """The physics section restates the default tuning."""
    assert load_physics() == PhysicsConfig()


def test_tutorial_level_won_at_full_throttle() -> None:
    """End to end: the shipped tutorial is won by holding the throttle."""
    ctx = SimulationContext(load_levels(), physics=load_physics())
    ctx.start_level(1)
    status = AttemptStatus.PLAYING
    for _ in range(1000):
        status = ctx.step(1.0 / 60.0, PedalInput(throttle=True))
        if status is not AttemptStatus.PLAYING:
            break
    assert status is AttemptStatus.WON


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def test_missing_file_raises(tmp_path: Path) -> None:
    """A missing level file is a FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_levels(tmp_path / "nope.yaml")


def test_missing_level_field_raises(tmp_path: Path) -> None:
    """Each level needs name, start_speed, finish_position and lights."""
    path = _write(
        tmp_path,
        "levels:\n"
        "  - name: Broken\n"
        "    start_speed: 40\n"
        "    lights: []\n",
    )
    with pytest.raises(ValueError, match="missing required field 'finish_position'"):
        load_levels(path)


def test_missing_light_field_raises(tmp_path: Path) -> None:
    """Lights need position and both durations; offset defaults to 0."""
    path = _write(
        tmp_path,
        "levels:\n"
        "  - name: Broken\n"
        "    start_speed: 40\n"
        "    finish_position: 900\n"
        "    lights:\n"
        "      - {position: 600, green_duration: 4}\n",
    )
    with pytest.raises(ValueError, match="light 0 is missing required field 'red_duration'"):
        load_levels(path)


def test_offset_defaults_to_zero(tmp_path: Path) -> None:
    """Omitting offset gives a light in phase with the clock."""
    path = _write(
        tmp_path,
        "levels:\n"
        "  - name: Simple\n"
        "    start_speed: 40\n"
        "    finish_position: 900\n"
        "    lights:\n"
        "      - {position: 600, green_duration: 4, red_duration: 2}\n",
    )
    assert load_levels(path).get(1).lights[0].phase_offset == 0.0


def test_unordered_lights_raise(tmp_path: Path) -> None:
    """Authoring order is enforced at load time."""
    path = _write(
        tmp_path,
        "levels:\n"
        "  - name: Backwards\n"
        "    start_speed: 40\n"
        "    finish_position: 900\n"
        "    lights:\n"
        "      - {position: 600, green_duration: 4, red_duration: 2}\n"
        "      - {position: 300, green_duration: 4, red_duration: 2}\n",
    )
    with pytest.raises(ValueError, match="strictly ascending"):
        load_levels(path)


def test_non_numeric_value_raises(tmp_path: Path) -> None:
    """Numeric fields reject strings."""
    path = _write(
        tmp_path,
        "levels:\n"
        "  - name: Typo\n"
        "    start_speed: fast\n"
        "    finish_position: 900\n"
        "    lights: []\n",
    )
    with pytest.raises(ValueError, match="'start_speed' must be numeric"):
        load_levels(path)


def test_empty_levels_list_raises(tmp_path: Path) -> None:
    """A file without levels is rejected."""
    with pytest.raises(ValueError, match="non-empty 'levels'"):
        load_levels(_write(tmp_path, "levels: []\n"))


def test_physics_partial_override(tmp_path: Path) -> None:
    """Keys present in the file override defaults; the rest are kept."""
    path = _write(tmp_path, "physics:\n  max_speed: 90\n  friction: 2.5\n")
    physics = load_physics(path)
    assert physics.max_speed == 90.0
    assert physics.friction == 2.5
    assert physics.acceleration == PhysicsConfig().acceleration


def test_physics_section_optional(tmp_path: Path) -> None:
    """No physics section means default tuning."""
    assert load_physics(_write(tmp_path, "levels: []\n")) == PhysicsConfig()


def test_unknown_physics_field_raises(tmp_path: Path) -> None:
    """Typos in physics keys are reported rather than ignored."""
    path = _write(tmp_path, "physics:\n  max_sped: 90\n")
    with pytest.raises(ValueError, match="Unknown physics field"):
        load_physics(path)
