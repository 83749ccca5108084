"""Level definitions and the ordered level catalog."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from greenwave.core.light import TrafficLightConfig


class LevelNotFoundError(LookupError):
    """Raised when a level identifier is outside the catalog."""

    def __init__(self, level_id: int, level_count: int) -> None:
        super().__init__(
            f"Level {level_id} does not exist; valid levels are 1..{level_count}."
        )
        self.level_id: int = level_id
        self.level_count: int = level_count


@dataclass(frozen=True)
class LevelDefinition:
    """Immutable, authored description of one level.

    Attributes:
        name: Display name of the level.
        start_speed: Car speed in km/h when the attempt begins (>= 0).
        lights: Traffic lights ordered by strictly increasing position.
        finish_position: World position the car's centre must pass to win.
            Must lie beyond the last light.
    """

    name: str
    start_speed: float
    lights: tuple[TrafficLightConfig, ...]
    finish_position: float

    def __post_init__(self) -> None:
        """Validate authoring invariants."""
        if not self.name:
            raise ValueError("Level name must not be empty.")
        if self.start_speed < 0.0:
            raise ValueError("start_speed must be >= 0.")
        positions = [light.position for light in self.lights]
        for prev, cur in zip(positions, positions[1:]):
            if cur <= prev:
                raise ValueError(
                    f"Level '{self.name}': light positions must be strictly "
                    f"ascending, got {prev} then {cur}."
                )
        if positions and self.finish_position <= positions[-1]:
            raise ValueError(
                f"Level '{self.name}': finish_position {self.finish_position} "
                f"must exceed the last light position {positions[-1]}."
            )
        if self.finish_position <= 0.0:
            raise ValueError("finish_position must be > 0.")


class LevelCatalog:
    """Ordered, immutable collection of levels addressed by 1-based id."""

    __slots__ = ("_levels",)

    def __init__(self, levels: Sequence[LevelDefinition]) -> None:
        if not levels:
            raise ValueError("Level catalog must not be empty.")
        self._levels: tuple[LevelDefinition, ...] = tuple(levels)

    def __len__(self) -> int:
        return len(self._levels)

    def __iter__(self) -> Iterator[LevelDefinition]:
        return iter(self._levels)

    def __contains__(self, level_id: object) -> bool:
        return isinstance(level_id, int) and 1 <= level_id <= len(self._levels)

    def __repr__(self) -> str:
        names = ", ".join(level.name for level in self._levels)
        return f"LevelCatalog([{names}])"

    @property
    def first_id(self) -> int:
        return 1

    @property
    def last_id(self) -> int:
        return len(self._levels)

    def ids(self) -> range:
        """Return every valid level id in order."""
        return range(1, len(self._levels) + 1)

    def get(self, level_id: int) -> LevelDefinition:
        """Look up a level.

        Raises:
            LevelNotFoundError: If *level_id* is outside ``1..len(self)``.
        """
        if level_id not in self:
            raise LevelNotFoundError(level_id, len(self._levels))
        return self._levels[level_id - 1]

    def is_last(self, level_id: int) -> bool:
        return level_id == self.last_id

    def next_id(self, level_id: int) -> int:
        """Return the id following *level_id*.

        Raises:
            LevelNotFoundError: If *level_id* is unknown or is the last level.
        """
        self.get(level_id)
        following = level_id + 1
        self.get(following)
        return following
