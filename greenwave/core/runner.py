"""Level runner and rule engine for the Green Wave simulation core.

A :class:`SimulationContext` owns everything that changes while the game
is played: the current attempt, the session spanning levels 1..N, the
best-time bookkeeping and the frame clock.  The caller drives it one
tick at a time and reads back immutable :class:`Snapshot` objects for
presentation.

Per tick, while the attempt is playing:
    1. Elapsed time advances by ``dt``.
    2. The car physics step runs.  A dead stop without throttle loses
       the attempt ("stopped").
    3. Every not-yet-passed light whose position is behind the car's
       front bumper is evaluated in ascending position order.  A red
       light loses the attempt ("ran red light"); any other phase marks
       the light passed.
    4. Once the car's centre is beyond the finish position the attempt
       is won.

Crossings are detected by position, not by the distance travelled in
the tick, so a large ``dt`` can never jump over a light unseen.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from greenwave.core.clock import FrameClock
from greenwave.core.level import LevelCatalog, LevelDefinition
from greenwave.core.light import (
    Phase,
    TrafficLightRuntime,
    current_phase_duration,
    phase_at,
    time_until_next_phase,
)
from greenwave.core.physics import CarState, PedalInput, PhysicsConfig, step_car
from greenwave.core.scoring import star_display, stars_for
from greenwave.core.session import LevelRecord, ScoreKeeper, SessionState, SessionSummary
from greenwave.persistence.leaderboard import (
    LeaderboardSubmitter,
    NullLeaderboard,
    build_payload,
    validate_username,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Attempt state
# ---------------------------------------------------------------------------


class AttemptStatus(Enum):
    """Lifecycle of one attempt: playing until it is won or lost."""

    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


class LossReason(Enum):
    """Why an attempt was lost."""

    STOPPED = "stopped"
    RAN_RED_LIGHT = "ran red light"

    @property
    def message(self) -> str:
        """Player-facing explanation."""
        if self is LossReason.STOPPED:
            return "You stopped! Keep moving to catch the green wave."
        return "You ran a red light! Time your speed better."


class AttemptState:
    """Mutable state of one play-through of one level.

    Attributes:
        level_id: Catalog id of the level being played.
        level: The level definition.
        elapsed_time: Seconds simulated since the attempt began.
        car: Speed, position and smoothness accumulator.
        lights: Runtime lights in ascending position order.
        lights_passed: Number of lights crossed on a passable phase.
        status: Playing until the attempt is won or lost.
        loss_reason: Set when ``status`` is ``LOST``.
    """

    __slots__ = (
        "level_id",
        "level",
        "elapsed_time",
        "car",
        "lights",
        "lights_passed",
        "status",
        "loss_reason",
    )

    def __init__(self, level_id: int, level: LevelDefinition) -> None:
        self.level_id: int = level_id
        self.level: LevelDefinition = level
        self.elapsed_time: float = 0.0
        self.car: CarState = CarState(speed=level.start_speed)
        self.lights: list[TrafficLightRuntime] = [
            TrafficLightRuntime(cfg) for cfg in level.lights
        ]
        self.lights_passed: int = 0
        self.status: AttemptStatus = AttemptStatus.PLAYING
        self.loss_reason: LossReason | None = None

    @property
    def speed(self) -> float:
        return self.car.speed

    @property
    def position(self) -> float:
        return self.car.position

    @property
    def accumulated_speed_change(self) -> float:
        return self.car.accumulated_speed_change

    @property
    def is_playing(self) -> bool:
        return self.status is AttemptStatus.PLAYING


# ---------------------------------------------------------------------------
# Read-only views
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LightSnapshot:
    """Presentation view of one light at the snapshot instant."""

    position: float
    phase: Phase
    time_until_change: float
    phase_duration: float
    passed: bool


@dataclass(frozen=True)
class Snapshot:
    """Presentation view of the attempt after the latest tick."""

    level_id: int
    level_name: str
    speed: float
    position: float
    elapsed_time: float
    lights_passed: int
    total_lights: int
    status: AttemptStatus
    loss_reason: LossReason | None
    lights: tuple[LightSnapshot, ...]


@dataclass(frozen=True)
class WinReport:
    """Everything the presentation layer needs after a level is won.

    Attributes:
        level_id: Catalog id of the won level.
        level_name: Display name of the won level.
        finish_time: Elapsed attempt time at the win.
        stars: Smoothness rating (1-3).
        smoothness_raw: Accumulated speed change of the attempt.
        is_new_record: Whether ``finish_time`` beat the stored best.
        best_time: Best time for the level after this win was recorded.
        is_final_level: Whether the won level is the last in the catalog.
        session_summary: Present when this win completed a full session.
        submitted: Whether the completed session reached the leaderboard.
    """

    level_id: int
    level_name: str
    finish_time: float
    stars: int
    smoothness_raw: float
    is_new_record: bool
    best_time: float | None
    is_final_level: bool
    session_summary: SessionSummary | None = None
    submitted: bool = False

    @property
    def star_glyphs(self) -> str:
        return star_display(self.stars)


# ---------------------------------------------------------------------------
# Simulation context
# ---------------------------------------------------------------------------


class SimulationContext:
    """Owner of all mutable game state, driven one tick at a time.

    Attributes:
        catalog: The ordered levels.
        physics: Tunable physics constants.
        score_keeper: Best-time bookkeeping over an injected store.
        leaderboard: Collaborator receiving completed sessions.
        session: Records of the current run through the catalog.
        clock: Frame clock used by :meth:`advance_frame`.
        attempt: The current attempt, ``None`` before the first level.
        last_win: Report of the most recent win of the current attempt.
    """

    def __init__(
        self,
        catalog: LevelCatalog,
        physics: PhysicsConfig | None = None,
        score_keeper: ScoreKeeper | None = None,
        leaderboard: LeaderboardSubmitter | None = None,
        username: str | None = None,
    ) -> None:
        self.catalog: LevelCatalog = catalog
        self.physics: PhysicsConfig = physics if physics is not None else PhysicsConfig()
        self.score_keeper: ScoreKeeper = (
            score_keeper if score_keeper is not None else ScoreKeeper()
        )
        self.leaderboard: LeaderboardSubmitter = (
            leaderboard if leaderboard is not None else NullLeaderboard()
        )
        self.username: str | None = None
        if username is not None:
            self.set_username(username)
        self.session: SessionState = SessionState()
        self.clock: FrameClock = FrameClock(max_delta=self.physics.max_frame_delta)
        self.attempt: AttemptState | None = None
        self.last_win: WinReport | None = None

    # -- Lifecycle ------------------------------------------------------------

    def set_username(self, username: str) -> None:
        """Validate and store the name used for leaderboard submission."""
        self.username = validate_username(username)

    def start_level(self, level_id: int) -> AttemptState:
        """Begin a fresh attempt at *level_id*.

        Starting the first level also starts a new session.

        Raises:
            LevelNotFoundError: If *level_id* is not in the catalog.
        """
        level = self.catalog.get(level_id)
        if level_id == self.catalog.first_id:
            self.session.start()

        self.attempt = AttemptState(level_id, level)
        self.last_win = None
        self.clock.reset()
        logger.debug("Starting level %d (%s)", level_id, level.name)
        return self.attempt

    def restart(self) -> AttemptState:
        """Retry the current level from scratch, whatever its outcome."""
        return self.start_level(self._require_attempt().level_id)

    def advance(self) -> AttemptState:
        """Start the level after the current one.

        Raises:
            LevelNotFoundError: If the current level is the last one.
        """
        return self.start_level(self.catalog.next_id(self._require_attempt().level_id))

    def abandon_session(self) -> None:
        """Drop the session records, e.g. when the player quits mid-run."""
        self.session.reset()

    # -- Ticking --------------------------------------------------------------

    def step(self, dt: float, pedals: PedalInput) -> AttemptStatus:
        """Simulate one tick of *dt* seconds.

        Terminal attempts are left untouched.

        Raises:
            RuntimeError: If no level has been started.
            ValueError: If dt <= 0.
        """
        attempt = self._require_attempt()
        if not attempt.is_playing:
            return attempt.status
        if dt <= 0.0:
            raise ValueError("dt must be > 0.")

        attempt.elapsed_time += dt

        stopped = step_car(attempt.car, pedals, dt, self.physics)
        if stopped:
            self._lose(attempt, LossReason.STOPPED)
            return attempt.status

        car_front = attempt.car.front(self.physics)
        for light in attempt.lights:
            if light.passed or car_front <= light.config.position:
                continue
            phase = phase_at(light.config, attempt.elapsed_time)
            if not phase.passable:
                self._lose(attempt, LossReason.RAN_RED_LIGHT)
                return attempt.status
            light.mark_passed()
            attempt.lights_passed += 1
            logger.debug(
                "Passed light at %.0f on %s (t=%.2fs)",
                light.config.position,
                phase.value,
                attempt.elapsed_time,
            )

        if attempt.car.position > attempt.level.finish_position:
            self._win(attempt)
        return attempt.status

    def advance_frame(self, timestamp: float, pedals: PedalInput) -> Snapshot:
        """Feed one rendered frame's timestamp and pedal state.

        The frame clock decides whether the frame is simulated; skipped
        frames leave the attempt untouched and only return a snapshot.
        """
        attempt = self._require_attempt()
        dt = self.clock.tick(timestamp)
        if dt is not None and attempt.is_playing:
            self.step(dt, pedals)
        return self.snapshot()

    def snapshot(self) -> Snapshot:
        """Return a read-only view of the current attempt."""
        attempt = self._require_attempt()
        t = attempt.elapsed_time
        lights = tuple(
            LightSnapshot(
                position=light.config.position,
                phase=phase_at(light.config, t),
                time_until_change=time_until_next_phase(light.config, t),
                phase_duration=current_phase_duration(light.config, t),
                passed=light.passed,
            )
            for light in attempt.lights
        )
        return Snapshot(
            level_id=attempt.level_id,
            level_name=attempt.level.name,
            speed=attempt.car.speed,
            position=attempt.car.position,
            elapsed_time=t,
            lights_passed=attempt.lights_passed,
            total_lights=len(attempt.lights),
            status=attempt.status,
            loss_reason=attempt.loss_reason,
            lights=lights,
        )

    # -- Outcomes -------------------------------------------------------------

    def _lose(self, attempt: AttemptState, reason: LossReason) -> None:
        attempt.status = AttemptStatus.LOST
        attempt.loss_reason = reason
        logger.info(
            "Level %d lost at t=%.2fs: %s",
            attempt.level_id,
            attempt.elapsed_time,
            reason.value,
        )

    def _win(self, attempt: AttemptState) -> None:
        attempt.status = AttemptStatus.WON
        finish_time = attempt.elapsed_time
        smoothness = attempt.car.accumulated_speed_change
        stars = stars_for(smoothness, attempt.level.finish_position)

        self.session.add(
            LevelRecord(
                level_id=attempt.level_id,
                finish_time=finish_time,
                stars=stars,
                smoothness_raw=smoothness,
            )
        )
        is_new_record = self.score_keeper.record(attempt.level_id, finish_time)
        best_time = self.score_keeper.best_time(attempt.level_id)

        summary: SessionSummary | None = None
        submitted = False
        if self.session.is_complete(self.catalog.ids()):
            summary = self.session.summary()
            submitted = self._submit(summary)
            logger.info(
                "Session complete: %.1fs total, %.1f average stars",
                summary.total_time,
                summary.average_stars,
            )

        is_final = self.catalog.is_last(attempt.level_id)
        if is_final:
            self.session.reset()

        self.last_win = WinReport(
            level_id=attempt.level_id,
            level_name=attempt.level.name,
            finish_time=finish_time,
            stars=stars,
            smoothness_raw=smoothness,
            is_new_record=is_new_record,
            best_time=best_time,
            is_final_level=is_final,
            session_summary=summary,
            submitted=submitted,
        )
        logger.info(
            "Level %d won in %.2fs with %d stars",
            attempt.level_id,
            finish_time,
            stars,
        )

    def _submit(self, summary: SessionSummary) -> bool:
        """Send a completed session to the leaderboard; never raises."""
        if self.username is None:
            return False
        payload = build_payload(self.username, summary)
        try:
            return bool(
                self.leaderboard.submit(
                    payload["username"],
                    summary.total_time,
                    payload["averageStars"],
                    payload["levels"],
                )
            )
        except Exception:
            logger.warning("Leaderboard submission failed", exc_info=True)
            return False

    def _require_attempt(self) -> AttemptState:
        if self.attempt is None:
            raise RuntimeError("No level has been started.")
        return self.attempt
