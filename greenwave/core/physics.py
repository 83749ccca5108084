"""Deterministic car physics for the Green Wave simulation core.

Speed is tracked in km/h and position in world units (pixels in the
shipped levels).  A single tunable, ``pixels_per_kmh_per_sec``, bridges
the two.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PhysicsConfig:
    """Tunable constants shared by every level.

    Attributes:
        max_speed: Upper speed bound in km/h (> 0).
        acceleration: Speed gained per second of throttle, km/h/s (>= 0).
        brake_power: Speed lost per second of braking, km/h/s (>= 0).
        friction: Speed lost per second while coasting, km/h/s (>= 0).
        pixels_per_kmh_per_sec: World units travelled per second per km/h
            of speed (> 0).
        car_length: Body length of the car in world units (>= 0).  The
            crossing test uses the leading edge, half a length ahead of
            the car's centre.
        max_frame_delta: Wall-clock frame deltas above this many seconds
            are skipped instead of simulated (> 0).
    """

    max_speed: float = 120.0
    acceleration: float = 40.0
    brake_power: float = 60.0
    friction: float = 5.0
    pixels_per_kmh_per_sec: float = 3.0
    car_length: float = 100.0
    max_frame_delta: float = 0.1

    def __post_init__(self) -> None:
        """Validate physics parameters."""
        if self.max_speed <= 0.0:
            raise ValueError("max_speed must be > 0.")
        if self.acceleration < 0.0:
            raise ValueError("acceleration must be >= 0.")
        if self.brake_power < 0.0:
            raise ValueError("brake_power must be >= 0.")
        if self.friction < 0.0:
            raise ValueError("friction must be >= 0.")
        if self.pixels_per_kmh_per_sec <= 0.0:
            raise ValueError("pixels_per_kmh_per_sec must be > 0.")
        if self.car_length < 0.0:
            raise ValueError("car_length must be >= 0.")
        if self.max_frame_delta <= 0.0:
            raise ValueError("max_frame_delta must be > 0.")

    @property
    def car_half_length(self) -> float:
        """Distance from the car's centre to its front bumper."""
        return self.car_length / 2.0


@dataclass(frozen=True)
class PedalInput:
    """Pedal state sampled once per tick."""

    throttle: bool = False
    brake: bool = False


class CarState:
    """Mutable speed/position state of the player's car for one attempt.

    Attributes:
        speed: Current speed in km/h, always within ``[0, max_speed]``.
        previous_speed: Speed before the most recent tick.
        position: World position of the car's centre.  Never decreases.
        accumulated_speed_change: Sum of absolute speed changes caused by
            pedal input.  Friction-only ticks do not contribute.
    """

    __slots__ = ("speed", "previous_speed", "position", "accumulated_speed_change")

    def __init__(self, speed: float, position: float = 0.0) -> None:
        """Initialise car state.

        Args:
            speed: Starting speed in km/h. Must be >= 0.
            position: Starting world position. Must be >= 0.

        Raises:
            ValueError: If constraints are violated.
        """
        if speed < 0.0:
            raise ValueError("speed must be >= 0.")
        if position < 0.0:
            raise ValueError("position must be >= 0.")
        self.speed: float = speed
        self.previous_speed: float = speed
        self.position: float = position
        self.accumulated_speed_change: float = 0.0

    def front(self, physics: PhysicsConfig) -> float:
        """Return the world position of the car's leading edge."""
        return self.position + physics.car_half_length


def step_car(
    car: CarState,
    pedals: PedalInput,
    dt: float,
    physics: PhysicsConfig,
) -> bool:
    """Advance *car* by one tick of *dt* seconds.

    The speed update is chosen in priority order:

        throttle only  ->  speed += acceleration * dt
        brake only     ->  speed -= brake_power * dt
        otherwise      ->  speed -= friction * dt

    Holding both pedals is treated exactly like holding neither.  The
    result is clamped to ``[0, max_speed]``.  When a pedal is held, the
    absolute speed change of this tick is added to
    ``accumulated_speed_change``.  Position then advances by::

        speed * pixels_per_kmh_per_sec * dt

    Args:
        car: State to update in place.
        pedals: Pedal input for this tick.
        dt: Tick length in seconds (> 0).
        physics: Tunable constants.

    Returns:
        ``True`` if the car has come to a dead stop without throttle held,
        in which case position is left unchanged.

    Raises:
        ValueError: If dt <= 0.
    """
    if dt <= 0.0:
        raise ValueError("dt must be > 0.")

    before: float = car.speed
    speed: float = before

    if pedals.throttle and not pedals.brake:
        speed += physics.acceleration * dt
    elif pedals.brake and not pedals.throttle:
        speed -= physics.brake_power * dt
    else:
        speed -= physics.friction * dt

    speed = max(0.0, min(physics.max_speed, speed))

    if pedals.throttle or pedals.brake:
        car.accumulated_speed_change += abs(speed - before)
    car.previous_speed = before
    car.speed = speed

    if speed == 0.0 and not pedals.throttle:
        return True

    car.position += speed * physics.pixels_per_kmh_per_sec * dt
    return False
