"""Closed-form kinematics for an ideal projectile launched from ground level.

No drag, no wind, flat ground at y = 0. Everything here is pure: the
animation samples positions directly from the analytic solution rather
than integrating, so the live path never drifts from the predicted one.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple

from projectile_lab.config import (
    CUSTOM,
    G_EARTH,
    MAX_ANGLE,
    MIN_FLIGHT_TIME,
    PATH_SAMPLES,
    PLANETS,
)

Point = Tuple[float, float]


@dataclass(frozen=True)
class SimulationParameters:
    angle: float  # radians
    speed: float  # m/s
    mass: float  # kg
    gravity: float  # m/s^2

    @classmethod
    def from_degrees(cls, angle_deg, speed, mass, gravity):
        return cls(math.radians(angle_deg), float(speed), float(mass), float(gravity))

    @property
    def angle_deg(self):
        return math.degrees(self.angle)

    def is_valid(self) -> bool:
        values = (self.angle, self.speed, self.mass, self.gravity)
        if not all(math.isfinite(v) for v in values):
            return False
        if self.speed <= 0 or self.mass <= 0 or self.gravity <= 0:
            return False
        return 0 < self.angle <= MAX_ANGLE


@dataclass(frozen=True)
class AnalyticsResult:
    time_of_flight: float
    max_height: float
    range: float

    @property
    def is_defined(self):
        return all(math.isfinite(v) for v in (self.time_of_flight, self.max_height, self.range))


@dataclass(frozen=True)
class FlightSample:
    time: float
    position: Point
    velocity: Point
    landed: bool


def resolve_gravity(selection: str, custom_value: float = math.nan) -> float:
    """Gravity for a planet preset, or the raw custom value for ``"Custom"``.

    The custom value is passed through unchecked; a bad one makes the
    parameters invalid and the launch is refused downstream.
    """
    if selection == CUSTOM:
        return float(custom_value)
    return PLANETS.get(selection, G_EARTH)


def _non_negative(value):
    # NaN passes through
    return value if math.isnan(value) else max(0.0, value)


def compute_analytics(speed: float, angle: float, gravity: float) -> AnalyticsResult:
    # g <= 0 has no landing: report infinity and let the caller check
    v_sin = speed * math.sin(angle)
    if gravity > 0:
        t_flight = (2 * v_sin) / gravity
        height = (v_sin * v_sin) / (2 * gravity)
        distance = (speed * speed * math.sin(2 * angle)) / gravity
    else:
        t_flight = height = distance = math.inf
    return AnalyticsResult(_non_negative(t_flight), _non_negative(height), _non_negative(distance))


def position_at(t: float, params: SimulationParameters) -> Point:
    x = params.speed * math.cos(params.angle) * t
    y = params.speed * math.sin(params.angle) * t - 0.5 * params.gravity * t * t
    return (x, y)


def velocity_at(t: float, params: SimulationParameters) -> Point:
    vx = params.speed * math.cos(params.angle)
    vy = params.speed * math.sin(params.angle) - params.gravity * t
    return (vx, vy)


def predict_path(speed: float, angle: float, gravity: float, sample_count: int = PATH_SAMPLES) -> List[Point]:
    """Sample ``sample_count + 1`` points uniformly over the flight time.

    Sampling stops at the first point (after the launch point) that is
    below ground; that point is not included. Returns an empty path when
    the flight time is undefined.
    """
    if not all(math.isfinite(v) for v in (speed, angle, gravity)):
        return []
    t_flight = compute_analytics(speed, angle, gravity).time_of_flight
    if not math.isfinite(t_flight):
        return []

    total = max(MIN_FLIGHT_TIME, t_flight)
    v_cos = speed * math.cos(angle)
    v_sin = speed * math.sin(angle)
    points = []
    for i in range(sample_count + 1):
        t = (i / sample_count) * total
        x = v_cos * t
        y = v_sin * t - 0.5 * gravity * t * t
        if y < 0 and i > 0:
            break
        points.append((x, y))
    return points


def advance(elapsed: float, dt: float, params: SimulationParameters) -> FlightSample:
    """Move the flight clock forward by ``dt`` and sample the closed form there."""
    t = elapsed + dt
    x, y = position_at(t, params)
    return FlightSample(t, (x, y), velocity_at(t, params), y < 0)


def kinetic_energy(mass: float, velocity: Point) -> float:
    vx, vy = velocity
    return 0.5 * mass * (vx * vx + vy * vy)
