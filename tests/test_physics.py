"""
Closed-form kinematics checks.

    x(t) = v·cosθ·t
    y(t) = v·sinθ·t - ½gt²
"""

import math

import pytest

from projectile_lab.config import PLANETS
from projectile_lab.physics import (
    SimulationParameters,
    advance,
    compute_analytics,
    kinetic_energy,
    position_at,
    predict_path,
    resolve_gravity,
    velocity_at,
)


class TestAnalytics:
    def test_reference_scenario(self):
        """v=20 m/s, 45°, Earth gravity."""
        result = compute_analytics(20.0, math.pi / 4, 9.81)
        assert result.time_of_flight == pytest.approx(2.885, abs=5e-3)
        assert result.max_height == pytest.approx(10.20, abs=1e-2)
        assert result.range == pytest.approx(40.77, abs=1e-2)
        assert result.is_defined

    @pytest.mark.parametrize("v,theta,g", [
        (5.0, 0.2, 9.81),
        (33.0, 1.1, 1.62),
        (120.0, 0.7, 24.79),
        (1.0, 1.5, 0.62),
    ])
    def test_closed_form(self, v, theta, g):
        result = compute_analytics(v, theta, g)
        assert result.range == pytest.approx(v * v * math.sin(2 * theta) / g)
        assert result.time_of_flight == pytest.approx(2 * v * math.sin(theta) / g)
        assert result.max_height == pytest.approx((v * math.sin(theta)) ** 2 / (2 * g))

    def test_range_peaks_at_45_degrees(self):
        best = compute_analytics(30.0, math.pi / 4, 9.81).range
        for deg in (10, 30, 44, 46, 60, 80):
            assert compute_analytics(30.0, math.radians(deg), 9.81).range < best

    @pytest.mark.parametrize("g", [0.0, -3.0, math.nan])
    def test_non_positive_gravity_is_undefined(self, g):
        result = compute_analytics(20.0, 0.8, g)
        assert math.isinf(result.time_of_flight)
        assert math.isinf(result.range)
        assert not result.is_defined


class TestPredictPath:
    def test_starts_at_origin_and_stays_above_ground(self):
        path = predict_path(20.0, math.pi / 4, 9.81)
        assert path[0] == (0.0, 0.0)
        assert 2 <= len(path) <= 201
        assert all(y >= 0 for _, y in path)
        assert path[-1][1] >= -1e-9

    @pytest.mark.parametrize("deg", [0.5, 20, 45, 75, 89.9, 90])
    def test_x_non_decreasing(self, deg):
        path = predict_path(15.0, math.radians(deg), 3.71)
        xs = [x for x, _ in path]
        assert all(b >= a for a, b in zip(xs, xs[1:]))

    def test_ends_near_landing_point(self):
        path = predict_path(20.0, math.pi / 4, 9.81)
        distance = compute_analytics(20.0, math.pi / 4, 9.81).range
        assert path[-1][0] == pytest.approx(distance, rel=0.02)

    def test_sample_count(self):
        assert len(predict_path(20.0, 0.6, 9.81, sample_count=50)) <= 51

    def test_invalid_gravity_gives_empty_path(self):
        assert predict_path(20.0, 0.6, 0.0) == []
        assert predict_path(math.nan, 0.6, 9.81) == []


class TestAdvance:
    def test_samples_closed_form_without_drift(self, earth_params):
        elapsed = 0.0
        for _ in range(100):
            sample = advance(elapsed, 0.01, earth_params)
            elapsed = sample.time
        x, y = sample.position
        ex, ey = position_at(1.0, earth_params)
        assert x == pytest.approx(ex)
        assert y == pytest.approx(ey)
        assert sample.velocity == pytest.approx(velocity_at(1.0, earth_params))
        assert not sample.landed

    def test_landed_once_below_ground(self, earth_params):
        t_flight = compute_analytics(earth_params.speed, earth_params.angle, earth_params.gravity).time_of_flight
        sample = advance(t_flight, 0.01, earth_params)
        assert sample.landed
        assert sample.position[1] < 0

    def test_vertical_velocity_decreases_with_gravity(self, earth_params):
        vx0, vy0 = velocity_at(0.0, earth_params)
        vx1, vy1 = velocity_at(2.0, earth_params)
        assert vx1 == pytest.approx(vx0)
        assert vy1 == pytest.approx(vy0 - 2.0 * 9.81)


def test_kinetic_energy():
    assert kinetic_energy(2.0, (3.0, 4.0)) == pytest.approx(25.0)
    assert kinetic_energy(1.0, (0.0, 0.0)) == 0.0


class TestParameters:
    def test_from_degrees(self):
        params = SimulationParameters.from_degrees(30, 10, 2, 9.81)
        assert params.angle == pytest.approx(math.pi / 6)
        assert params.angle_deg == pytest.approx(30)
        assert params.is_valid()

    @pytest.mark.parametrize("angle,speed,mass,gravity", [
        (45, 0, 1, 9.81),
        (45, -5, 1, 9.81),
        (45, 10, 1, 0),
        (45, 10, 1, -9.81),
        (45, 10, 0, 9.81),
        (0, 10, 1, 9.81),
        (95, 10, 1, 9.81),
        (45, math.nan, 1, 9.81),
        (45, 10, 1, math.inf),
    ])
    def test_invalid(self, angle, speed, mass, gravity):
        assert not SimulationParameters.from_degrees(angle, speed, mass, gravity).is_valid()

    def test_vertical_launch_is_valid(self):
        assert SimulationParameters(math.pi / 2, 10.0, 1.0, 9.81).is_valid()


class TestResolveGravity:
    @pytest.mark.parametrize("planet", list(PLANETS))
    def test_presets(self, planet):
        assert resolve_gravity(planet) == PLANETS[planet]

    def test_table_values(self):
        assert PLANETS["Moon"] == 1.62
        assert PLANETS["Jupiter"] == 24.79
        assert PLANETS["Pluto"] == 0.62

    def test_custom_passes_value_through(self):
        assert resolve_gravity("Custom", 4.2) == 4.2
        assert resolve_gravity("Custom", -1.0) == -1.0
        assert math.isnan(resolve_gravity("Custom"))

    def test_unknown_falls_back_to_earth(self):
        assert resolve_gravity("Vulcan") == 9.81
