import math
import time

import pygame
import pytest

from projectile_lab.config import BALL, MIN_SCALE, PREDICTED, TRAVELED
from projectile_lab.physics import compute_analytics, predict_path
from projectile_lab.render import (
    Readouts,
    Renderer,
    clip_segment,
    clipped_runs,
    draw_dashed_polyline,
    format_num,
    grid_step,
)
from projectile_lab.viewport import fit_viewport


def pixel(surface, pos):
    return tuple(surface.get_at(pos))[:3]


@pytest.fixture
def scene(fonts):
    predicted = predict_path(20.0, math.pi / 4, 9.81)
    surface = pygame.Surface((800, 600), 0, 32)
    viewport = fit_viewport(predicted, surface.get_size())
    return Renderer(*fonts), surface, viewport, predicted


class TestRenderer:
    def test_traveled_path_and_ball_share_mapping(self, scene):
        renderer, surface, viewport, predicted = scene
        traveled = [(0.0, 0.0), (10.0, 5.0), (20.0, 8.0)]
        renderer.draw(surface, viewport, predicted, traveled, Readouts())

        px, py = viewport.to_canvas(5.0, 2.5)
        assert pixel(surface, (round(px), round(py))) == TRAVELED
        bx, by = viewport.to_canvas(20.0, 8.0)
        assert pixel(surface, (round(bx), round(by))) == BALL

    def test_predicted_path_drawn_from_origin(self, scene):
        renderer, surface, viewport, predicted = scene
        renderer.draw(surface, viewport, predicted, [])
        ox, oy = viewport.to_canvas(0, 0)
        near = [pixel(surface, (int(ox) + 2 + dx, int(oy) - 2 + dy)) for dx in (-1, 0, 1) for dy in (-1, 0, 1)]
        assert PREDICTED in near

    def test_draws_without_paths(self, scene):
        renderer, surface, viewport, _ = scene
        renderer.draw(surface, viewport, [], [], None)

    def test_hud_readouts(self, scene):
        renderer, surface, viewport, predicted = scene
        analytics = compute_analytics(20.0, math.pi / 4, 9.81)
        renderer.draw(surface, viewport, predicted, [(0.0, 0.0)], Readouts.from_analytics(analytics, 9.81, 200.0, "Running"))

    def test_huge_flight_draws_quickly(self, fonts):
        """v = 1e7 m/s pins the scale to its floor and puts the landing point ~1e9 px off-canvas."""
        predicted = predict_path(1e7, math.pi / 4, 9.81)
        surface = pygame.Surface((800, 600), 0, 32)
        viewport = fit_viewport(predicted, surface.get_size())
        assert viewport.scale == MIN_SCALE
        assert viewport.to_canvas(*predicted[-1])[0] > 1e8

        renderer = Renderer(*fonts)
        start = time.perf_counter()
        for _ in range(3):
            renderer.draw(surface, viewport, predicted, predicted[:150], Readouts())
        assert time.perf_counter() - start < 2.0

        # the visible start of the path is still drawn
        ox, oy = viewport.to_canvas(0, 0)
        assert pixel(surface, (int(ox) + 3, int(oy) - 3)) == TRAVELED


def test_dashed_line_has_gaps():
    surface = pygame.Surface((100, 20), 0, 32)
    draw_dashed_polyline(surface, (255, 255, 255), [(0, 10), (99, 10)], width=1, dash=8, gap=6)
    assert pixel(surface, (3, 10)) == (255, 255, 255)
    assert pixel(surface, (11, 10)) == (0, 0, 0)
    assert pixel(surface, (17, 10)) == (255, 255, 255)


def test_dash_phase_continues_across_segments():
    surface = pygame.Surface((100, 20), 0, 32)
    draw_dashed_polyline(surface, (255, 255, 255), [(0, 10), (5, 10), (99, 10)], width=1, dash=8, gap=6)
    assert pixel(surface, (11, 10)) == (0, 0, 0)


@pytest.mark.parametrize("scale,target,floor,expected", [
    (1.0, 100, 5, 100),
    (10.0, 100, 5, 10),
    (50.0, 100, 5, 5),
    (0.3, 100, 5, 500),
    (4.0, 60, 2, 20),
])
def test_grid_step(scale, target, floor, expected):
    assert grid_step(scale, target, floor) == pytest.approx(expected)


class TestReadouts:
    def test_format_num(self):
        assert format_num(3.14159) == "3.14"
        assert format_num(12.345, 1) == "12.3"
        assert format_num(math.nan) == "—"
        assert format_num(math.inf) == "—"

    def test_formatted_for_ui_layer(self):
        readouts = Readouts.from_analytics(compute_analytics(20.0, math.pi / 4, 9.81), 9.81, 200.0)
        f = readouts.formatted()
        assert f["range"] == "40.77"
        assert f["max_height"] == "10.19"
        assert f["gravity"] == "9.81"
        assert f["kinetic_energy"] == "200.0"

    def test_undefined_analytics_render_as_placeholder(self):
        readouts = Readouts.from_analytics(compute_analytics(20.0, 0.7, 0.0), 0.0)
        assert readouts.formatted()["time_of_flight"] == "—"


class TestClipping:
    bounds = (0, 0, 100, 50)

    def test_segment_inside(self):
        assert clip_segment((10, 10), (20, 20), self.bounds) == (0.0, 1.0)

    def test_segment_outside(self):
        assert clip_segment((200, 10), (300, 20), self.bounds) is None
        assert clip_segment((10, -5), (90, -1), self.bounds) is None

    def test_segment_crossing_edge(self):
        t0, t1 = clip_segment((50, 25), (1e9, 25), self.bounds)
        assert t0 == 0.0
        assert 50 + t1 * (1e9 - 50) == pytest.approx(100)

    def test_runs_split_where_path_leaves(self):
        points = [(10, 10), (50, 10), (150, 10), (150, 40), (50, 40), (20, 40)]
        runs = clipped_runs(points, self.bounds)
        assert len(runs) == 2
        assert runs[0] == [(10, 10), (50, 10), (100, 10)]
        assert runs[1][0] == pytest.approx((100, 40))
        assert runs[1][-1] == (20, 40)

    def test_dashes_stay_inside_bounds(self):
        surface = pygame.Surface((100, 20), 0, 32)
        draw_dashed_polyline(surface, (255, 255, 255), [(0, 10), (1e10, 10)], width=1, bounds=(0, 0, 60, 20))
        assert pixel(surface, (3, 10)) == (255, 255, 255)
        assert all(pixel(surface, (x, 10)) == (0, 0, 0) for x in range(62, 100))
