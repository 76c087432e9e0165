import math

import pytest

from projectile_lab.config import CHART_BG
from projectile_lab.strip_chart import StripChart


def pixel(surface, pos):
    return tuple(surface.get_at(pos))[:3]


def column(chart, x):
    return [pixel(chart.surface, (x, y)) for y in range(chart.size[1])]


@pytest.fixture
def chart():
    c = StripChart((60, 40), step=2)
    c.set_reference(100.0)
    return c


class TestPush:
    def test_plots_in_rightmost_column(self, chart):
        chart.push(50.0)
        y = chart.value_to_y(50.0)
        assert pixel(chart.surface, (59, y)) == chart.color
        assert pixel(chart.surface, (58, y)) == chart.color
        assert pixel(chart.surface, (57, y)) == CHART_BG

    def test_history_scrolls_left(self, chart):
        chart.push(100.0)
        chart.push(0.0)
        top, bottom = chart.value_to_y(100.0), chart.value_to_y(0.0)
        assert pixel(chart.surface, (57, top)) == chart.color
        assert pixel(chart.surface, (59, top)) == CHART_BG
        assert pixel(chart.surface, (59, bottom)) == chart.color

    def test_vacated_column_is_cleared(self, chart):
        chart.push(100.0)
        chart.push(100.0)
        chart.push(0.0)
        assert column(chart, 59).count(chart.color) == 2

    @pytest.mark.parametrize("value", [math.nan, math.inf, None])
    def test_non_finite_ignored(self, chart, value):
        chart.push(50.0)
        before = column(chart, 59)
        chart.push(value)
        assert column(chart, 59) == before


class TestVerticalScale:
    def test_reference_spans_height(self, chart):
        assert chart.value_to_y(100.0) == 0
        assert chart.value_to_y(0.0) == 38

    def test_clamped_to_chart(self, chart):
        assert chart.value_to_y(1e9) == 0
        assert chart.value_to_y(-5.0) == 38

    def test_heuristic_without_reference(self):
        c = StripChart((60, 40))
        c.set_reference(0.0)
        assert c.reference is None
        assert c.value_to_y(10.0) == 28


def test_resize_keeps_recent_history(chart):
    chart.push(100.0)
    chart.resize((30, 40))
    assert chart.size == (30, 40)
    assert pixel(chart.surface, (29, 0)) == chart.color
