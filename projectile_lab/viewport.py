"""World (metres, y-up) to canvas (device pixels, y-down) mapping."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

from projectile_lab.config import (
    HEIGHT_MARGIN_RATIO,
    MARGIN_BOTTOM,
    MARGIN_LEFT,
    MARGIN_RIGHT,
    MARGIN_TOP,
    MIN_CANVAS_H,
    MIN_CANVAS_W,
    MIN_SCALE,
    MIN_USABLE_PX,
    MIN_WORLD_MARGIN,
    RANGE_MARGIN_RATIO,
)
from projectile_lab.physics import Point


@dataclass(frozen=True)
class Margins:
    left: int = MARGIN_LEFT
    right: int = MARGIN_RIGHT
    top: int = MARGIN_TOP
    bottom: int = MARGIN_BOTTOM


DEFAULT_MARGINS = Margins()


def world_to_canvas(x: float, y: float, scale: float, margins: Margins, canvas_height: float) -> Point:
    px = margins.left + x * scale
    py = canvas_height - margins.bottom - y * scale  # invert y
    return (px, py)


def path_extent(path: Sequence[Point]) -> Tuple[float, float]:
    """(max height, range) of the samples, never negative."""
    max_height = max((y for _, y in path), default=0.0)
    distance = max((x for x, _ in path), default=0.0)
    return (max(0.0, max_height), max(0.0, distance))


def compute_scale(path: Sequence[Point], canvas_size: Tuple[int, int], margins: Margins = DEFAULT_MARGINS) -> float:
    """Pixels per metre that fit ``path`` plus a world margin on both axes."""
    width, height = canvas_size
    max_height, distance = path_extent(path)
    usable_w = max(MIN_USABLE_PX, width - margins.left - margins.right)
    usable_h = max(MIN_USABLE_PX, height - margins.top - margins.bottom)

    margin_x = max(MIN_WORLD_MARGIN, distance * RANGE_MARGIN_RATIO)
    margin_y = max(MIN_WORLD_MARGIN, max_height * HEIGHT_MARGIN_RATIO)

    scale_x = usable_w / max(1.0, distance + margin_x)
    scale_y = usable_h / max(1.0, max_height + margin_y)
    # smaller of the two so neither axis overflows
    return max(MIN_SCALE, min(scale_x, scale_y))


@dataclass(frozen=True)
class ViewportTransform:
    scale: float
    margins: Margins
    width: int
    height: int

    def to_canvas(self, x, y):
        return world_to_canvas(x, y, self.scale, self.margins, self.height)

    def to_world(self, px, py):
        return ((px - self.margins.left) / self.scale, (self.height - self.margins.bottom - py) / self.scale)

    @property
    def ground_y(self):
        return self.height - self.margins.bottom

    @property
    def plot_rect(self):
        """(left, top, right, bottom) of the drawable area in pixels."""
        m = self.margins
        return (m.left, m.top, self.width - m.right, self.height - m.bottom)


def fit_viewport(path: Sequence[Point], canvas_size: Tuple[int, int], margins: Margins = DEFAULT_MARGINS) -> ViewportTransform:
    width, height = canvas_size
    return ViewportTransform(compute_scale(path, canvas_size, margins), margins, int(width), int(height))


def effective_dpr(dpr: float) -> float:
    """Device pixel ratio floored to 1; non-finite values count as 1."""
    return max(1.0, dpr) if math.isfinite(dpr) else 1.0


def device_canvas_size(logical_size: Tuple[int, int], dpr: float = 1.0) -> Tuple[int, int]:
    dpr = effective_dpr(dpr)
    css_w = max(MIN_CANVAS_W, int(logical_size[0]))
    css_h = max(MIN_CANVAS_H, int(logical_size[1]))
    return (int(math.floor(css_w * dpr)), int(math.floor(css_h * dpr)))
