"""Scene drawing for the trajectory canvas.

Draw order is background, grid, predicted path, traveled path, marker,
HUD. Every routine maps world points through the same
``ViewportTransform.to_canvas`` so the layers stay registered.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import pygame

from projectile_lab.config import (
    BALL,
    BALL_EDGE,
    BALL_GLOW,
    GRID,
    GRID_LABEL,
    GRID_MIN_X,
    GRID_MIN_Y,
    GRID_PX_X,
    GRID_PX_Y,
    GROUND,
    GROUND_LINE,
    MUTED,
    PANEL_BORDER,
    PREDICTED,
    SKY_BOTTOM,
    SKY_TOP,
    TEXT,
    TRAVELED,
)


def format_num(value, digits=2):
    if value is None or not math.isfinite(value):
        return "—"
    return f"{value:.{digits}f}"


def grid_step(scale, target_px, floor):
    """Smallest 1/2/5 x 10^k metre step that spans at least ``target_px``."""
    raw = max(floor, target_px / scale)
    base = 10 ** math.floor(math.log10(raw))
    for mult in (1, 2, 5, 10):
        if mult * base >= raw:
            return mult * base
    return 10 * base


def _lerp(p1, p2, t):
    return (p1[0] + (p2[0] - p1[0]) * t, p1[1] + (p2[1] - p1[1]) * t)


def clip_segment(p1, p2, bounds):
    """Liang-Barsky clip of ``p1``-``p2`` against ``(left, top, right, bottom)``.

    Returns the visible ``(t0, t1)`` interval along the segment, or None
    when the segment misses the box entirely.
    """
    (x1, y1), (x2, y2) = p1, p2
    left, top, right, bottom = bounds
    dx, dy = x2 - x1, y2 - y1
    t0, t1 = 0.0, 1.0
    for p, q in ((-dx, x1 - left), (dx, right - x1), (-dy, y1 - top), (dy, bottom - y1)):
        if p == 0:
            if q < 0:
                return None
            continue
        r = q / p
        if p < 0:
            if r > t1:
                return None
            t0 = max(t0, r)
        else:
            if r < t0:
                return None
            t1 = min(t1, r)
    return t0, t1


def clipped_runs(points, bounds):
    """Split a polyline into the connected pieces that fall inside ``bounds``."""
    runs, run = [], []
    for a, b in zip(points, points[1:]):
        span = clip_segment(a, b, bounds)
        if span is None:
            if len(run) > 1:
                runs.append(run)
            run = []
            continue
        t0, t1 = span
        if run and t0 == 0.0:
            run.append(_lerp(a, b, t1))
        else:
            if len(run) > 1:
                runs.append(run)
            run = [_lerp(a, b, t0), _lerp(a, b, t1)]
        if t1 < 1.0:
            runs.append(run)
            run = []
    if len(run) > 1:
        runs.append(run)
    return runs


def _dash_segment(surface, color, start, end, length, phase, dash, period, width):
    (x1, y1), (x2, y2) = start, end
    ux, uy = (x2 - x1) / length, (y2 - y1) / length
    pos = 0.0
    while pos < length:
        in_dash = phase < dash
        run = (dash - phase) if in_dash else (period - phase)
        step = min(run, length - pos)
        if in_dash:
            pygame.draw.line(surface, color, (x1 + ux * pos, y1 + uy * pos),
                             (x1 + ux * (pos + step), y1 + uy * (pos + step)), width)
        pos += step
        phase = (phase + step) % period
    return phase


def draw_dashed_polyline(surface, color, points, width=2, dash=8, gap=6, bounds=None):
    """Dashed line through ``points``; only the parts inside ``bounds`` are drawn."""
    if len(points) < 2:
        return
    period = dash + gap
    phase = 0.0  # carried across segments so the pattern is continuous
    for a, b in zip(points, points[1:]):
        seg = math.hypot(b[0] - a[0], b[1] - a[1])
        if seg == 0:
            continue
        span = (0.0, 1.0) if bounds is None else clip_segment(a, b, bounds)
        if span is None:
            phase = (phase + seg) % period
            continue
        t0, t1 = span
        phase = (phase + seg * t0) % period
        if t1 > t0:
            phase = _dash_segment(surface, color, _lerp(a, b, t0), _lerp(a, b, t1),
                                  seg * (t1 - t0), phase, dash, period, width)
        phase = (phase + seg * (1.0 - t1)) % period


@dataclass(frozen=True)
class Readouts:
    time_of_flight: float = math.nan
    max_height: float = math.nan
    range: float = math.nan
    gravity: float = math.nan
    kinetic_energy: float = math.nan
    phase: str = ""

    @classmethod
    def from_analytics(cls, analytics, gravity, kinetic_energy=math.nan, phase=""):
        return cls(analytics.time_of_flight, analytics.max_height, analytics.range, gravity, kinetic_energy, phase)

    def formatted(self):
        """Strings handed to the UI layer, keyed by readout."""
        return {
            "time_of_flight": format_num(self.time_of_flight),
            "max_height": format_num(self.max_height),
            "range": format_num(self.range),
            "gravity": format_num(self.gravity),
            "kinetic_energy": format_num(self.kinetic_energy, 1),
        }

    def lines(self):
        f = self.formatted()
        lines = [
            f"Time of flight: {f['time_of_flight']} s",
            f"Max height: {f['max_height']} m",
            f"Range: {f['range']} m",
            f"Gravity: {f['gravity']} m/s²",
            f"Kinetic energy: {f['kinetic_energy']} J",
        ]
        if self.phase:
            lines.append(f"State: {self.phase}")
        return lines


class Renderer:
    def __init__(self, font, small, dpr=1.0):
        self.font = font
        self.small = small
        self.dpr = dpr

    def draw(self, surface, viewport, predicted, traveled, readouts=None):
        self.draw_background(surface, viewport)
        self.draw_grid(surface, viewport)
        self.draw_predicted_path(surface, viewport, predicted)
        if traveled:
            self.draw_traveled_path(surface, viewport, traveled)
            self.draw_ball(surface, viewport, traveled[-1])
        self.draw_hud(surface, viewport, readouts)

    def draw_background(self, surface, viewport):
        width, height = surface.get_size()
        # one gradient column stretched sideways
        sky = pygame.Surface((1, height), 0, 32)
        for row in range(height):
            k = row / max(1, height - 1)
            sky.set_at((0, row), tuple(int(a + (b - a) * k) for a, b in zip(SKY_TOP, SKY_BOTTOM)))
        surface.blit(pygame.transform.scale(sky, (width, height)), (0, 0))

        ground_y = viewport.ground_y
        pygame.draw.rect(surface, GROUND, (0, ground_y, width, height - ground_y))
        pygame.draw.line(surface, GROUND_LINE, (0, ground_y), (width, ground_y), 2)

    def draw_grid(self, surface, viewport):
        left, top, right, ground_y = viewport.plot_rect
        step_x = grid_step(viewport.scale, GRID_PX_X * self.dpr, GRID_MIN_X)
        step_y = grid_step(viewport.scale, GRID_PX_Y * self.dpr, GRID_MIN_Y)

        # vertical lines
        i = 0
        while True:
            mx = i * step_x
            px = viewport.to_canvas(mx, 0)[0]
            if px > right:
                break
            x = math.floor(px)
            pygame.draw.line(surface, GRID, (x, top), (x, ground_y), 1)
            lbl = self.small.render(f"{mx:g}", True, GRID_LABEL)
            surface.blit(lbl, (x - lbl.get_width() // 2, ground_y + int(6 * self.dpr)))
            i += 1

        # horizontal lines
        j = 0
        while True:
            my = j * step_y
            py = viewport.to_canvas(0, my)[1]
            if py < top:
                break
            y = math.floor(py)
            pygame.draw.line(surface, GRID, (left, y), (right, y), 1)
            lbl = self.small.render(f"{my:g}", True, GRID_LABEL)
            surface.blit(lbl, (left - int(8 * self.dpr) - lbl.get_width(), y - lbl.get_height() // 2))
            j += 1

    def draw_predicted_path(self, surface, viewport, predicted):
        if not predicted or len(predicted) < 2:
            return
        pts = [viewport.to_canvas(x, y) for x, y in predicted]
        draw_dashed_polyline(surface, PREDICTED, pts, width=max(1, int(2 * self.dpr)), bounds=viewport.plot_rect)

    def draw_traveled_path(self, surface, viewport, traveled):
        if len(traveled) < 2:
            return
        pts = [viewport.to_canvas(x, y) for x, y in traveled]
        # at the minimum scale the flight can leave the canvas by orders of magnitude
        for run in clipped_runs(pts, viewport.plot_rect):
            pygame.draw.lines(surface, TRAVELED, False, run, max(1, int(3 * self.dpr)))

    def draw_ball(self, surface, viewport, position):
        px, py = viewport.to_canvas(*position)
        r = max(4, int(8 * self.dpr))
        glow_r = int(r * 1.8)
        width, height = surface.get_size()
        if not (-glow_r <= px <= width + glow_r and -glow_r <= py <= height + glow_r):
            return
        cx, cy = int(round(px)), int(round(py))

        glow = pygame.Surface((glow_r * 2, glow_r * 2), pygame.SRCALPHA)
        pygame.draw.circle(glow, BALL_GLOW, (glow_r, glow_r), glow_r)
        surface.blit(glow, (cx - glow_r, cy - glow_r))

        pygame.draw.circle(surface, BALL, (cx, cy), r)
        pygame.draw.circle(surface, BALL_EDGE, (cx, cy), r, 1)

    def draw_hud(self, surface, viewport, readouts):
        width = surface.get_width()
        ground_y = viewport.ground_y

        # axis labels
        xlbl = self.font.render("Distance (m)", True, MUTED)
        surface.blit(xlbl, (viewport.margins.left, ground_y + int(30 * self.dpr)))
        ylbl = pygame.transform.rotate(self.font.render("Height (m)", True, MUTED), 90)
        surface.blit(ylbl, (int(4 * self.dpr), ground_y - int(10 * self.dpr) - ylbl.get_height()))

        if readouts is None:
            return
        lines = readouts.lines()
        pad = int(10 * self.dpr)
        line_h = self.small.get_linesize()
        box_w = max(self.small.size(ln)[0] for ln in lines) + 2 * pad
        box_h = line_h * len(lines) + 2 * pad
        box = pygame.Rect(width - viewport.margins.right - box_w, int(8 * self.dpr), box_w, box_h)

        panel = pygame.Surface(box.size, pygame.SRCALPHA)
        panel.fill((18, 20, 25, 180))
        surface.blit(panel, box.topleft)
        pygame.draw.rect(surface, PANEL_BORDER, box, 1, border_radius=int(6 * self.dpr))

        y = box.y + pad
        for ln in lines:
            surface.blit(self.small.render(ln, True, TEXT), (box.x + pad, y))
            y += line_h
