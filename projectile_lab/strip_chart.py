"""Scrolling kinetic-energy strip chart.

The surface is the history: each push shifts the existing pixels left by
``step`` and only paints the freshly exposed column on the right.
"""

from __future__ import annotations

import math

import pygame

from projectile_lab.config import CHART_BG, CHART_POINT, CHART_STEP


class StripChart:
    def __init__(self, size, step=CHART_STEP, color=CHART_POINT, background=CHART_BG):
        self.step = step
        self.color = color
        self.background = background
        self.reference = None  # J mapped to the full chart height
        self.surface = pygame.Surface(size, 0, 32)
        self.surface.fill(background)

    @property
    def size(self):
        return self.surface.get_size()

    def set_reference(self, energy):
        self.reference = energy if energy is not None and math.isfinite(energy) and energy > 0 else None

    def resize(self, size):
        """Keep the most recent (rightmost) history when the chart changes size."""
        if tuple(size) == self.size:
            return
        old = self.surface
        self.surface = pygame.Surface(size, 0, 32)
        self.surface.fill(self.background)
        w, h = size
        ow, oh = old.get_size()
        self.surface.blit(old, (w - ow, h - oh))

    def value_to_y(self, energy):
        w, h = self.size
        if self.reference is not None:
            height = (energy / self.reference) * (h - 2)
        else:
            scale = max(1.0, 0.5 * h / 1000)  # px per joule, visibility only
            height = energy * scale
        return int(max(0, h - 2 - min(h - 2, max(0.0, height))))

    def push(self, energy):
        if energy is None or not math.isfinite(energy):
            return
        w, h = self.size
        self.surface.scroll(-self.step, 0)
        self.surface.fill(self.background, (w - self.step, 0, self.step, h))
        self.surface.fill(self.color, (w - self.step, self.value_to_y(energy), self.step, 2))
