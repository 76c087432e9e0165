import math

import pygame

from projectile_lab.config import BG, DISABLED, PANEL_BORDER, TEXT, MUTED


# UI Widgets

class TextField:
    def __init__(self, label, text, font, rect, scale, enabled=True):
        self.label = label
        self.text = str(text)
        self.font = font
        self.rect = pygame.Rect(rect)
        self.active = False
        self.enabled = enabled
        self.cursor_timer = 0
        self.scale = scale

    def draw(self, surf):
        # label
        label_surf = self.font.render(self.label, True, TEXT if self.enabled else MUTED)
        surf.blit(label_surf, (self.rect.x, self.rect.y - int(22 * self.scale)))

        # box
        pygame.draw.rect(surf, BG, self.rect, border_radius=int(6 * self.scale))
        border = PANEL_BORDER if self.active else (55, 60, 70)
        pygame.draw.rect(surf, border if self.enabled else DISABLED, self.rect, 2, border_radius=int(6 * self.scale))

        # text
        txt = self.font.render(self.text, True, TEXT if self.enabled else MUTED)
        surf.blit(txt, (self.rect.x + int(8 * self.scale), self.rect.y + int(6 * self.scale)))

        # cursor
        if self.active:
            self.cursor_timer += 1
            if self.cursor_timer % 60 < 30:
                cursor_x = self.rect.x + int(8 * self.scale) + txt.get_width() + 2
                pygame.draw.line(surf, TEXT, (cursor_x, self.rect.y + int(6 * self.scale)), (cursor_x, self.rect.y + int(22 * self.scale)), 2)

    def handle_event(self, ev):
        """Returns True when the text changed."""
        if not self.enabled:
            self.active = False
            return False
        if ev.type == pygame.MOUSEBUTTONDOWN:
            self.active = self.rect.collidepoint(ev.pos)
            self.cursor_timer = 0

        if self.active and ev.type == pygame.KEYDOWN:
            if ev.key in (pygame.K_RETURN, pygame.K_TAB):
                self.active = False
            elif ev.key == pygame.K_BACKSPACE:
                self.text = self.text[:-1]
                return True
            # allow digits, decimal point, leading minus
            elif ev.unicode and ev.unicode in '0123456789.-':
                if ev.unicode == '.' and '.' in self.text:
                    return False
                if ev.unicode == '-' and len(self.text) > 0:
                    return False
                self.text += ev.unicode
                return True
        return False

    def get_value(self):
        # unparsable text is NaN so the parameters come out invalid
        try:
            return float(self.text)
        except ValueError:
            return math.nan

    def set_text(self, value):
        self.text = f"{value:g}" if isinstance(value, float) else str(value)

    def set_rect(self, rect, scale):
        self.rect = pygame.Rect(rect)
        self.scale = scale


class Button:
    def __init__(self, text, font, rect, color_primary, scale, enabled=True):
        self.text = text
        self.font = font
        self.rect = pygame.Rect(rect)
        self.color = color_primary
        self.hover = False
        self.enabled = enabled
        self.scale = scale

    def draw(self, surf):
        if not self.enabled:
            base = DISABLED
        else:
            base = tuple(min(255, c + 20) for c in self.color) if self.hover else self.color
        pygame.draw.rect(surf, base, self.rect, border_radius=int(8 * self.scale))
        pygame.draw.rect(surf, PANEL_BORDER, self.rect, 2, border_radius=int(8 * self.scale))
        ts = self.font.render(self.text, True, BG if self.enabled else MUTED)
        surf.blit(ts, ts.get_rect(center=self.rect.center))

    def handle_event(self, ev):
        if ev.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(ev.pos)
        if self.enabled and ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1 and self.rect.collidepoint(ev.pos):
            return True
        return False

    def set_rect(self, rect, scale):
        self.rect = pygame.Rect(rect)
        self.scale = scale


class Selector:
    """Click the left half for the previous option, the right half for the next."""

    def __init__(self, label, options, value, font, rect, scale):
        self.label = label
        self.options = list(options)
        self.index = self.options.index(value) if value in self.options else 0
        self.font = font
        self.rect = pygame.Rect(rect)
        self.scale = scale

    @property
    def value(self):
        return self.options[self.index]

    def draw(self, surf):
        lbl = self.font.render(self.label, True, TEXT)
        surf.blit(lbl, (self.rect.x, self.rect.y - int(22 * self.scale)))
        pygame.draw.rect(surf, BG, self.rect, border_radius=int(6 * self.scale))
        pygame.draw.rect(surf, (55, 60, 70), self.rect, 2, border_radius=int(6 * self.scale))

        txt = self.font.render(self.value, True, TEXT)
        surf.blit(txt, txt.get_rect(center=self.rect.center))
        for arrow, x in (("<", self.rect.x + int(10 * self.scale)), (">", self.rect.right - int(20 * self.scale))):
            a = self.font.render(arrow, True, MUTED)
            surf.blit(a, (x, self.rect.centery - a.get_height() // 2))

    def handle_event(self, ev):
        """Returns True when the selection changed."""
        if ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1 and self.rect.collidepoint(ev.pos):
            step = -1 if ev.pos[0] < self.rect.centerx else 1
            self.index = (self.index + step) % len(self.options)
            return True
        return False

    def set_rect(self, rect, scale):
        self.rect = pygame.Rect(rect)
        self.scale = scale
