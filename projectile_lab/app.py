import sys

import pygame

from projectile_lab import physics
from projectile_lab.config import (
    ACCENT,
    BAD,
    BASE_W,
    BG,
    CHART_H,
    CUSTOM,
    DEFAULT_ANGLE_DEG,
    DEFAULT_MASS,
    DEFAULT_PLANET,
    DEFAULT_SPEED,
    DEVICE_PIXEL_RATIO,
    FPS,
    GOOD,
    MUTED,
    PANEL,
    PANEL_BORDER,
    PLANETS,
    TEXT,
    WARN,
)
from projectile_lab.driver import AnimationDriver, FrameScheduler
from projectile_lab.log import get_logger
from projectile_lab.render import Readouts, Renderer
from projectile_lab.session import save_run
from projectile_lab.strip_chart import StripChart
from projectile_lab.viewport import device_canvas_size, effective_dpr
from projectile_lab.widgets import Button, Selector, TextField

logger = get_logger(__name__)


# Main App

class ProjectileApp:
    def __init__(self, width, height, store=None, dpr=DEVICE_PIXEL_RATIO, initial=None):
        self.width = width
        self.height = height
        self.screen = pygame.display.set_mode((self.width, self.height), pygame.RESIZABLE)
        pygame.display.set_caption("Projectile Motion")
        self.clock = pygame.time.Clock()
        self.scale = self.width / BASE_W
        self.dpr = effective_dpr(dpr)
        self.store = store

        # transient message
        self.msg_text = ""
        self.msg_color = None
        self.msg_timer = 0

        self.create_fonts()
        self.create_widgets(initial or {})
        self.layout()

        # simulation
        self.scheduler = FrameScheduler()
        self.canvas = pygame.Surface(device_canvas_size(self.graph_rect.size, self.dpr), 0, 32)
        self.chart = StripChart(self.chart_rect.size)
        self.driver = AnimationDriver(
            self.read_parameters,
            self.scheduler.request,
            self.canvas_size,
            redraw=self.render_canvas,
            chart=self.chart,
            on_change=self.sync_controls,
        )

    def create_fonts(self):
        self.font = pygame.font.Font(None, max(16, int(20 * self.scale)))
        self.title_font = pygame.font.Font(None, max(24, int(40 * self.scale)))
        self.small = pygame.font.Font(None, max(12, int(16 * self.scale)))
        # canvas text is drawn in device pixels
        self.renderer = Renderer(
            pygame.font.Font(None, max(16, int(20 * self.scale * self.dpr))),
            pygame.font.Font(None, max(14, int(18 * self.scale * self.dpr))),
            self.dpr,
        )

    def create_widgets(self, initial):
        planet = initial.get("planet", DEFAULT_PLANET)
        options = list(PLANETS) + [CUSTOM]
        if planet not in options:
            planet = DEFAULT_PLANET
        gravity = initial.get("g", PLANETS.get(planet, PLANETS[DEFAULT_PLANET]))

        rect = (0, 0, 10, 10)
        self.angle_field = TextField("Angle (°)", f"{initial.get('angle', DEFAULT_ANGLE_DEG):g}", self.font, rect, self.scale)
        self.speed_field = TextField("Initial Speed (m/s)", f"{initial.get('speed', DEFAULT_SPEED):g}", self.font, rect, self.scale)
        self.mass_field = TextField("Mass (kg)", f"{initial.get('mass', DEFAULT_MASS):g}", self.font, rect, self.scale)
        self.planet_select = Selector("Gravity", options, planet, self.font, rect, self.scale)
        self.gravity_field = TextField("Custom g (m/s²)", f"{gravity:g}", self.font, rect, self.scale,
                                       enabled=planet == CUSTOM)

        self.launch_btn = Button("Launch", self.font, rect, ACCENT, self.scale)
        self.pause_btn = Button("Pause", self.font, rect, WARN, self.scale, enabled=False)
        self.reset_btn = Button("Reset", self.font, rect, BAD, self.scale, enabled=False)
        self.save_btn = Button("Save Run", self.font, rect, (100, 200, 180), self.scale)

        self.fields = (self.angle_field, self.speed_field, self.mass_field, self.gravity_field)
        self.buttons = (self.launch_btn, self.pause_btn, self.reset_btn, self.save_btn)

    def layout(self):
        self.scale = self.width / BASE_W
        self.create_fonts()

        panel_w = int(320 * self.scale)
        panel_x = int(30 * self.scale)
        panel_y = int(80 * self.scale)
        panel_h = int(self.height - 120 * self.scale)
        self.panel_rect = pygame.Rect(panel_x, panel_y, panel_w, panel_h)

        field_w = panel_w - int(40 * self.scale)
        field_h = int(42 * self.scale)
        fx = panel_x + int(20 * self.scale)
        fy = panel_y + int(30 * self.scale)
        row = field_h + int(30 * self.scale)

        controls = (self.angle_field, self.speed_field, self.mass_field, self.planet_select, self.gravity_field)
        for i, widget in enumerate(controls):
            widget.font = self.font
            widget.set_rect((fx, fy + i * row, field_w, field_h), self.scale)

        # buttons, two per row
        btn_h = int(44 * self.scale)
        btn_w = (field_w - int(12 * self.scale)) // 2
        by = fy + len(controls) * row
        for i, btn in enumerate(self.buttons):
            bx = fx + (i % 2) * (btn_w + int(12 * self.scale))
            btn.font = self.font
            btn.set_rect((bx, by + (i // 2) * (btn_h + int(12 * self.scale)), btn_w, btn_h), self.scale)

        # kinetic energy strip chart under the buttons
        cy = by + 2 * (btn_h + int(12 * self.scale)) + int(30 * self.scale)
        ch = max(40, min(int(CHART_H * self.scale), self.panel_rect.bottom - cy - int(20 * self.scale)))
        self.chart_rect = pygame.Rect(fx, cy, field_w, ch)

        # graph area (right)
        gx = panel_x + panel_w + int(30 * self.scale)
        gy = int(80 * self.scale)
        gw = self.width - gx - int(30 * self.scale)
        gh = self.height - gy - int(80 * self.scale)
        self.graph_rect = pygame.Rect(gx, gy, max(1, gw), max(1, gh))

    # UI layer -> core

    def canvas_size(self):
        return self.canvas.get_size()

    def read_parameters(self):
        gravity = physics.resolve_gravity(self.planet_select.value, self.gravity_field.get_value())
        return physics.SimulationParameters.from_degrees(
            self.angle_field.get_value(),
            self.speed_field.get_value(),
            self.mass_field.get_value(),
            gravity,
        )

    def render_canvas(self):
        params = self.read_parameters()
        analytics = physics.compute_analytics(params.speed, params.angle, params.gravity)
        readouts = Readouts.from_analytics(analytics, params.gravity, self.driver.kinetic_energy, self.driver.phase.value)
        self.renderer.draw(self.canvas, self.driver.viewport, self.driver.predicted_path,
                           self.driver.traveled_path, readouts)

    def sync_controls(self):
        c = self.driver.controls()
        self.launch_btn.enabled = c["launch"]
        self.pause_btn.enabled = c["pause"]
        self.pause_btn.text = c["pause_label"]
        self.reset_btn.enabled = c["reset"]
        self.save_btn.enabled = self.store is not None

    def on_parameters_changed(self):
        # scale is frozen mid-flight; the HUD still follows the fields
        if not self.driver.refresh_preview():
            self.render_canvas()

    def on_planet_changed(self):
        planet = self.planet_select.value
        self.gravity_field.enabled = planet == CUSTOM
        if planet != CUSTOM:
            self.gravity_field.set_text(PLANETS[planet])
        self.on_parameters_changed()

    def resize(self, width, height):
        logger.debug(f"window resized to {width}x{height}")
        self.width, self.height = width, height
        self.screen = pygame.display.set_mode((self.width, self.height), pygame.RESIZABLE)
        self.layout()
        self.canvas = pygame.Surface(device_canvas_size(self.graph_rect.size, self.dpr), 0, 32)
        self.chart.resize(self.chart_rect.size)
        self.driver.refit()

    def save(self):
        if self.store is None:
            self.flash_message("No session store configured", BAD)
            return
        params = self.read_parameters()
        analytics = physics.compute_analytics(params.speed, params.angle, params.gravity)
        record_id = save_run(self.store, params, analytics, self.canvas, self.planet_select.value,
                             self.driver.kinetic_energy)
        if record_id is None:
            self.flash_message("Save failed", BAD)
        else:
            self.flash_message(f"Saved run {record_id[:8]}", GOOD)

    def flash_message(self, text, color, duration=3.0):
        self.msg_text = text
        self.msg_color = color
        self.msg_timer = duration * FPS

    def editing(self):
        return any(f.active for f in self.fields)

    def handle_events(self):
        for ev in pygame.event.get():
            if ev.type == pygame.QUIT:
                pygame.quit()
                sys.exit(0)
            elif ev.type == pygame.VIDEORESIZE:
                self.resize(ev.w, ev.h)
                continue
            elif ev.type == pygame.KEYDOWN and not self.editing():
                if ev.key == pygame.K_F11:
                    pygame.display.toggle_fullscreen()
                elif ev.key == pygame.K_SPACE:
                    self.driver.toggle_pause()
                elif ev.key == pygame.K_RETURN:
                    self.driver.launch()
                elif ev.key == pygame.K_r:
                    self.driver.reset()

            # forward to UI elements
            changed = False
            for field in self.fields:
                changed = field.handle_event(ev) or changed
            if self.planet_select.handle_event(ev):
                self.on_planet_changed()
            elif changed:
                self.on_parameters_changed()

            if self.launch_btn.handle_event(ev):
                self.driver.launch()
            if self.pause_btn.handle_event(ev):
                self.driver.toggle_pause()
            if self.reset_btn.handle_event(ev):
                self.driver.reset()
            if self.save_btn.handle_event(ev):
                self.save()

    def update(self):
        if self.msg_timer > 0:
            self.msg_timer -= 1
            if self.msg_timer <= 0:
                self.msg_text = ""
                self.msg_color = None

    def draw(self):
        self.screen.fill(BG)

        title = self.title_font.render("Projectile Motion", True, TEXT)
        self.screen.blit(title, (int(30 * self.scale), int(20 * self.scale)))

        # left panel
        pygame.draw.rect(self.screen, PANEL, self.panel_rect, border_radius=int(10 * self.scale))
        pygame.draw.rect(self.screen, PANEL_BORDER, self.panel_rect, 2, border_radius=int(10 * self.scale))
        for widget in self.fields + (self.planet_select,) + self.buttons:
            widget.draw(self.screen)

        # strip chart
        lbl = self.small.render("Kinetic energy", True, MUTED)
        self.screen.blit(lbl, (self.chart_rect.x, self.chart_rect.y - lbl.get_height() - 4))
        self.screen.blit(self.chart.surface, self.chart_rect.topleft)
        pygame.draw.rect(self.screen, PANEL_BORDER, self.chart_rect, 1)

        # trajectory canvas
        if self.canvas.get_size() == self.graph_rect.size:
            self.screen.blit(self.canvas, self.graph_rect.topleft)
        else:
            self.screen.blit(pygame.transform.smoothscale(self.canvas, self.graph_rect.size), self.graph_rect.topleft)
        pygame.draw.rect(self.screen, (40, 44, 50), self.graph_rect, 2, border_radius=int(8 * self.scale))

        if self.msg_timer > 0:
            mt = self.font.render(self.msg_text, True, self.msg_color)
            mx = int(self.width / 2 - mt.get_width() / 2)
            my = int(self.height - 40 * self.scale)
            bg_rect = pygame.Rect(mx - 8, my - 6, mt.get_width() + 16, mt.get_height() + 12)
            pygame.draw.rect(self.screen, (16, 18, 22), bg_rect, border_radius=int(6 * self.scale))
            self.screen.blit(mt, (mx, my))

        self.screen.blit(self.small.render(self.footer_text(), True, MUTED),
                         (int(30 * self.scale), int(self.height - 34 * self.scale)))

        pygame.display.flip()

    def footer_text(self):
        mx, my = pygame.mouse.get_pos()
        if self.graph_rect.collidepoint((mx, my)):
            # window -> device pixels -> metres
            cw, ch = self.canvas.get_size()
            px = (mx - self.graph_rect.x) * cw / self.graph_rect.w
            py = (my - self.graph_rect.y) * ch / self.graph_rect.h
            x, y = self.driver.viewport.to_world(px, py)
            return f"x = {x:.2f} m   y = {y:.2f} m"
        return "ENTER launch, SPACE pause/resume, R reset, F11 fullscreen"

    def run(self):
        self.driver.refresh_preview()
        self.sync_controls()
        while True:
            self.clock.tick(FPS)
            self.handle_events()
            self.scheduler.dispatch(pygame.time.get_ticks() / 1000.0)
            self.update()
            self.draw()
