"""Frame-driven run state machine.

Idle -> Running <-> Paused -> Landed -> (reset) Idle. Frames are never
scheduled implicitly: the driver asks the injected ``request_next_frame``
for exactly one callback at a time and simply stops asking once the run
is over, which is what ends the loop.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Callable, List, Optional

from projectile_lab import physics
from projectile_lab.config import MAX_FRAME_DT
from projectile_lab.log import get_logger
from projectile_lab.viewport import DEFAULT_MARGINS, fit_viewport

logger = get_logger(__name__)


class Phase(enum.Enum):
    IDLE = "Idle"
    RUNNING = "Running"
    PAUSED = "Paused"
    LANDED = "Landed"


IN_FLIGHT = (Phase.RUNNING, Phase.PAUSED)


@dataclass
class RunState:
    phase: Phase = Phase.IDLE
    elapsed: float = 0.0
    last_frame_timestamp: Optional[float] = None


class FrameScheduler:
    """Callbacks queued for the next display refresh.

    The host loop calls ``dispatch`` once per refresh; anything requested
    during a dispatch waits for the following one.
    """

    def __init__(self):
        self._pending: List[Callable[[float], None]] = []

    @property
    def pending(self):
        return len(self._pending)

    def request(self, callback):
        self._pending.append(callback)

    def dispatch(self, timestamp):
        callbacks, self._pending = self._pending, []
        for callback in callbacks:
            callback(timestamp)
        return len(callbacks)


class AnimationDriver:
    """Owns the run state, the traveled path and the frozen viewport.

    Args:
        read_parameters: returns the current ``SimulationParameters`` from the UI layer
        request_next_frame: schedules ``callback(timestamp_seconds)`` for the next refresh
        canvas_size: returns the canvas size in device pixels
        redraw: called after every state change that affects the picture
        chart: optional ``StripChart`` fed the kinetic energy each advanced frame
        on_change: called after phase transitions so the UI can refresh its controls
    """

    def __init__(self, read_parameters, request_next_frame, canvas_size, redraw=None, chart=None,
                 on_change=None, margins=DEFAULT_MARGINS, max_frame_dt=MAX_FRAME_DT):
        self._read_parameters = read_parameters
        self._request_next_frame = request_next_frame
        self._canvas_size = canvas_size
        self._redraw = redraw or (lambda: None)
        self._on_change = on_change or (lambda: None)
        self.chart = chart
        self.margins = margins
        self.max_frame_dt = max_frame_dt

        self.state = RunState()
        self.traveled_path: List[physics.Point] = []
        self.predicted_path: List[physics.Point] = []
        self.viewport = None
        self.flight_parameters = None
        self.kinetic_energy = math.nan
        self._frame_pending = False

        self._preview(read_parameters())

    @property
    def phase(self):
        return self.state.phase

    @property
    def in_flight(self):
        return self.state.phase in IN_FLIGHT

    # viewport

    def refresh_preview(self):
        """Recompute predicted path and scale from the current parameters.

        Ignored during a run: the scale stays frozen until the run ends.
        """
        if self.in_flight:
            return False
        self._preview(self._read_parameters())
        self._redraw()
        return True

    def _preview(self, params):
        if params.is_valid():
            self.predicted_path = physics.predict_path(params.speed, params.angle, params.gravity)
        else:
            self.predicted_path = []
        self.viewport = fit_viewport(self.predicted_path, self._canvas_size(), self.margins)

    def refit(self):
        """Rescale the current predicted path to the current canvas size."""
        self.viewport = fit_viewport(self.predicted_path, self._canvas_size(), self.margins)
        logger.debug(f"viewport {self.viewport.width}x{self.viewport.height} scale={self.viewport.scale:.4f} px/m")
        self._redraw()

    # transitions

    def launch(self):
        if self.state.phase not in (Phase.IDLE, Phase.LANDED):
            return False
        params = self._read_parameters()
        if not params.is_valid():
            logger.debug(f"launch refused, invalid parameters {params}")
            return False

        self._preview(params)
        self.flight_parameters = params
        self.traveled_path = [(0.0, 0.0)]
        self.kinetic_energy = physics.kinetic_energy(params.mass, physics.velocity_at(0.0, params))
        if self.chart is not None:
            self.chart.set_reference(self.kinetic_energy)
        self.state = RunState(Phase.RUNNING, 0.0, None)
        logger.info(f"launch angle={params.angle_deg:.1f}° speed={params.speed:g} m/s "
                    f"mass={params.mass:g} kg g={params.gravity:g} m/s²")

        self._schedule()
        self._on_change()
        return True

    def toggle_pause(self):
        if self.state.phase is Phase.RUNNING:
            self.state.phase = Phase.PAUSED
        elif self.state.phase is Phase.PAUSED:
            self.state.phase = Phase.RUNNING
        else:
            return False
        self._on_change()
        return True

    def reset(self):
        self.state = RunState()
        self.traveled_path = []
        self.kinetic_energy = math.nan
        self.flight_parameters = None
        self._on_change()
        self.refresh_preview()

    # frames

    def _schedule(self):
        if not self._frame_pending:
            self._frame_pending = True
            self._request_next_frame(self.tick)

    def _current_parameters(self):
        # edits made mid-flight steer the rest of the run; invalid edits are ignored
        params = self._read_parameters()
        if params.is_valid():
            self.flight_parameters = params
        return self.flight_parameters

    def tick(self, timestamp):
        self._frame_pending = False
        state = self.state
        if state.phase not in IN_FLIGHT:
            self._redraw()
            return

        if state.last_frame_timestamp is None:
            state.last_frame_timestamp = timestamp
        raw_dt = max(0.0, timestamp - state.last_frame_timestamp)
        dt = min(self.max_frame_dt, raw_dt)
        if raw_dt > dt:
            logger.debug(f"frame delta {raw_dt:.3f}s clamped to {dt:.3f}s")
        state.last_frame_timestamp = timestamp

        if state.phase is Phase.RUNNING:
            params = self._current_parameters()
            sample = physics.advance(state.elapsed, dt, params)
            state.elapsed = sample.time
            self.traveled_path.append(sample.position)
            if sample.landed:
                state.phase = Phase.LANDED
                x, _ = sample.position
                logger.info(f"landed after {sample.time:.3f}s at x={x:.2f} m")
                self._on_change()
            else:
                self.kinetic_energy = physics.kinetic_energy(params.mass, sample.velocity)
                if self.chart is not None:
                    self.chart.push(self.kinetic_energy)

        self._redraw()
        if state.phase in IN_FLIGHT:
            self._schedule()

    # UI layer

    def controls(self):
        """Enabled flags and pause label for the launch/pause/reset controls."""
        phase = self.state.phase
        return {
            "launch": phase in (Phase.IDLE, Phase.LANDED),
            "pause": phase in IN_FLIGHT,
            "reset": phase is not Phase.IDLE or bool(self.traveled_path),
            "pause_label": "Resume" if phase is Phase.PAUSED else "Pause",
        }
