import math


# Constants & Defaults

FPS = 60

# Physics
G_EARTH = 9.81  # m/s^2
PLANETS = {
    "Mercury": 3.7,
    "Venus": 8.87,
    "Earth": 9.81,
    "Moon": 1.62,
    "Mars": 3.71,
    "Jupiter": 24.79,
    "Saturn": 10.44,
    "Uranus": 8.69,
    "Neptune": 11.15,
    "Pluto": 0.62,
}
CUSTOM = "Custom"
DEFAULT_PLANET = "Earth"

DEFAULT_ANGLE_DEG = 45.0
DEFAULT_SPEED = 20.0  # m/s
DEFAULT_MASS = 1.0  # kg

PATH_SAMPLES = 200
MIN_FLIGHT_TIME = 0.01  # s, sampling window floor
MAX_ANGLE = math.pi / 2

# Animation
MAX_FRAME_DT = 0.05  # s, clamp after a stalled frame

# Viewport (device pixels)
MARGIN_LEFT = 60
MARGIN_RIGHT = 40
MARGIN_TOP = 40
MARGIN_BOTTOM = 70
MIN_WORLD_MARGIN = 5.0  # m
RANGE_MARGIN_RATIO = 0.05
HEIGHT_MARGIN_RATIO = 0.3
MIN_USABLE_PX = 10
MIN_SCALE = 1e-4  # px per m
MIN_CANVAS_W, MIN_CANVAS_H = 320, 240
DEVICE_PIXEL_RATIO = 1.0

# Grid target spacing in pixels and floors in metres
GRID_PX_X, GRID_PX_Y = 100, 60
GRID_MIN_X, GRID_MIN_Y = 5, 2

# Strip chart
CHART_STEP = 2  # px shifted per frame
CHART_H = 140

# Save snapshot
SNAPSHOT_SIZE = (320, 160)
SAVE_TITLE = "Projectile Motion"
SAVE_TOPIC = "projectile"

# Display
BASE_W = 1600  # layout design width
WINDOW_RATIO = 0.9

# Colors (dark theme)
BG = (18, 20, 25)
PANEL = (30, 34, 42)
PANEL_BORDER = (60, 66, 78)
TEXT = (230, 230, 235)
MUTED = (150, 160, 170)
ACCENT = (90, 160, 255)
GOOD = (100, 210, 130)
BAD = (255, 110, 110)
WARN = (255, 210, 120)
DISABLED = (70, 74, 84)

SKY_TOP = (13, 22, 50)
SKY_BOTTOM = (11, 16, 32)
GROUND = (26, 42, 62)
GROUND_LINE = (60, 72, 90)
GRID = (34, 42, 64)
GRID_LABEL = (120, 130, 150)
PREDICTED = (150, 158, 176)
TRAVELED = (106, 166, 255)
BALL = (209, 226, 255)
BALL_EDGE = (40, 60, 100)
BALL_GLOW = (106, 166, 255, 70)
CHART_BG = (11, 16, 32)
CHART_POINT = (106, 166, 255)
