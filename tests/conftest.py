import os

# headless pygame: no window, no audio device
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame
import pytest

from projectile_lab.physics import SimulationParameters


@pytest.fixture(scope="session", autouse=True)
def pygame_headless():
    pygame.display.init()
    pygame.font.init()
    yield
    pygame.quit()


@pytest.fixture
def fonts():
    return pygame.font.Font(None, 20), pygame.font.Font(None, 16)


@pytest.fixture
def earth_params():
    return SimulationParameters.from_degrees(45.0, 20.0, 1.0, 9.81)
