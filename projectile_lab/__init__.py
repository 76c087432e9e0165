"""Interactive projectile motion simulator."""

__version__ = "0.1.0"
