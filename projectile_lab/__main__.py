import argparse
from pathlib import Path

import pygame

from projectile_lab.app import ProjectileApp
from projectile_lab.config import DEVICE_PIXEL_RATIO, WINDOW_RATIO
from projectile_lab.log import get_logger, setup_logging
from projectile_lab.session import JsonSessionStore, resume_values

logger = get_logger(__name__)

DEFAULT_STORE_DIR = Path.home() / ".projectile_lab" / "saves"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="projectile-lab", description="Interactive projectile motion simulator")
    parser.add_argument("--width", type=int, help="window width in pixels (default: 90%% of the screen)")
    parser.add_argument("--height", type=int, help="window height in pixels (default: 90%% of the screen)")
    parser.add_argument("--dpr", type=float, default=DEVICE_PIXEL_RATIO, help="device pixel ratio of the trajectory canvas")
    parser.add_argument("--store-dir", type=Path, default=DEFAULT_STORE_DIR, help="directory for saved runs")
    parser.add_argument("--resume", help='"last", a saved run id, or a resume reference string')
    parser.add_argument("--log-level", default="INFO", help="console log level")
    parser.add_argument("--log-dir", type=Path, help="also write DEBUG logs to this directory")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.log_level, args.log_dir)

    store = JsonSessionStore(args.store_dir)
    initial = resume_values(store, args.resume) if args.resume else {}
    if initial:
        logger.info(f"resuming with {initial}")

    pygame.init()
    # Display - auto detect resolution and take 90%
    info = pygame.display.Info()
    width = args.width or int(info.current_w * WINDOW_RATIO)
    height = args.height or int(info.current_h * WINDOW_RATIO)

    app = ProjectileApp(width, height, store=store, dpr=args.dpr, initial=initial)
    app.run()


if __name__ == "__main__":
    main()
