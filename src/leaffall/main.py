"""
Main entry point for LEAFFALL.

Opens the desktop simulator with settings from the environment,
overridden by command line options.
"""

import argparse
import logging
from typing import Optional, Sequence

from leaffall.settings import get_settings


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )

    # Per-tick messages are only useful when chasing a specific frame
    logging.getLogger("leaffall.animation").setLevel(logging.INFO)


def build_parser() -> argparse.ArgumentParser:
    """Command line options."""
    parser = argparse.ArgumentParser(
        prog="leaffall",
        description="Flickering leaves dissolve reveal effect",
    )
    parser.add_argument("--width", type=int, help="Window width in pixels")
    parser.add_argument("--height", type=int, help="Window height in pixels")
    parser.add_argument("--cell-size", type=int, help="Screen pixels per cell")
    parser.add_argument("--seed", type=int, help="Random seed for a reproducible run")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Run the simulator."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(args.debug or settings.debug)

    logger = logging.getLogger(__name__)

    display = settings.display.model_copy(
        update={
            key: value
            for key, value in (
                ("window_width", args.width),
                ("window_height", args.height),
                ("cell_size", args.cell_size),
            )
            if value is not None
        }
    )
    seed = args.seed if args.seed is not None else settings.effect.seed

    from leaffall.simulator.window import SimulatorWindow, WindowConfig

    window = SimulatorWindow(
        config=WindowConfig(
            width=display.window_width,
            height=display.window_height,
            fps=display.fps,
        ),
        intro_config=display.to_intro_config(),
        flicker_config=settings.effect.to_config(),
        palette=display.to_palette(),
        seed=seed,
    )

    logger.info("Starting LEAFFALL simulator")
    try:
        window.run()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")


if __name__ == "__main__":
    main()
