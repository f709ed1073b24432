"""
Command line front end.

Usage::

    python -m blurstag photo.png -o wallpaper.jpg --intensity 120
"""

from __future__ import annotations

import argparse
import logging
import mimetypes
import sys
from pathlib import Path

from .config import settings
from .errors import BlurStagError
from .parameters import BlurParameters
from .pipeline import BlurPipeline
from .strategies import BlurStrategy, STRATEGY_REGISTRY

logger = logging.getLogger("blurstag")


def build_parser() -> argparse.ArgumentParser:
    """Creates the argument parser."""
    parser = argparse.ArgumentParser(
        prog="blurstag",
        description="Create a soft, blurred wallpaper version of an image",
    )
    parser.add_argument("input", type=Path, help="Source image file")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help=f"Output JPEG file (default: {settings.OUTPUT_FILENAME})",
    )
    parser.add_argument(
        "-i",
        "--intensity",
        type=float,
        default=settings.DEFAULT_INTENSITY,
        help=f"Blur intensity 0-{settings.MAX_INTENSITY:g} (default: {settings.DEFAULT_INTENSITY:g})",
    )
    parser.add_argument(
        "--strategy",
        choices=sorted(STRATEGY_REGISTRY),
        default="stack",
        help="Blur algorithm (default: stack)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every rendering step",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Runs the command line tool

    :param argv: Arguments without the program name. sys.argv if None.
    :return: The exit code
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        data = args.input.read_bytes()
    except OSError as exc:
        logger.error("Can not read %s: %s", args.input, exc)
        return 1
    mime_type, _ = mimetypes.guess_type(args.input.name)
    pipeline = BlurPipeline(strategy=BlurStrategy.from_name(args.strategy))
    try:
        output = pipeline.run_sync(
            data, BlurParameters(intensity=args.intensity), mime_type=mime_type
        )
    except BlurStagError as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        return 1
    target = output.save(args.output)
    logger.info("Saved %s (%dx%d)", target, output.width, output.height)
    return 0


if __name__ == "__main__":
    sys.exit(main())
