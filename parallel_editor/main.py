"""
Parallel Image Editor - command line entry point.

Run ``parallel-editor --help`` for the available commands.
"""

import argparse
import sys
from typing import List, Optional, Tuple

from .core import EditorError, FlipAxis
from .oiio import OiioAdapter
from .processing import ParallelFilterExecutor, get_all_categories, get_filters_by_category
from .services import EditSession, Settings
from .utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def _parse_size(text: str) -> Tuple[int, int]:
    """Parse "WxH" into (width, height)."""
    try:
        width, height = (int(part) for part in text.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got {text!r}") from None
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError(f"size must be positive, got {text!r}")
    return width, height


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="parallel-editor",
        description="Apply color filters and simple transforms to JPEG/PNG/BMP images.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    parser.add_argument("--settings", help="path to settings.ini")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("filters", help="list available filters")

    apply_cmd = commands.add_parser("apply", help="apply one filter")
    apply_cmd.add_argument("input")
    apply_cmd.add_argument("output")
    apply_cmd.add_argument("-f", "--filter", required=True, dest="filter_id")
    apply_cmd.add_argument("-w", "--workers", type=int, help="worker threads (0 = auto)")

    transform_cmd = commands.add_parser("transform", help="flip, rotate or resize")
    transform_cmd.add_argument("input")
    transform_cmd.add_argument("output")
    op = transform_cmd.add_mutually_exclusive_group(required=True)
    op.add_argument("--flip", choices=[axis.value for axis in FlipAxis])
    op.add_argument("--rotate", action="store_true", help="rotate 90 degrees clockwise")
    op.add_argument("--resize", type=_parse_size, metavar="WxH")

    preview_cmd = commands.add_parser("preview", help="write a display-scaled copy")
    preview_cmd.add_argument("input")
    preview_cmd.add_argument("output")
    preview_cmd.add_argument("--box", type=_parse_size, metavar="WxH")

    return parser


def _list_filters() -> None:
    for category in get_all_categories():
        print(category)
        for f in get_filters_by_category(category):
            print(f"  {f.filter_id:<18} {f.description}")


def run(args: argparse.Namespace) -> None:
    if args.command == "filters":
        _list_filters()
        return

    settings = Settings(args.settings)
    executor = None
    if getattr(args, "workers", None) is not None:
        executor = ParallelFilterExecutor(
            max_workers=args.workers,
            rows_per_chunk=settings.get_rows_per_chunk(),
        )
    session = EditSession(settings, executor)
    session.open(args.input)

    if args.command == "apply":
        session.apply_filter(args.filter_id)
        session.save(args.output)
    elif args.command == "transform":
        if args.flip:
            session.flip(args.flip)
        elif args.rotate:
            session.rotate90()
        else:
            session.resize(*args.resize)
        session.save(args.output)
    elif args.command == "preview":
        box = args.box or settings.get_preview_box()
        scaled = session.preview(*box)
        OiioAdapter.save(scaled, args.output, jpeg_quality=settings.get_jpeg_quality())


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments and run one command. Returns the exit status."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    logger.debug("OpenImageIO version: %s", OiioAdapter.get_oiio_version())

    try:
        run(args)
    except (EditorError, OSError, ValueError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
