from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from .config import (
    DEFAULT_ACCELERATION,
    DEFAULT_AUTHOR,
    DEFAULT_RASTER_S,
    DEFAULT_SCALE,
    DEFAULT_SPORT_TYPE,
    DEFAULT_TIME_MODE,
    CourseSettings,
)
from .errors import CourseBuilderError
from .single_run import run

logger = logging.getLogger("course_builder")


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="course-builder",
        description="Course builder: turn a CSV power trace into a steady-state .zwo workout",
    )
    parser.add_argument("name", help="Course name")
    parser.add_argument("ftp", type=int, help="Absolute FTP in watts; output power is relative to it")
    parser.add_argument("file", help="Path to the CSV file to read (columns: time,power,text)")
    parser.add_argument("-d", "--description", help="Optional description")
    parser.add_argument("-A", "--author", default=DEFAULT_AUTHOR, help=f"Author (default: {DEFAULT_AUTHOR})")
    parser.add_argument(
        "-t",
        "--time-mode",
        default=DEFAULT_TIME_MODE,
        help='How to read the time column: "time" (clock time) or "duration" (length of each step)',
    )
    parser.add_argument("-T", "--sport-type", default=DEFAULT_SPORT_TYPE, help=f"Sport type (default: {DEFAULT_SPORT_TYPE})")
    parser.add_argument("-a", "--acceleration", type=float, default=DEFAULT_ACCELERATION, help="Time shrink factor (default: 1.0)")
    parser.add_argument("-s", "--scale", type=float, default=DEFAULT_SCALE, help="Power scale factor (default: 1.0)")
    parser.add_argument("-r", "--raster", type=int, default=DEFAULT_RASTER_S, help=f"Duration raster in seconds (default: {DEFAULT_RASTER_S})")
    parser.add_argument("-o", "--output", help="Write the workout here instead of stdout")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)

    try:
        settings = CourseSettings(
            name=args.name,
            ftp_watts=args.ftp,
            input_path=args.file,
            description=args.description,
            author=args.author,
            time_mode=args.time_mode,
            sport_type=args.sport_type,
            acceleration=args.acceleration,
            scale=args.scale,
            raster_s=args.raster,
            output_path=args.output,
        )
        run(settings)
    except CourseBuilderError as e:
        logger.error("%s", e)
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
