#!/usr/bin/env python3

import argparse
import logging
import os
import sys

from config import Config
from gcode_post.merge_engine import MergeSettings
from gcode_post.post_processor import PostProcessor
from gcode_post.utils.file_manager import find_program_files
from gcode_post.utils.tags import parse_filter

logger = logging.getLogger("gcode_post.main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='gcode-post',
        description='Merge CAM operation programs into one program per setup and tool.',
    )
    parser.add_argument('-fr', '--feedRate', dest='feed_rate', type=float,
                        help='Replace every F word with this feed rate')
    parser.add_argument('--filter', dest='filter_tags', default='',
                        help='Only write lines carrying all of these tags, e.g. "FAST XY"')
    parser.add_argument('-d', '--directory', default='.',
                        help='Directory holding the program files (default: current)')
    parser.add_argument('--preview', action='store_true',
                        help='Save a PNG toolpath preview beside each merged program')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Increase console verbosity (-v, -vv)')
    return parser


def configure_logging(verbose: int) -> logging.Handler:
    """Install the console handler at the level chosen by -v.

    The handler carries the level itself: the run log raises the package
    logger to INFO, and those records must not reach the console.
    """
    if verbose >= 2:
        log_level = logging.DEBUG
    elif verbose == 1:
        log_level = logging.INFO
    else:
        log_level = logging.WARNING

    console = logging.StreamHandler()
    console.setLevel(log_level)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[console]
    )
    return console


def main(argv=None) -> int:
    """Main application entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    settings = MergeSettings(
        feed_rate=args.feed_rate,
        filter_tags=tuple(parse_filter(args.filter_tags)),
        default_feed_rate=Config.DEFAULT_FEED_RATE,
    )
    if settings.feed_rate is not None:
        print(f" Feed rate: {settings.feed_rate:g}")

    directory = os.path.abspath(args.directory)
    processor = PostProcessor(
        settings,
        output_dir=directory,
        log_path=os.path.join(directory, Config.LOG_FILE),
        preview=args.preview,
    )

    try:
        paths = find_program_files(directory, Config.PROGRAM_EXTENSION)
        result = processor.run(paths)
    except Exception as e:
        logger.debug("Run aborted", exc_info=True)
        print(f"Post-processor failed: {e}", file=sys.stderr)
        return 1

    print(f"Processed {len(result.programs)} file(s). See {Config.LOG_FILE}.")
    return 0


if __name__ == '__main__':
    sys.exit(main())
