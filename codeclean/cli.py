"""
Command line entry point.

    codeclean ./src/App.vue
    codeclean ./src/components
    codeclean ./src --no-backup
    codeclean ./src --no-empty-lines        # strip comments, keep blank lines
    codeclean ./src --extensions .js        # only .js files
    codeclean ./src --no-verbose
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .files import process_paths
from .log import setup_logging
from .models import StageConfig
from .rules import DEFAULT_EXTENSIONS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codeclean",
        description="Strip comments and blank lines from source files in place.",
    )
    parser.add_argument("paths", nargs="+", metavar="PATH", help="file or directory to clean")
    parser.add_argument("--no-backup", dest="backup", action="store_false",
                        help="do not keep a copy of the original next to each file")
    parser.add_argument("--no-verbose", "-q", dest="verbose", action="store_false",
                        help="only report failures")
    parser.add_argument("--no-html-comments", dest="remove_markup_comments", action="store_false",
                        help="keep <!-- --> comments")
    parser.add_argument("--no-js-comments", dest="remove_line_comments", action="store_false",
                        help="keep // and /* */ comments")
    parser.add_argument("--no-css-comments", dest="remove_style_comments", action="store_false",
                        help="keep comments after an opening <style> tag")
    parser.add_argument("--no-empty-lines", dest="remove_empty_lines", action="store_false",
                        help="keep empty lines")
    parser.add_argument("--no-trim-whitespace", dest="trim_trailing_whitespace", action="store_false",
                        help="keep trailing whitespace")
    parser.add_argument("--no-trim-ends", dest="trim_file_ends", action="store_false",
                        help="keep blank lines at the start and end of each file")
    parser.add_argument("--extensions", default=",".join(DEFAULT_EXTENSIONS),
                        help="comma separated extensions to clean (default: %(default)s)")
    parser.add_argument("--workers", type=int, default=1,
                        help="files cleaned in parallel (default: %(default)s)")
    return parser


def stage_config_from_args(args: argparse.Namespace) -> StageConfig:
    return StageConfig(**{name: getattr(args, name) for name in StageConfig.model_fields})


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = setup_logging(logging.INFO if args.verbose else logging.WARNING)

    result = process_paths(
        args.paths,
        config=stage_config_from_args(args),
        extensions=args.extensions,
        backup=args.backup,
        workers=max(1, args.workers),
    )

    if args.verbose:
        print(f"Done: cleaned {result.success}/{result.processed} files")
    if result.failed:
        logger.warning("%d file(s) failed", result.failed)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
