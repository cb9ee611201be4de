#!/usr/bin/env python3
"""
create_grid.py - Create a labeled image grid from a set of images.

Images are given in row-major order (left to right, top to bottom).

Usage:
    python -m grid_composer.create_grid grid.jpg \
        --rows "Cyberpunk,Girl Next Door,Goth,Professional" \
        --cols "Cyberpunk,Coffeeshop,Winter Forest,Boardroom" \
        --images "img1.png,img2.png,img3.png,..."

Exit codes:
    0 on success (including runs where some images were replaced by a placeholder)
    1 on configuration errors or when the output cannot be written
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from grid_composer.compositor import compose_grid
from grid_composer.config import (
    DEFAULT_CANVAS_SIZE_PX,
    DEFAULT_FONT_SIZE_PX,
    DEFAULT_HEADER_SIZE_PX,
    DEFAULT_QUALITY,
    ConfigurationError,
    resolve_grid_spec,
    split_list,
)
from grid_composer.encoder import OutputWriteError, save_grid
from grid_composer.utils import EXIT_GENERAL_ERROR, EXIT_SUCCESS

logger = logging.getLogger(__name__)


class GridArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports bad arguments as ConfigurationError."""

    def error(self, message):
        raise ConfigurationError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = GridArgumentParser(
        prog="grid-composer",
        description="Create a labeled image grid from a set of images.",
        epilog="Images should be provided in row-major order (left to right, top to bottom).",
    )

    parser.add_argument("output", nargs="?", help="Output JPEG path (required)")
    parser.add_argument("--rows", help='Row labels, "label1,label2,..." (required)')
    parser.add_argument("--cols", help='Column labels, "label1,label2,..." (required)')
    parser.add_argument("--images", help='Image paths in row-major order, "path1,path2,..." (required)')
    parser.add_argument("--size", type=int, help=f"Grid size in pixels (default: {DEFAULT_CANVAS_SIZE_PX})")
    parser.add_argument("--header", type=int, help=f"Header size for labels (default: {DEFAULT_HEADER_SIZE_PX})")
    parser.add_argument("--font-size", type=int, help=f"Font size for labels (default: {DEFAULT_FONT_SIZE_PX})")
    parser.add_argument("--quality", type=int, help=f"JPEG quality 1-100 (default: {DEFAULT_QUALITY})")
    parser.add_argument("--workers", type=int, help="Threads used to decode images (default: CPU count, max 8)")
    parser.add_argument("--config", type=Path, help="YAML file with default size/header/font_size/quality/style")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the grid composer."""
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    if not argv or "-h" in argv or "--help" in argv:
        parser.print_help()
        return EXIT_SUCCESS

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

    try:
        args = parser.parse_args(argv)
    except ConfigurationError as e:
        logger.error(f"Error: {e}")
        return EXIT_GENERAL_ERROR

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        spec = resolve_grid_spec(
            output_path=args.output,
            row_labels=split_list(args.rows),
            col_labels=split_list(args.cols),
            image_paths=split_list(args.images),
            size=args.size,
            header=args.header,
            font_size=args.font_size,
            quality=args.quality,
            workers=args.workers,
            config_path=args.config,
        )
    except ConfigurationError as e:
        logger.error(f"Error: {e}")
        return EXIT_GENERAL_ERROR

    canvas = compose_grid(spec)

    try:
        save_grid(canvas, spec.output_path, spec.quality)
    except OutputWriteError as e:
        logger.error(f"Error: {e}")
        return EXIT_GENERAL_ERROR

    return EXIT_SUCCESS


if __name__ == "__main__":
    raise SystemExit(main())
