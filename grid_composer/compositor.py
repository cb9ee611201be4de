"""
compositor.py - Image Compositor.

Each cell's source image is decoded once into a CellImage result, which is
either a decoded image or the ImageLoadError explaining why it could not be
decoded. Decoding may run on a thread pool; drawing always happens on the
calling thread in row-major order so the output is deterministic.
"""

from __future__ import annotations

import logging
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from itertools import islice
from pathlib import Path
from typing import Iterator, Optional, Sequence

from PIL import Image

from grid_composer.config import GridSpec, GridStyle
from grid_composer.drawing import DrawingContext, get_font, new_canvas
from grid_composer.labels import render_headers
from grid_composer.layout import CellRect, Layout, cell_rects, compute_layout, fit_image

logger = logging.getLogger(__name__)


class ImageLoadError(Exception):
    """A single source image could not be decoded."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


@dataclass(frozen=True)
class CellImage:
    """Decode result for one cell: exactly one of image/error is set."""
    path: str
    image: Optional[Image.Image] = None
    error: Optional[ImageLoadError] = None

    @property
    def ok(self) -> bool:
        return self.image is not None


def load_cell_image(path: str) -> CellImage:
    """Fully decode one image; failures are returned, not raised."""
    try:
        with Image.open(Path(path)) as img:
            img.load()
            has_alpha = img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info)
            decoded = img.convert("RGBA" if has_alpha else "RGB")
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        return CellImage(path=path, error=ImageLoadError(path, str(e)))
    return CellImage(path=path, image=decoded)


def load_cell_images(paths: Sequence[str], workers: int = 1) -> Iterator[CellImage]:
    """
    Decode images lazily, yielding results in the same (row-major) order as `paths`.

    At most `workers` decodes are in flight ahead of the consumer, so only a
    bounded number of decoded rasters exist at any time.
    """
    if workers <= 1 or len(paths) <= 1:
        for path in paths:
            yield load_cell_image(path)
        return

    path_iter = iter(paths)
    with ThreadPoolExecutor(max_workers=min(workers, len(paths))) as executor:
        # Bounded queue: submit a new decode only when one result is taken
        pending = deque(executor.submit(load_cell_image, p) for p in islice(path_iter, workers))
        while pending:
            result = pending.popleft().result()
            next_path = next(path_iter, None)
            if next_path is not None:
                pending.append(executor.submit(load_cell_image, next_path))
            yield result


def draw_placeholder(ctx: DrawingContext, cell: CellRect, font_size: int, style: GridStyle) -> None:
    pad = style.padding
    ctx.save()
    ctx.set_fill(style.placeholder_fill)
    ctx.fill_rect(cell.x + pad, cell.y + pad, cell.width - 2 * pad, cell.height - 2 * pad)
    ctx.set_fill(style.placeholder_text_color)
    ctx.set_font(get_font(font_size * style.placeholder_font_scale))
    ctx.fill_text(style.placeholder_text, cell.x + cell.width / 2, cell.y + cell.height / 2)
    ctx.restore()


def draw_cell(ctx: DrawingContext, cell: CellRect, cell_image: CellImage, font_size: int, style: GridStyle) -> None:
    """Render either the fitted image or the error placeholder into `cell`."""
    if not cell_image.ok:
        draw_placeholder(ctx, cell, font_size, style)
        return

    width, height = cell_image.image.size
    placement = fit_image(width, height, cell, padding=style.padding)
    logger.debug(
        f"Cell ({cell.row},{cell.col}): {width}x{height} -> "
        f"{placement.width:.1f}x{placement.height:.1f} at ({placement.x:.1f},{placement.y:.1f})"
    )
    ctx.draw_image(cell_image.image, placement.x, placement.y, placement.width, placement.height)


def composite_images(ctx: DrawingContext, layout: Layout, spec: GridSpec) -> int:
    """
    Draw every cell onto the canvas.

    Returns:
        Number of cells that received an error placeholder
    """
    total = len(spec.image_paths)
    results = load_cell_images(spec.image_paths, workers=spec.workers)

    failures = 0
    for cell, cell_image in zip(cell_rects(layout), results):
        logger.info(f"Loading image {cell.index + 1}/{total}: {cell_image.path}")
        if not cell_image.ok:
            failures += 1
            logger.warning(f"Error loading image {cell_image.error}")
        draw_cell(ctx, cell, cell_image, spec.font_size, spec.style)

    if failures:
        logger.warning(f"{failures}/{total} cells replaced with an error placeholder")
    return failures


def compose_grid(spec: GridSpec) -> Image.Image:
    """Build the full labeled grid raster for a resolved GridSpec."""
    layout = compute_layout(spec)
    logger.info(
        f"Creating {spec.canvas_size}x{spec.canvas_size} grid with "
        f"{spec.num_rows} rows and {spec.num_cols} cols"
    )
    logger.info(f"Cell size: {layout.cell_width}x{layout.cell_height}")

    canvas = new_canvas(spec.canvas_size, spec.style.background)
    ctx = DrawingContext(canvas)
    render_headers(ctx, layout, spec.row_labels, spec.col_labels, spec.font_size, spec.style)
    composite_images(ctx, layout, spec)
    return canvas
