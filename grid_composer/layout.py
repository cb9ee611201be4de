"""
layout.py - Layout Engine.

Cell geometry is derived once from the GridSpec. Cell sizes use floor
division; any remainder is left as a margin on the right/bottom edge and is
never redistributed across cells.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from grid_composer.config import CELL_PADDING_PX, GridSpec


@dataclass(frozen=True)
class Layout:
    canvas_size: int
    header_size: int
    num_rows: int
    num_cols: int
    content_width: int
    content_height: int
    cell_width: int
    cell_height: int


@dataclass(frozen=True)
class CellRect:
    row: int
    col: int
    index: int  # row-major position in the image list
    x: int
    y: int
    width: int
    height: int


@dataclass(frozen=True)
class Placement:
    """Where a fitted image is drawn on the canvas (float pixel units)."""
    x: float
    y: float
    width: float
    height: float


def compute_layout(spec: GridSpec) -> Layout:
    content_width = spec.canvas_size - spec.header_size
    content_height = spec.canvas_size - spec.header_size
    return Layout(
        canvas_size=spec.canvas_size,
        header_size=spec.header_size,
        num_rows=spec.num_rows,
        num_cols=spec.num_cols,
        content_width=content_width,
        content_height=content_height,
        cell_width=content_width // spec.num_cols,
        cell_height=content_height // spec.num_rows,
    )


def cell_origin(layout: Layout, row: int, col: int) -> tuple[int, int]:
    """Top-left corner of cell (row, col)."""
    return (
        layout.header_size + col * layout.cell_width,
        layout.header_size + row * layout.cell_height,
    )


def cell_rects(layout: Layout) -> Iterator[CellRect]:
    """Yield every cell in row-major order."""
    index = 0
    for row in range(layout.num_rows):
        for col in range(layout.num_cols):
            x, y = cell_origin(layout, row, col)
            yield CellRect(row, col, index, x, y, layout.cell_width, layout.cell_height)
            index += 1


def vertical_gridlines(layout: Layout) -> list[int]:
    """x positions of the C+1 column boundaries."""
    return [layout.header_size + c * layout.cell_width for c in range(layout.num_cols + 1)]


def horizontal_gridlines(layout: Layout) -> list[int]:
    """y positions of the R+1 row boundaries."""
    return [layout.header_size + r * layout.cell_height for r in range(layout.num_rows + 1)]


def fit_image(
    image_width: int,
    image_height: int,
    cell: CellRect,
    padding: int = CELL_PADDING_PX,
) -> Placement:
    """
    Aspect-fit an image into a cell, leaving `padding` px on the constrained axis.

    An image relatively wider than the cell is fit to width and centred
    vertically; otherwise it is fit to height and centred horizontally.
    """
    img_aspect = image_width / image_height
    cell_aspect = cell.width / cell.height

    if img_aspect > cell_aspect:
        draw_width = cell.width - 2 * padding
        draw_height = draw_width / img_aspect
        draw_x = cell.x + padding
        draw_y = cell.y + (cell.height - draw_height) / 2
    else:
        draw_height = cell.height - 2 * padding
        draw_width = draw_height * img_aspect
        draw_x = cell.x + (cell.width - draw_width) / 2
        draw_y = cell.y + padding

    return Placement(draw_x, draw_y, draw_width, draw_height)
