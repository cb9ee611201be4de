"""
labels.py - Label Renderer.

Column labels run horizontally across the top header band, row labels are
rotated a quarter turn counter-clockwise in the left band. The gridline mesh
is drawn first and the two header separators on top of it.
"""

from __future__ import annotations

import math
from typing import Sequence

from grid_composer.config import GridStyle
from grid_composer.drawing import DrawingContext, get_font
from grid_composer.layout import Layout, horizontal_gridlines, vertical_gridlines


def column_label_anchors(layout: Layout) -> list[tuple[float, float]]:
    return [
        (layout.header_size + c * layout.cell_width + layout.cell_width / 2, layout.header_size / 2)
        for c in range(layout.num_cols)
    ]


def row_label_anchors(layout: Layout) -> list[tuple[float, float]]:
    return [
        (layout.header_size / 2, layout.header_size + r * layout.cell_height + layout.cell_height / 2)
        for r in range(layout.num_rows)
    ]


def draw_labels(
    ctx: DrawingContext,
    layout: Layout,
    row_labels: Sequence[str],
    col_labels: Sequence[str],
    font_size: int,
    style: GridStyle,
) -> None:
    ctx.set_fill(style.label_color)
    ctx.set_font(get_font(font_size, bold=True))

    for text, (x, y) in zip(col_labels, column_label_anchors(layout)):
        ctx.fill_text(text, x, y)

    for text, (x, y) in zip(row_labels, row_label_anchors(layout)):
        ctx.save()
        ctx.translate(x, y)
        ctx.rotate(-math.pi / 2)
        ctx.fill_text(text, 0, 0)
        ctx.restore()


def draw_gridlines(ctx: DrawingContext, layout: Layout, style: GridStyle) -> None:
    size = layout.canvas_size
    header = layout.header_size

    ctx.set_stroke(style.gridline_color, style.gridline_width)
    for x in vertical_gridlines(layout):
        ctx.stroke_line(x, header, x, size)
    for y in horizontal_gridlines(layout):
        ctx.stroke_line(header, y, size, y)

    ctx.set_stroke(style.separator_color, style.separator_width)
    ctx.stroke_line(header, 0, header, size)
    ctx.stroke_line(0, header, size, header)


def render_headers(
    ctx: DrawingContext,
    layout: Layout,
    row_labels: Sequence[str],
    col_labels: Sequence[str],
    font_size: int,
    style: GridStyle,
) -> None:
    """Labels, then gridline mesh, then header separators."""
    draw_labels(ctx, layout, row_labels, col_labels, font_size, style)
    draw_gridlines(ctx, layout, style)
