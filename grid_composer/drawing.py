"""
drawing.py - Scoped drawing context over a Pillow canvas.

Pillow draws in absolute device coordinates and has no notion of a current
transform, so DrawingContext keeps one: translation, quarter-turn rotation,
fill/stroke colours, line width and font live in a state object that save()
pushes and restore() pops. Rotations follow the usual raster convention
(y axis points down, positive angles turn clockwise on screen).
"""

from __future__ import annotations

import copy
import logging
import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Union

from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

FontType = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]

REGULAR_FONT_FILES = ("DejaVuSans.ttf", "LiberationSans-Regular.ttf", "Arial.ttf")
BOLD_FONT_FILES = ("DejaVuSans-Bold.ttf", "LiberationSans-Bold.ttf", "Arial Bold.ttf")

# (cos, sin) per clockwise quarter turn
_QUARTER_TURN_COS_SIN = {0: (1, 0), 1: (0, 1), 2: (-1, 0), 3: (0, -1)}

# Pillow's ROTATE_* transposes turn counter-clockwise on screen.
_CCW_TRANSPOSE = {
    1: Image.Transpose.ROTATE_90,
    2: Image.Transpose.ROTATE_180,
    3: Image.Transpose.ROTATE_270,
}


@lru_cache(maxsize=16)
def get_font(size: float, bold: bool = False) -> FontType:
    """Load a sans-serif font at the given pixel size; cached per (size, bold)."""
    for name in BOLD_FONT_FILES if bold else REGULAR_FONT_FILES:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    logger.debug(f"No system sans-serif font found, using Pillow default at size {size}")
    return ImageFont.load_default(size=size)


def new_canvas(size: int, background: str) -> Image.Image:
    """Create the square RGB raster surface, filled with the background colour."""
    return Image.new("RGB", (size, size), background)


@dataclass
class DrawState:
    tx: float = 0.0
    ty: float = 0.0
    quarter_turns: int = 0  # clockwise, 0-3
    fill: str = "#000000"
    stroke: str = "#000000"
    line_width: int = 1
    font: Optional[FontType] = None


class DrawingContext:
    """Stateful drawing API with an explicit save/restore stack."""

    def __init__(self, canvas: Image.Image):
        self.canvas = canvas
        self._draw = ImageDraw.Draw(canvas)
        self._state = DrawState()
        self._stack: list[DrawState] = []

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def state(self) -> DrawState:
        return self._state

    def save(self) -> None:
        self._stack.append(copy.copy(self._state))

    def restore(self) -> None:
        if not self._stack:
            raise RuntimeError("restore() called without a matching save()")
        self._state = self._stack.pop()

    def set_fill(self, color: str) -> None:
        self._state.fill = color

    def set_stroke(self, color: str, width: int) -> None:
        self._state.stroke = color
        self._state.line_width = width

    def set_font(self, font: FontType) -> None:
        self._state.font = font

    # ------------------------------------------------------------------
    # Transform
    # ------------------------------------------------------------------
    def translate(self, dx: float, dy: float) -> None:
        self._state.tx, self._state.ty = self.to_device(dx, dy)

    def rotate(self, radians: float) -> None:
        """Rotate by a whole number of quarter turns."""
        turns = radians / (math.pi / 2)
        if abs(turns - round(turns)) > 1e-9:
            raise ValueError(f"Only quarter-turn rotations are supported, got {radians} rad")
        self._state.quarter_turns = (self._state.quarter_turns + round(turns)) % 4

    def to_device(self, x: float, y: float) -> tuple[float, float]:
        s = self._state
        cos_a, sin_a = _QUARTER_TURN_COS_SIN[s.quarter_turns]
        return (s.tx + x * cos_a - y * sin_a, s.ty + x * sin_a + y * cos_a)

    # ------------------------------------------------------------------
    # Primitives (rectangles, lines and images are axis-aligned: only the
    # translation part of the transform applies to them)
    # ------------------------------------------------------------------
    def fill_rect(self, x: int, y: int, width: int, height: int) -> None:
        x0, y0 = self._state.tx + x, self._state.ty + y
        self._draw.rectangle([x0, y0, x0 + width - 1, y0 + height - 1], fill=self._state.fill)

    def stroke_line(self, x0: int, y0: int, x1: int, y1: int) -> None:
        """
        Stroke a horizontal or vertical line between pixel boundaries.

        A line of width w at coordinate c covers pixels c - w//2 through
        c + (w - w//2) - 1 across its axis, and [start, end) along it.
        Pixels outside the canvas are clipped.
        """
        if x0 != x1 and y0 != y1:
            raise ValueError("stroke_line only draws horizontal or vertical lines")

        width = self._state.line_width
        before, after = width // 2, width - width // 2 - 1
        tx, ty = round(self._state.tx), round(self._state.ty)

        if x0 == x1:
            box = [x0 - before, min(y0, y1), x0 + after, max(y0, y1) - 1]
        else:
            box = [min(x0, x1), y0 - before, max(x0, x1) - 1, y0 + after]
        box = [box[0] + tx, box[1] + ty, box[2] + tx, box[3] + ty]

        max_x, max_y = self.canvas.width - 1, self.canvas.height - 1
        clipped = [max(box[0], 0), max(box[1], 0), min(box[2], max_x), min(box[3], max_y)]
        if clipped[0] > clipped[2] or clipped[1] > clipped[3]:
            return
        self._draw.rectangle(clipped, fill=self._state.stroke)

    def draw_image(self, image: Image.Image, x: float, y: float, width: float, height: float) -> None:
        target = (max(1, round(width)), max(1, round(height)))
        resized = image.resize(target, Image.LANCZOS) if image.size != target else image
        box = (round(self._state.tx + x), round(self._state.ty + y))
        if resized.mode == "RGBA":
            self.canvas.paste(resized, box, resized)
        else:
            self.canvas.paste(resized.convert("RGB"), box)

    def fill_text(self, text: str, x: float, y: float) -> None:
        """Draw text centred horizontally and vertically on (x, y)."""
        font = self._state.font or get_font(10)
        px, py = self.to_device(x, y)

        if self._state.quarter_turns == 0:
            self._draw.text((px, py), text, fill=self._state.fill, font=font, anchor="mm")
            return

        # Render on a tile whose centre is the anchor, so turning the tile
        # about its centre keeps the anchor in place.
        left, top, right, bottom = font.getbbox(text, anchor="mm")
        half_w = math.ceil(max(-left, right)) + 1
        half_h = math.ceil(max(-top, bottom)) + 1
        tile = Image.new("RGBA", (2 * half_w, 2 * half_h), (0, 0, 0, 0))
        ImageDraw.Draw(tile).text((half_w, half_h), text, fill=self._state.fill, font=font, anchor="mm")
        rotated = tile.transpose(_CCW_TRANSPOSE[(-self._state.quarter_turns) % 4])

        box = (round(px - rotated.width / 2), round(py - rotated.height / 2))
        self.canvas.paste(rotated, box, rotated)
