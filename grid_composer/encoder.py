"""
encoder.py - Serialize the finished canvas as JPEG.

The raster is encoded fully in memory before anything touches the
destination, so a failed encode never leaves a partial file behind.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path

from PIL import Image

logger = logging.getLogger(__name__)

JPEG_SUFFIXES = (".jpg", ".jpeg")


class OutputWriteError(OSError):
    """The encoded grid could not be written to its destination."""


def quality_fraction(quality: int) -> float:
    """Map a 1-100 quality setting to the 0-1 compression parameter."""
    return quality / 100


def encode_grid(canvas: Image.Image, quality: int) -> bytes:
    fraction = quality_fraction(quality)
    buffer = io.BytesIO()
    canvas.convert("RGB").save(buffer, format="JPEG", quality=round(fraction * 100))
    return buffer.getvalue()


def save_grid(canvas: Image.Image, output_path: Path, quality: int) -> Path:
    """
    Encode `canvas` and write it to `output_path`.

    The parent directory must already exist.

    Raises:
        OutputWriteError: If the destination cannot be written
    """
    output_path = Path(output_path)
    if output_path.suffix.lower() not in JPEG_SUFFIXES:
        logger.warning(f"Output {output_path} does not have a .jpg extension; writing JPEG data anyway")

    data = encode_grid(canvas, quality)
    try:
        output_path.write_bytes(data)
    except OSError as e:
        raise OutputWriteError(f"Cannot write {output_path}: {e}") from e

    logger.info(f"Grid saved to: {output_path}")
    return output_path
