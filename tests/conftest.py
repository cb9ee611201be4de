from pathlib import Path

import pytest
from PIL import Image

from grid_composer.config import resolve_grid_spec


def hex_to_rgb(color: str) -> tuple:
    color = color.lstrip("#")
    return tuple(int(color[i:i + 2], 16) for i in (0, 2, 4))


@pytest.fixture
def make_image(tmp_path):
    """Write a solid-colour image to tmp_path and return its path as str."""

    def _make(name: str, size=(64, 64), color=(255, 0, 0), mode="RGB") -> str:
        path = tmp_path / name
        Image.new(mode, size, color).save(path)
        return str(path)

    return _make


@pytest.fixture
def grid_spec_factory(tmp_path):
    def _factory(image_paths, rows=("A", "B"), cols=("X", "Y"), **overrides):
        overrides.setdefault("size", 512)
        overrides.setdefault("header", 32)
        overrides.setdefault("workers", 1)
        return resolve_grid_spec(
            output_path=str(overrides.pop("output", tmp_path / "grid.jpg")),
            row_labels=list(rows),
            col_labels=list(cols),
            image_paths=list(image_paths),
            **overrides,
        )

    return _factory
