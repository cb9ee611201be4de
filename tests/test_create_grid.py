import logging

import pytest
from PIL import Image

from grid_composer.create_grid import main
from grid_composer.utils import EXIT_GENERAL_ERROR, EXIT_SUCCESS


@pytest.fixture
def four_images(make_image):
    return ",".join(make_image(f"{i}.png", size=(40 + 10 * i, 40)) for i in range(4))


@pytest.mark.parametrize("argv", [[], ["--help"], ["-h"], ["out.jpg", "--rows", "a", "-h"]])
def test_help_exits_zero(argv, capsys):
    assert main(argv) == EXIT_SUCCESS
    assert "usage:" in capsys.readouterr().out


def test_success(tmp_path, four_images):
    out = tmp_path / "grid.jpg"
    code = main([
        str(out),
        "--rows", "A, B",
        "--cols", "X,Y",
        "--images", four_images,
        "--size", "256",
        "--header", "32",
        "--font-size", "16",
        "--quality", "80",
        "--workers", "2",
    ])

    assert code == EXIT_SUCCESS
    with Image.open(out) as img:
        assert img.format == "JPEG"
        assert img.size == (256, 256)


def test_image_count_mismatch(tmp_path, make_image, caplog):
    out = tmp_path / "grid.jpg"
    images = ",".join(make_image(f"{i}.png") for i in range(3))

    with caplog.at_level(logging.ERROR):
        code = main([str(out), "--rows", "A,B", "--cols", "X,Y", "--images", images, "--size", "256"])

    assert code == EXIT_GENERAL_ERROR
    assert "Expected 4 images (2 rows x 2 cols), got 3" in caplog.text
    assert not out.exists()


@pytest.mark.parametrize(
    "argv",
    [
        ["--rows", "A", "--cols", "X", "--images", "a.png"],  # no output path
        ["out.jpg", "--cols", "X", "--images", "a.png"],  # no rows
        ["out.jpg", "--rows", "A", "--cols", "X", "--images", "a.png", "--size", "big"],
        ["out.jpg", "--rows", "A", "--cols", "X", "--images", "a.png", "--quality", "150"],
        ["out.jpg", "--rows", "A", "--cols", "X", "--images", "a.png", "--bogus"],
    ],
)
def test_configuration_errors_exit_one(argv, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main(argv) == EXIT_GENERAL_ERROR
    assert not (tmp_path / "out.jpg").exists()


def test_missing_image_still_succeeds(tmp_path, make_image, caplog):
    out = tmp_path / "grid.jpg"
    images = ",".join([make_image("a.png"), str(tmp_path / "missing.png"), make_image("b.png"), make_image("c.png")])

    with caplog.at_level(logging.WARNING):
        code = main([str(out), "--rows", "A,B", "--cols", "X,Y", "--images", images, "--size", "256", "--header", "32"])

    assert code == EXIT_SUCCESS
    assert out.exists()
    assert "missing.png" in caplog.text
    assert "1/4 cells replaced" in caplog.text


def test_unwritable_output_exits_one(tmp_path, four_images):
    out = tmp_path / "missing-dir" / "grid.jpg"
    code = main([str(out), "--rows", "A,B", "--cols", "X,Y", "--images", four_images, "--size", "256"])

    assert code == EXIT_GENERAL_ERROR
    assert not out.exists()


def test_config_file(tmp_path, four_images):
    config = tmp_path / "grid.yaml"
    config.write_text("size: 300\nheader: 40\nfont_size: 12\n")
    out = tmp_path / "grid.jpg"

    code = main([str(out), "--rows", "A,B", "--cols", "X,Y", "--images", four_images, "--config", str(config)])

    assert code == EXIT_SUCCESS
    with Image.open(out) as img:
        assert img.size == (300, 300)


def test_invalid_style_in_config_exits_one(tmp_path, four_images, caplog):
    config = tmp_path / "grid.yaml"
    config.write_text("style:\n  background: notacolor\n")
    out = tmp_path / "grid.jpg"

    with caplog.at_level(logging.ERROR):
        code = main([str(out), "--rows", "A,B", "--cols", "X,Y", "--images", four_images, "--config", str(config)])

    assert code == EXIT_GENERAL_ERROR
    assert "style.background is not a valid colour" in caplog.text
    assert not out.exists()
