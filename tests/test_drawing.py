import math

import pytest
from PIL import Image

from grid_composer.drawing import DrawingContext, get_font, new_canvas


def test_save_restore_round_trips_state():
    ctx = DrawingContext(new_canvas(50, "#000000"))
    ctx.set_fill("#ffffff")
    ctx.save()
    ctx.translate(10, 20)
    ctx.rotate(-math.pi / 2)
    ctx.set_fill("#ff0000")
    assert ctx.depth == 1
    ctx.restore()

    assert ctx.depth == 0
    assert ctx.state.fill == "#ffffff"
    assert (ctx.state.tx, ctx.state.ty, ctx.state.quarter_turns) == (0.0, 0.0, 0)


def test_restore_without_save_raises():
    ctx = DrawingContext(new_canvas(10, "#000000"))
    with pytest.raises(RuntimeError):
        ctx.restore()


def test_translate_composes_with_rotation():
    ctx = DrawingContext(new_canvas(10, "#000000"))
    ctx.translate(10, 20)
    ctx.rotate(-math.pi / 2)

    x, y = ctx.to_device(5, 0)
    assert x == pytest.approx(10)
    assert y == pytest.approx(15)

    ctx.translate(5, 0)
    assert ctx.to_device(0, 0) == pytest.approx((10, 15))


def test_fill_rect_covers_exact_pixels():
    canvas = new_canvas(30, "#000000")
    ctx = DrawingContext(canvas)
    ctx.set_fill("#ffffff")
    ctx.fill_rect(10, 10, 5, 5)

    assert canvas.getbbox() == (10, 10, 15, 15)


def test_rotated_text_keeps_its_anchor():
    font = get_font(24, bold=True)

    upright = new_canvas(200, "#000000")
    ctx = DrawingContext(upright)
    ctx.set_fill("#ffffff")
    ctx.set_font(font)
    ctx.fill_text("Label", 100, 100)

    rotated = new_canvas(200, "#000000")
    ctx = DrawingContext(rotated)
    ctx.set_fill("#ffffff")
    ctx.set_font(font)
    ctx.translate(100, 100)
    ctx.rotate(-math.pi / 2)
    ctx.fill_text("Label", 0, 0)

    expected = upright.transpose(Image.Transpose.ROTATE_90).getbbox()
    actual = rotated.getbbox()
    assert actual is not None
    for a, e in zip(actual, expected):
        assert abs(a - e) <= 1

    left, top, right, bottom = actual
    assert bottom - top > right - left  # reads bottom-to-top, so taller than wide


def test_draw_image_scales_and_composites_alpha():
    canvas = new_canvas(40, "#000000")
    ctx = DrawingContext(canvas)
    overlay = Image.new("RGBA", (10, 10), (0, 0, 255, 255))
    overlay.paste((0, 0, 0, 0), (0, 0, 10, 5))  # top half transparent

    ctx.draw_image(overlay, 10, 10, 20, 20)

    assert canvas.getpixel((20, 12)) == (0, 0, 0)
    assert canvas.getpixel((20, 25)) == (0, 0, 255)
    assert canvas.getpixel((35, 25)) == (0, 0, 0)


def test_fonts_are_cached():
    assert get_font(19.2) is get_font(19.2)
    assert get_font(32, bold=True) is get_font(32, bold=True)


def test_rotate_rejects_partial_turns():
    ctx = DrawingContext(new_canvas(10, "#000000"))
    with pytest.raises(ValueError):
        ctx.rotate(0.3)
    ctx.rotate(-math.pi / 2)
    assert ctx.state.quarter_turns == 3


def test_stroke_line_covers_pixels_either_side_of_the_boundary():
    canvas = new_canvas(20, "#000000")
    ctx = DrawingContext(canvas)

    ctx.set_stroke("#ffffff", 2)
    ctx.stroke_line(10, 0, 10, 20)
    assert canvas.getbbox() == (9, 0, 11, 20)

    canvas.paste((0, 0, 0), (0, 0, 20, 20))
    ctx.set_stroke("#ffffff", 3)
    ctx.stroke_line(0, 5, 20, 5)
    assert canvas.getbbox() == (0, 4, 20, 7)


def test_stroke_line_on_canvas_edge_is_clipped_not_dropped():
    canvas = new_canvas(20, "#000000")
    ctx = DrawingContext(canvas)
    ctx.set_stroke("#ffffff", 2)
    ctx.stroke_line(20, 5, 20, 20)

    assert canvas.getbbox() == (19, 5, 20, 20)
