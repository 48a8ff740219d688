import pytest
from PIL import Image

from boxfit import engine
from boxfit.errors import DecodeError, ProcessingError


def test_map_filter() -> None:
    assert engine.map_filter("box") == Image.BOX
    assert engine.map_filter("cubic") == Image.BICUBIC
    assert engine.map_filter("bicubic") == Image.BICUBIC
    assert engine.map_filter("nearest") == Image.NEAREST
    assert engine.map_filter("whatever") == Image.LANCZOS


def test_new_canvas_modes() -> None:
    assert engine.new_canvas(4, 3, "white").mode == "RGB"
    clear = engine.new_canvas(4, 3, "transparent")
    assert clear.mode == "RGBA"
    assert clear.getpixel((0, 0)) == (0, 0, 0, 0)
    assert engine.new_canvas(4, 3, "#ff000080").getpixel((0, 0)) == (255, 0, 0, 128)
    with pytest.raises(ProcessingError):
        engine.new_canvas(4, 3, "no-such-color")


def test_composite_places_foreground() -> None:
    canvas = Image.new("RGB", (10, 10), "white")
    out = engine.composite(canvas, Image.new("RGB", (2, 2), "black"), 4, 6)
    assert out.getpixel((4, 6)) == (0, 0, 0)
    assert out.getpixel((5, 7)) == (0, 0, 0)
    assert out.getpixel((3, 6)) == (255, 255, 255)
    assert out.getpixel((6, 8)) == (255, 255, 255)


def test_composite_blends_alpha_onto_opaque_canvas() -> None:
    canvas = Image.new("RGB", (4, 4), "white")
    out = engine.composite(canvas, Image.new("RGBA", (4, 4), (0, 0, 0, 0)), 0, 0)
    assert out.mode == "RGB"
    assert out.getpixel((1, 1)) == (255, 255, 255)


def test_rotate_clockwise_and_clears_metadata() -> None:
    img = Image.new("RGB", (4, 2), "white")
    img.putpixel((0, 0), (255, 0, 0))
    img.info["exif"] = b"Exif\x00\x00stale"
    rotated = engine.rotate(img, 90)
    assert rotated.size == (2, 4)
    # top-left moves to top-right on a clockwise turn
    assert rotated.getpixel((1, 0)) == (255, 0, 0)
    assert rotated.info == {}
    assert "exif" in img.info


def test_resize_rejects_empty_target() -> None:
    with pytest.raises(ProcessingError):
        engine.resize(Image.new("RGB", (4, 4)), 0, 4, "box")


def test_blur_zero_radius_is_a_copy() -> None:
    img = Image.new("RGB", (4, 4), "red")
    assert engine.blur(img, 0) is not img


def test_orientation_defaults_to_one() -> None:
    assert engine.orientation_tag(Image.new("RGB", (4, 4))) == 1


def test_decode_errors(tmp_path) -> None:
    with pytest.raises(DecodeError):
        engine.decode(tmp_path / "missing.png")
    with pytest.raises(DecodeError):
        engine.decode(b"definitely not an image")
