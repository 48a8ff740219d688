"""Raster primitives backed by Pillow.

The fitting code only talks to the functions in this module: decoding,
reading the orientation tag, rotating, resizing, blurring, allocating a
canvas, compositing and encoding. Pillow errors are converted into
``ProcessingError`` (or ``DecodeError`` for unreadable sources) so callers
never see library-specific exceptions.
"""

from __future__ import annotations

import io
import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Union

from PIL import Image, ImageColor, ImageFilter, ImageOps, UnidentifiedImageError

from .config import TRANSPARENT_COLOR
from .errors import DecodeError, InvalidArgumentError, ProcessingError

logger = logging.getLogger(__name__)

ORIENTATION_TAG = 0x0112

# Modes Pillow cannot filter smoothly; they are widened before resizing.
_PALETTE_MODES = {"1", "P", "PA"}

# info entries carrying EXIF/XMP headers
_METADATA_KEYS = ("exif", "xmp", "XML:com.adobe.xmp", "comment")

Source = Union[str, "os.PathLike[str]", bytes]


@contextmanager
def _engine_call(what: str) -> Iterator[None]:
    try:
        yield
    except (OSError, ValueError, MemoryError) as exc:
        raise ProcessingError(f"{what} failed: {exc}") from exc


def map_filter(name: str) -> int:
    """Map a filter name to a Pillow resampling constant.

    Parameters
    ----------
    name
        One of 'nearest', 'box', 'bilinear', 'cubic' (or 'bicubic'),
        'lanczos'. Anything else falls back to Lanczos.

    Returns
    -------
    int
        Pillow resampling constant.
    """

    name_lower = (name or "").lower()
    if name_lower == "nearest":
        return Image.NEAREST
    if name_lower == "box":
        return Image.BOX
    if name_lower == "bilinear":
        return Image.BILINEAR
    if name_lower in {"cubic", "bicubic"}:
        return Image.BICUBIC
    return Image.LANCZOS


def decode(source: Source) -> Image.Image:
    """Open and fully load an image from a path or raw bytes.

    Raises
    ------
    InvalidArgumentError
        If ``source`` is neither a path nor bytes.
    DecodeError
        If the file is missing or Pillow cannot identify or read it.
    """

    if isinstance(source, (bytes, bytearray)):
        fp = io.BytesIO(source)
    elif isinstance(source, (str, os.PathLike)):
        fp = Path(source)
    else:
        raise InvalidArgumentError(f"cannot decode a {type(source).__name__}")

    try:
        image = Image.open(fp)
    except FileNotFoundError as exc:
        raise DecodeError(f"image not found: {source}") from exc
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise DecodeError(f"could not decode image: {exc}") from exc
    try:
        image.load()
    except (OSError, ValueError) as exc:
        image.close()
        raise DecodeError(f"could not decode image: {exc}") from exc
    return image


def orientation_tag(image: Image.Image) -> int:
    """Return the EXIF orientation of ``image`` (1 when absent or unreadable)."""

    try:
        value = image.getexif().get(ORIENTATION_TAG, 1)
    except (SyntaxError, ValueError, OSError):
        logger.debug("unreadable EXIF block, assuming default orientation")
        return 1
    return value if isinstance(value, int) else 1


def rotate(image: Image.Image, degrees: int, fill: str = "white") -> Image.Image:
    """Rotate clockwise by ``degrees`` and drop the now stale metadata."""

    with _engine_call("rotate"):
        rotated = image.rotate(-degrees, expand=True, fillcolor=fill)
    rotated.info = {}
    return rotated


def _resizable(image: Image.Image) -> Image.Image:
    if image.mode not in _PALETTE_MODES:
        return image
    has_alpha = image.mode == "PA" or "transparency" in image.info
    return image.convert("RGBA" if has_alpha else "RGB")


def resize(
    image: Image.Image,
    width: int,
    height: int,
    filter_name: str,
    bestfit: bool = False,
) -> Image.Image:
    """Resize to ``width`` x ``height`` with the named filter.

    With ``bestfit`` the result fits inside the requested size while keeping
    the aspect ratio, so one side may come out smaller than asked.
    """

    resample = map_filter(filter_name)
    with _engine_call("resize"):
        image = _resizable(image)
        if bestfit:
            return ImageOps.contain(image, (width, height), method=resample)
        return image.resize((width, height), resample)


def blur(image: Image.Image, radius: float) -> Image.Image:
    if radius <= 0:
        return image.copy()
    with _engine_call("blur"):
        return image.filter(ImageFilter.GaussianBlur(radius=radius))


def new_canvas(width: int, height: int, color: str) -> Image.Image:
    """Allocate a ``width`` x ``height`` canvas filled with ``color``.

    ``"transparent"`` yields a clear RGBA canvas; colors with an alpha
    component also produce RGBA, everything else RGB.
    """

    with _engine_call("canvas allocation"):
        if color.lower() == TRANSPARENT_COLOR:
            return Image.new("RGBA", (width, height), (0, 0, 0, 0))
        rgba = ImageColor.getcolor(color, "RGBA")
        if rgba[3] < 255:
            return Image.new("RGBA", (width, height), rgba)
        return Image.new("RGB", (width, height), rgba[:3])


def _has_alpha(image: Image.Image) -> bool:
    return image.mode in {"RGBA", "LA", "PA", "RGBa"} or "transparency" in image.info


def composite(
    canvas: Image.Image, foreground: Image.Image, x: int, y: int
) -> Image.Image:
    """Place ``foreground`` over ``canvas`` with its top-left corner at (x, y).

    The canvas is modified and returned.
    """

    with _engine_call("composite"):
        if not _has_alpha(foreground) and not _has_alpha(canvas):
            canvas.paste(foreground.convert(canvas.mode), (x, y))
            return canvas
        base = canvas if canvas.mode == "RGBA" else canvas.convert("RGBA")
        base.alpha_composite(foreground.convert("RGBA"), dest=(x, y))
        if base is canvas:
            return canvas
        return base.convert(canvas.mode)


def encode(
    image: Image.Image,
    dest_path: Path,
    format_name: str,
    strip_metadata: bool = True,
    **params: Any,
) -> None:
    """Encode ``image`` to ``dest_path`` in ``format_name``."""

    fmt = format_name.upper()
    if fmt == "JPG":
        fmt = "JPEG"
    with _engine_call("encode"):
        out = image
        if fmt == "JPEG" and image.mode not in {"RGB", "L", "CMYK"}:
            out = image.convert("RGB")
        if strip_metadata:
            if out is image:
                out = image.copy()
            for key in _METADATA_KEYS:
                out.info.pop(key, None)
            params.pop("exif", None)
        elif "exif" in image.info and "exif" not in params:
            params["exif"] = image.info["exif"]
        out.save(dest_path, format=fmt, **params)
