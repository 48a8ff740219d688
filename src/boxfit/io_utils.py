"""I/O helpers for fitted images.

This module provides helpers to load source images, write results to disk
with permissions and optional metadata stripping, and strip EXIF headers from
files already on disk.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import piexif
from PIL import Image

from . import engine
from .config import WriteOptions
from .errors import DecodeError, InvalidArgumentError, ProcessingError

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

# JPEG headers are removed by piexif without re-encoding the pixels.
_PIEXIF_SUFFIXES = {".jpg", ".jpeg"}


def _check_path(path: Any, name: str) -> Path:
    if not isinstance(path, (str, os.PathLike)):
        raise InvalidArgumentError(f"{name} was not a path")
    return Path(path)


def load_image(source: Union[PathLike, bytes]) -> Image.Image:
    """Load an image from a path or raw bytes.

    Parameters
    ----------
    source
        Path to an image file, or its encoded bytes.

    Returns
    -------
    Image.Image
        Fully loaded image, EXIF still attached.
    """

    return engine.decode(source)


def ensure_dir(path: Path, mode: int) -> None:
    """Create a directory with exactly ``mode`` permissions.

    Every missing parent is created one level at a time with the same mode.

    Parameters
    ----------
    path
        Directory path to create.
    mode
        Permission bits. The process umask is cleared while creating.
    """

    if path.is_dir():
        return
    old_umask = os.umask(0)
    try:
        for directory in [*reversed(path.parents), path]:
            if not directory.is_dir():
                directory.mkdir(mode=mode, exist_ok=True)
    except OSError as exc:
        raise ProcessingError(f"could not create directory {path}: {exc}") from exc
    finally:
        os.umask(old_umask)


def _save_params(format_name: str, quality: Optional[int]) -> Dict[str, Any]:
    # Favor high quality when writing lossy formats
    fmt = format_name.lower()
    if fmt in {"jpg", "jpeg"}:
        return {"quality": quality or 95, "subsampling": 0, "optimize": True}
    if fmt == "png":
        return {"optimize": True}
    if fmt == "webp":
        return {"quality": quality or 95}
    return {}


def write(
    image: Image.Image,
    dest_path: PathLike,
    options: Optional[WriteOptions] = None,
) -> None:
    """Write an image to disk with the given options applied.

    Parameters
    ----------
    image
        Image to write. It is not modified.
    dest_path
        Destination path. Missing parent directories are created with
        ``options.directory_mode``.
    options
        Format, permissions and metadata handling. Defaults to JPEG with
        headers stripped.
    """

    dest = _check_path(dest_path, "dest_path")
    if options is None:
        options = WriteOptions()
    elif not isinstance(options, WriteOptions):
        raise InvalidArgumentError("options must be WriteOptions or None")

    ensure_dir(dest.parent, options.directory_mode)
    engine.encode(
        image,
        dest,
        options.format,
        strip_metadata=options.strip_headers,
        **_save_params(options.format, options.quality),
    )
    try:
        os.chmod(dest, options.file_mode)
    except OSError as exc:
        raise ProcessingError(f"could not chmod {dest}: {exc}") from exc
    logger.info("wrote %s (%dx%d, %s)", dest, image.width, image.height, options.format)


def strip_headers(path: PathLike) -> None:
    """Strip EXIF headers from the image at ``path`` in place.

    JPEG files lose only their EXIF segment and keep their pixels byte for
    byte; XMP packets and comments are left as stored. Other formats are
    re-encoded without any metadata, using the same quality settings as
    ``write``.

    Parameters
    ----------
    path
        Image file to rewrite.

    Raises
    ------
    DecodeError
        If the file does not exist or cannot be read as an image.
    """

    target = _check_path(path, "path")
    if not target.is_file():
        raise DecodeError(f"image not found: {target}")

    if target.suffix.lower() in _PIEXIF_SUFFIXES:
        try:
            piexif.remove(str(target))
        except ValueError as exc:
            raise DecodeError(f"could not strip headers from {target}: {exc}") from exc
        return

    image = engine.decode(target)
    fmt = image.format or target.suffix.lstrip(".")
    engine.encode(image, target, fmt, **_save_params(fmt, None))
    logger.info("stripped headers from %s", target)
