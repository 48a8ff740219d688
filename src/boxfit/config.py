"""Configuration for boxfit resizing and writing.

This module centralizes defaults and user-tunable settings for:
- fitting a source into bounding boxes (background color, upsizing, limits)
- the resample filters used for each resize stage
- writing results to disk (format, permissions, metadata stripping)

Everything here can be overridden by constructing the dataclasses directly.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Hashable, Mapping, Optional, Union

from .errors import InvalidArgumentError


DEFAULT_COLOR = "white"
DEFAULT_MAX_WIDTH = 10000
DEFAULT_MAX_HEIGHT = 10000
DEFAULT_BLUR_VALUE = 15.0

# Color names with a special meaning for the background canvas.
BLUR_COLOR = "blur"
TRANSPARENT_COLOR = "transparent"

# Halving steps use area averaging (2x2 binning); enlargement and the blurred
# backdrop use a cubic filter.
DOWNSAMPLE_FILTER = "box"
UPSAMPLE_FILTER = "cubic"

DEFAULT_FORMAT = "jpeg"
DEFAULT_DIRECTORY_MODE = 0o777
DEFAULT_FILE_MODE = 0o777

# camelCase spellings accepted by ``ResizeOptions.from_mapping``
_OPTION_ALIASES = {
    "maxWidth": "max_width",
    "maxHeight": "max_height",
    "blurBackground": "blur_background",
    "blurValue": "blur_value",
}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_bool(name: str, value: Any) -> None:
    if not isinstance(value, bool):
        raise InvalidArgumentError(f"option '{name}' was not a bool")


def _check_int(name: str, value: Any) -> None:
    if not _is_int(value):
        raise InvalidArgumentError(f"option '{name}' was not an int")


@dataclass(frozen=True)
class ResizeOptions:
    """Options controlling how a source is fitted into its boxes.

    Attributes
    ----------
    color
        Background fill. Any Pillow color name or hex string, ``"transparent"``
        for a clear canvas, or ``"blur"`` for a blurred copy of the source.
    upsize
        Whether sources smaller than the box are enlarged to fill it. When
        False they are centered at native size.
    bestfit
        Passed to the enlargement step: keep the aspect ratio strictly instead
        of stretching to the exact target size.
    max_width, max_height
        Upper limits accepted for a box's width and height.
    blur_background
        Use a blurred, box-sized copy of the source as the background.
    blur_value
        Blur radius for the blurred background.
    """

    color: str = DEFAULT_COLOR
    upsize: bool = False
    bestfit: bool = False
    max_width: int = DEFAULT_MAX_WIDTH
    max_height: int = DEFAULT_MAX_HEIGHT
    blur_background: bool = False
    blur_value: float = DEFAULT_BLUR_VALUE

    def __post_init__(self) -> None:
        if not isinstance(self.color, str):
            raise InvalidArgumentError("option 'color' was not a string")
        _check_bool("upsize", self.upsize)
        _check_bool("bestfit", self.bestfit)
        _check_bool("blur_background", self.blur_background)
        _check_int("max_width", self.max_width)
        _check_int("max_height", self.max_height)
        if self.max_width <= 0 or self.max_height <= 0:
            raise InvalidArgumentError("max_width and max_height must be positive")
        if isinstance(self.blur_value, bool) or not isinstance(
            self.blur_value, (int, float)
        ):
            raise InvalidArgumentError("option 'blur_value' was not a number")
        if self.blur_value < 0:
            raise InvalidArgumentError("option 'blur_value' must not be negative")

    @property
    def wants_blur(self) -> bool:
        return self.blur_background or self.color == BLUR_COLOR

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "ResizeOptions":
        """Build options from a plain mapping.

        Both snake_case field names and their camelCase spellings are
        accepted. Unknown keys raise ``InvalidArgumentError``.
        """

        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for raw_key, value in values.items():
            key = _OPTION_ALIASES.get(raw_key, raw_key)
            if key not in known:
                raise InvalidArgumentError(f"unknown option '{raw_key}'")
            kwargs[key] = value
        return cls(**kwargs)

    @classmethod
    def coerce(
        cls, options: Union["ResizeOptions", Mapping[str, Any], None]
    ) -> "ResizeOptions":
        if options is None:
            return DEFAULTS
        if isinstance(options, cls):
            return options
        if isinstance(options, Mapping):
            return cls.from_mapping(options)
        raise InvalidArgumentError("options must be ResizeOptions, a mapping or None")


@dataclass(frozen=True)
class WriteOptions:
    """Options for writing a result image to disk.

    Attributes
    ----------
    format
        Pillow format name, e.g. ``"jpeg"``, ``"png"``, ``"webp"``.
    directory_mode
        Permission bits for parent directories created on demand.
    file_mode
        Permission bits applied to the written file.
    strip_headers
        Drop EXIF and other metadata from the written file.
    quality
        Encoder quality override for lossy formats.
    """

    format: str = DEFAULT_FORMAT
    directory_mode: int = DEFAULT_DIRECTORY_MODE
    file_mode: int = DEFAULT_FILE_MODE
    strip_headers: bool = True
    quality: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.format, str):
            raise InvalidArgumentError("option 'format' was not a string")
        _check_int("directory_mode", self.directory_mode)
        _check_int("file_mode", self.file_mode)
        _check_bool("strip_headers", self.strip_headers)
        if self.quality is not None:
            _check_int("quality", self.quality)


@dataclass(frozen=True)
class BoxSpec:
    """A requested bounding box.

    ``key`` names the result slot. When left as None the orchestrator uses
    the box's position in the request.
    """

    width: int
    height: int
    key: Optional[Hashable] = None

    def __post_init__(self) -> None:
        if not _is_int(self.width):
            raise InvalidArgumentError("a box width was not an int")
        if not _is_int(self.height):
            raise InvalidArgumentError("a box height was not an int")

    def check_limits(self, options: ResizeOptions) -> None:
        if self.width <= 0 or self.width > options.max_width:
            raise InvalidArgumentError(
                f"a box width was not between 0 and max_width ({options.max_width})"
            )
        if self.height <= 0 or self.height > options.max_height:
            raise InvalidArgumentError(
                f"a box height was not between 0 and max_height ({options.max_height})"
            )


DEFAULTS = ResizeOptions()
