"""Fit images into bounding boxes for thumbnail generation.

Submodules
----------
config
    Options, box descriptions and defaults.
engine
    Pillow-backed raster primitives.
orientation
    Upright normalization from the EXIF orientation tag.
geometry
    Box-fit target size and centering.
downsample
    Progressive halving with a shared intermediate cache, and upsampling.
canvas
    Solid, transparent or blurred backgrounds and placement.
fit
    Single and multi-box entry points.
io_utils
    Loading, writing and header stripping.
"""

from .config import BoxSpec, ResizeOptions, WriteOptions
from .errors import BoxFitError, DecodeError, InvalidArgumentError, ProcessingError
from .io_utils import load_image, strip_headers, write
from .fit import resize, resize_multi, resize_multi_write

__all__ = [
    "BoxFitError",
    "BoxSpec",
    "DecodeError",
    "InvalidArgumentError",
    "ProcessingError",
    "ResizeOptions",
    "WriteOptions",
    "load_image",
    "resize",
    "resize_multi",
    "resize_multi_write",
    "strip_headers",
    "write",
]
