"""Fit one source image into one or many bounding boxes.

Functions in this module are the public entry points: ``resize`` for a single
box, ``resize_multi`` for a batch of boxes sharing downsampling work, and
``resize_multi_write`` which writes every result straight to disk.

Every box goes through the same pipeline: orientation normalization, box-fit
planning, progressive downsampling, optional upsampling and finally placement
on a background canvas (skipped when the fitted image already fills the box).
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Dict, Hashable, Iterator, List, Optional, Tuple, Union

from PIL import Image

from . import io_utils, orientation
from .canvas import build_background, place
from .config import BoxSpec, ResizeOptions, WriteOptions
from .downsample import DownsampleCache, downsample, upsample
from .errors import InvalidArgumentError
from .geometry import plan

logger = logging.getLogger(__name__)

BoxLike = Union[BoxSpec, Mapping, Sequence[Any]]
OptionsLike = Union[ResizeOptions, Mapping, None]


def _coerce_box(box: BoxLike) -> BoxSpec:
    if isinstance(box, BoxSpec):
        spec = box
    elif isinstance(box, Mapping):
        if "width" not in box or "height" not in box:
            raise InvalidArgumentError("a box is missing its width or height")
        spec = BoxSpec(box["width"], box["height"], box.get("key"))
    elif isinstance(box, (tuple, list)) and len(box) in (2, 3):
        spec = BoxSpec(*box)
    else:
        raise InvalidArgumentError(f"unsupported box description: {box!r}")
    return spec


def validate_boxes(boxes: Sequence[BoxLike], options: ResizeOptions) -> List[BoxSpec]:
    """Turn box descriptions into ``BoxSpec`` objects and check every one.

    Raises
    ------
    InvalidArgumentError
        If any box is malformed, outside ``(0, max]`` or reuses a key, or if
        only some boxes carry a key. Nothing is processed unless every box
        passes.
    """

    if isinstance(boxes, (str, bytes)) or not isinstance(boxes, Sequence):
        raise InvalidArgumentError("boxes must be a sequence of box descriptions")
    coerced = [_coerce_box(box) for box in boxes]
    keyless = sum(spec.key is None for spec in coerced)
    if keyless == len(coerced):
        # Boxes without keys are keyed by position
        coerced = [BoxSpec(s.width, s.height, i) for i, s in enumerate(coerced)]
    elif keyless:
        raise InvalidArgumentError("boxes must either all have keys or none")

    specs: List[BoxSpec] = []
    seen = set()
    for spec in coerced:
        spec.check_limits(options)
        try:
            duplicate = spec.key in seen
        except TypeError as exc:
            raise InvalidArgumentError(f"box key {spec.key!r} is not hashable") from exc
        if duplicate:
            raise InvalidArgumentError(f"duplicate box key {spec.key!r}")
        seen.add(spec.key)
        specs.append(spec)
    return specs


def _check_source(source: Image.Image) -> None:
    if not isinstance(source, Image.Image):
        raise InvalidArgumentError("source was not a PIL image")
    if source.width <= 0 or source.height <= 0:
        raise InvalidArgumentError("source image has no pixels")


def fit_box(
    source: Image.Image,
    box: BoxSpec,
    options: ResizeOptions,
    cache: Optional[DownsampleCache] = None,
) -> Image.Image:
    """Run the full pipeline for a single, already validated box."""

    upright = orientation.normalize(source)
    geometry = plan(upright.width, upright.height, box.width, box.height, options.upsize)

    fitted = downsample(upright, geometry.target_width, geometry.target_height, cache)
    if options.upsize and (
        fitted.width < geometry.target_width or fitted.height < geometry.target_height
    ):
        fitted = upsample(
            fitted, geometry.target_width, geometry.target_height, options.bestfit
        )

    if fitted.size == (box.width, box.height):
        logger.debug("box %r filled exactly, no background needed", box.key)
        return fitted

    canvas = build_background(upright, options, box.width, box.height)
    return place(canvas, fitted, geometry.offset_x, geometry.offset_y)


def _iter_fitted(
    source: Image.Image, specs: List[BoxSpec], options: ResizeOptions
) -> Iterator[Tuple[BoxSpec, Image.Image]]:
    # Widest first so large exact-half intermediates are cached before the
    # smaller boxes that can start from them.
    ordered = sorted(specs, key=lambda spec: spec.width, reverse=True)
    cache = DownsampleCache()
    try:
        for spec in ordered:
            yield spec, fit_box(source, spec, options, cache)
    finally:
        logger.debug("releasing %d cached intermediates (%d hits)", len(cache), cache.hits)
        cache.clear()


def resize_multi(
    source: Image.Image,
    boxes: Sequence[BoxLike],
    options: OptionsLike = None,
) -> Dict[Hashable, Image.Image]:
    """Fit ``source`` into every box in ``boxes``.

    Parameters
    ----------
    source
        Source image. It is never modified.
    boxes
        ``BoxSpec`` objects, ``(width, height[, key])`` tuples or mappings with
        ``width``, ``height`` and an optional ``key``. Boxes without a key are
        keyed by their position.
    options
        ``ResizeOptions`` or a mapping of option names. Defaults apply when
        None.

    Returns
    -------
    dict
        Result image per box key, in the order the boxes were given.

    Raises
    ------
    InvalidArgumentError
        If any option or box is invalid. Raised before any image work.
    ProcessingError
        If an image operation fails. The whole batch is abandoned.
    """

    opts = ResizeOptions.coerce(options)
    specs = validate_boxes(boxes, opts)
    _check_source(source)

    logger.info(
        "fitting %dx%d source into %d box(es)", source.width, source.height, len(specs)
    )
    fitted = {spec.key: image for spec, image in _iter_fitted(source, specs, opts)}
    return {spec.key: fitted[spec.key] for spec in specs}


def resize(
    source: Image.Image,
    box_width: int,
    box_height: int,
    options: OptionsLike = None,
) -> Image.Image:
    """Fit ``source`` into a single ``box_width`` x ``box_height`` box."""

    return resize_multi(source, [BoxSpec(box_width, box_height, 0)], options)[0]


def resize_multi_write(
    source: Image.Image,
    boxes: Sequence[BoxLike],
    options: OptionsLike = None,
    write_options: Optional[WriteOptions] = None,
) -> List[Path]:
    """Fit ``source`` into every box and write each result to disk.

    Each box's key is its destination path. Results are written as soon as
    they are produced, so only one fitted image is held at a time.

    Returns
    -------
    list of Path
        Written paths, in the order the boxes were given.
    """

    opts = ResizeOptions.coerce(options)
    specs = validate_boxes(boxes, opts)
    for spec in specs:
        if not isinstance(spec.key, (str, os.PathLike)):
            raise InvalidArgumentError("a box key was not a destination path")
    if write_options is None:
        write_options = WriteOptions()
    elif not isinstance(write_options, WriteOptions):
        raise InvalidArgumentError("write_options must be WriteOptions or None")
    _check_source(source)

    for spec, image in _iter_fitted(source, specs, opts):
        io_utils.write(image, Path(spec.key), write_options)
        image.close()
    return [Path(spec.key) for spec in specs]
