"""Progressive downsampling and single-step upsampling.

Shrinking is done by repeated halving with an area filter (2x2 binning),
which keeps more detail than one large reduction. Intermediate results that
halved both dimensions exactly depend only on the source size, never on the
requested box, so they are kept in a ``DownsampleCache`` and reused by later
boxes cut from the same source.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

from PIL import Image

from . import engine
from .config import DOWNSAMPLE_FILTER, UPSAMPLE_FILTER

logger = logging.getLogger(__name__)

CacheKey = Tuple[int, int]


class DownsampleCache:
    """Exact-half intermediates for one source, keyed by (width, height).

    Entries are private copies: ``put`` stores a copy and ``get`` hands out a
    copy, so nothing outside the cache can alter a stored image. Call
    ``clear`` (or use the cache as a context manager) to release them.
    """

    def __init__(self) -> None:
        self._entries: Dict[CacheKey, Image.Image] = {}
        self.hits = 0

    @staticmethod
    def key(width: int, height: int) -> str:
        return f"{width}x{height}"

    def __contains__(self, size: object) -> bool:
        return size in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, width: int, height: int) -> Optional[Image.Image]:
        cached = self._entries.get((width, height))
        if cached is None:
            return None
        self.hits += 1
        return cached.copy()

    def put(self, image: Image.Image) -> None:
        self._entries.setdefault(image.size, image.copy())

    def clear(self) -> None:
        for image in self._entries.values():
            image.close()
        self._entries.clear()

    def __enter__(self) -> "DownsampleCache":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.clear()


def halving_steps(
    width: int, height: int, target_width: int, target_height: int
) -> Tuple[Tuple[int, int, bool], ...]:
    """List the (width, height, exact_half) steps from a size down to a target.

    Each dimension above its target is halved (floor) per step and clamped to
    the target once it would undershoot. ``exact_half`` is True only when both
    dimensions were halved without clamping.
    """

    steps = []
    while True:
        width_reduced = width_is_half = False
        if width > target_width:
            width //= 2
            width_reduced = width_is_half = True
            if width < target_width:
                width = target_width
                width_is_half = False

        height_reduced = height_is_half = False
        if height > target_height:
            height //= 2
            height_reduced = height_is_half = True
            if height < target_height:
                height = target_height
                height_is_half = False

        if not width_reduced and not height_reduced:
            return tuple(steps)
        steps.append((width, height, width_is_half and height_is_half))


def downsample(
    image: Image.Image,
    target_width: int,
    target_height: int,
    cache: Optional[DownsampleCache] = None,
) -> Image.Image:
    """Shrink ``image`` toward the target by repeated halving.

    Parameters
    ----------
    image
        Upright source. It is not modified.
    target_width, target_height
        Size to reach. Dimensions already at or below target are left alone.
    cache
        Shared intermediates for this source. Each step first looks for its
        size here; exact-half results are added to it.

    Returns
    -------
    Image.Image
        A new image no larger than the target in either dimension.
    """

    current = image
    for width, height, exact_half in halving_steps(
        image.width, image.height, target_width, target_height
    ):
        if cache is not None:
            cached = cache.get(width, height)
            if cached is not None:
                logger.debug("cache hit for %s", DownsampleCache.key(width, height))
                current = cached
                continue

        current = engine.resize(current, width, height, DOWNSAMPLE_FILTER)
        if exact_half and cache is not None:
            cache.put(current)

    if current is image:
        return image.copy()
    return current


def upsample(
    image: Image.Image, target_width: int, target_height: int, bestfit: bool = False
) -> Image.Image:
    """Enlarge ``image`` to the target in one cubic-filtered step."""

    return engine.resize(
        image, target_width, target_height, UPSAMPLE_FILTER, bestfit=bestfit
    )
