"""Upright normalization based on the EXIF orientation tag."""

from __future__ import annotations

import logging
from typing import Dict

from PIL import Image

from . import engine

logger = logging.getLogger(__name__)

# EXIF orientation -> clockwise rotation that makes the image upright.
# 3: bottom-right, 6: right-top, 8: left-bottom. Mirrored tags are left alone.
ROTATIONS: Dict[int, int] = {3: 180, 6: 90, 8: -90}


def normalize(image: Image.Image) -> Image.Image:
    """Return an upright copy of ``image``.

    The caller's image is never modified. When a rotation is applied the
    copy's metadata is cleared so the old orientation tag cannot be applied
    a second time downstream.
    """

    tag = engine.orientation_tag(image)
    degrees = ROTATIONS.get(tag)
    if degrees is None:
        return image.copy()
    logger.debug("orientation %d: rotating %d degrees", tag, degrees)
    return engine.rotate(image, degrees, fill="white")
