"""Background canvases and placement of the fitted image."""

from __future__ import annotations

import logging

from PIL import Image

from . import engine
from .config import UPSAMPLE_FILTER, ResizeOptions

logger = logging.getLogger(__name__)


def build_background(
    source: Image.Image, options: ResizeOptions, box_width: int, box_height: int
) -> Image.Image:
    """Create the box-sized backdrop the fitted image is placed on.

    Parameters
    ----------
    source
        Upright source, used only for the blurred backdrop. Not modified.
    options
        ``blur_background`` or ``color == "blur"`` selects a blurred copy of
        the source stretched over the whole box; otherwise the canvas is
        filled with ``options.color`` (``"transparent"`` for a clear one).
    box_width, box_height
        Canvas size.

    Returns
    -------
    Image.Image
        A new canvas of exactly ``box_width`` x ``box_height``.
    """

    if options.wants_blur:
        logger.debug(
            "blurred backdrop %dx%d radius %s", box_width, box_height, options.blur_value
        )
        stretched = engine.resize(source, box_width, box_height, UPSAMPLE_FILTER)
        return engine.blur(stretched, options.blur_value)
    return engine.new_canvas(box_width, box_height, options.color)


def place(
    canvas: Image.Image, foreground: Image.Image, offset_x: int, offset_y: int
) -> Image.Image:
    """Composite ``foreground`` atop ``canvas`` at the given offset."""

    return engine.composite(canvas, foreground, offset_x, offset_y)
