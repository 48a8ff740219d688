"""Box-fit geometry.

Computes the size a source should be scaled to so it fits a bounding box
with its aspect ratio intact, and where it sits inside the box.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Geometry:
    """Placement of the scaled source inside its box.

    Attributes
    ----------
    target_width, target_height
        Size the source is scaled to.
    offset_x, offset_y
        Top-left corner of the scaled source within the box.
    """

    target_width: int
    target_height: int
    offset_x: int
    offset_y: int

    @property
    def size(self) -> Tuple[int, int]:
        return self.target_width, self.target_height


def aspect_ratio(width: int, height: int) -> float:
    """Compute aspect ratio as width / height."""

    return float(width) / float(height)


def plan(
    source_width: int,
    source_height: int,
    box_width: int,
    box_height: int,
    upsize: bool = False,
) -> Geometry:
    """Fit a source into a box, preserving its aspect ratio.

    Parameters
    ----------
    source_width, source_height
        Upright size of the source. Both must be positive.
    box_width, box_height
        Size of the bounding box.
    upsize
        When False, a source smaller than the box on both axes keeps its
        native size and is only centered.

    Returns
    -------
    Geometry
        Target size and centering offset. Target sizes are truncated toward
        zero and offsets are the floor of half the padding.
    """

    if source_width < box_width and source_height < box_height and not upsize:
        return Geometry(
            target_width=source_width,
            target_height=source_height,
            offset_x=(box_width - source_width) // 2,
            offset_y=(box_height - source_height) // 2,
        )

    box_ratio = aspect_ratio(box_width, box_height)
    source_ratio = aspect_ratio(source_width, source_height)

    if box_ratio < source_ratio:
        # Box is narrower than the source: fill the width, pad top and bottom
        target_height = max(1, int(box_width / source_ratio))
        return Geometry(
            target_width=box_width,
            target_height=target_height,
            offset_x=0,
            offset_y=(box_height - target_height) // 2,
        )

    # Box is wider (or equal): fill the height, pad left and right
    target_width = max(1, int(box_height * source_ratio))
    return Geometry(
        target_width=target_width,
        target_height=box_height,
        offset_x=(box_width - target_width) // 2,
        offset_y=0,
    )
