"""Exception types raised by boxfit.

``InvalidArgumentError`` is raised before any image work starts.
``ProcessingError`` wraps failures coming out of Pillow, and ``DecodeError``
narrows that to sources that could not be read at all.
"""

from __future__ import annotations


class BoxFitError(Exception):
    """Base class for every error raised by this package."""


class InvalidArgumentError(BoxFitError, ValueError):
    """An option, box size or path argument was malformed or out of range."""


class ProcessingError(BoxFitError, RuntimeError):
    """An image operation failed inside the raster engine."""


class DecodeError(ProcessingError):
    """A source image could not be decoded or does not exist."""
