"""Exception types raised by the Tag Canvas core."""

from __future__ import annotations


class TagCanvasError(Exception):
    """Base class for all Tag Canvas errors."""


class InvalidGeometryError(TagCanvasError, ValueError):
    """Raised when a rect or polygon position list is malformed."""


class InvalidColorError(TagCanvasError, ValueError):
    """Raised when a tag area color is not a ``#RRGGBB`` hex string."""


class TagIndexError(TagCanvasError, IndexError):
    """Raised when a per-index operation receives an index outside the store."""

    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"Tag area index {index} out of range (store holds {size})")
        self.index = index
        self.size = size


class InvalidScaleError(TagCanvasError, ValueError):
    """Raised when an explicit scale or a scale step is outside the allowed range."""


class UnknownTagAreaError(TagCanvasError, ValueError):
    """Raised when a ``(data, drawables)`` pair is no longer held by the canvas."""
