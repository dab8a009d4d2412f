"""Core logic of Tag Canvas: models, viewport, store, renderer and interaction."""

from .models import DrawableSet, GeometryType, TagArea
from .config import CanvasConfig, ConfigManager
from .exceptions import (
    InvalidColorError, InvalidGeometryError, InvalidScaleError, TagCanvasError, TagIndexError,
    UnknownTagAreaError
)
from .viewport import ViewTransform, Viewport, clamp_pan
from .interaction import CursorHint, DraggingEndEvent, InteractionState
from .canvas import TagCanvas

__all__ = [
    "DrawableSet",
    "GeometryType",
    "TagArea",
    "CanvasConfig",
    "ConfigManager",
    "InvalidColorError",
    "InvalidGeometryError",
    "InvalidScaleError",
    "TagCanvasError",
    "TagIndexError",
    "UnknownTagAreaError",
    "ViewTransform",
    "Viewport",
    "clamp_pan",
    "CursorHint",
    "DraggingEndEvent",
    "InteractionState",
    "TagCanvas",
]
