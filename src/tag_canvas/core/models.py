"""Data models for Tag Canvas tag areas."""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, List, Optional, Sequence

from PyQt6.QtCore import QPointF, QRectF

from .exceptions import InvalidColorError, InvalidGeometryError

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


class GeometryType(str, Enum):
    """Kind of region a tag area outlines."""

    RECT = "rect"
    POLYGON = "polygon"


def normalize_rect(x1: float, y1: float, x2: float, y2: float) -> QRectF:
    """
    Build a rectangle from two opposite corners given in any order.

    Returns:
        QRectF with non-negative width and height
    """
    left, right = min(x1, x2), max(x1, x2)
    top, bottom = min(y1, y2), max(y1, y2)
    return QRectF(left, top, right - left, bottom - top)


def _to_number(value: Any) -> float:
    """Convert a single coordinate, rejecting anything that is not a finite number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidGeometryError(f"Coordinate must be a number, got {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise InvalidGeometryError(f"Coordinate must be finite, got {value!r}")
    return number


def _to_sequence(value: Any, what: str) -> list:
    if isinstance(value, (str, bytes)):
        raise InvalidGeometryError(f"{what} must be a sequence, got {value!r}")
    try:
        return list(value)
    except TypeError:
        raise InvalidGeometryError(f"{what} must be a sequence, got {value!r}") from None


def validate_color(color: Any) -> str:
    """
    Check that a color is a ``#RRGGBB`` hex string.

    Raises:
        InvalidColorError: If the color is malformed
    """
    if not isinstance(color, str) or not _HEX_COLOR.match(color):
        raise InvalidColorError(f"Color must be a #RRGGBB hex string, got {color!r}")
    return color


@dataclass
class TagArea:
    """
    One tagged region drawn over the image.

    Rects keep their two corners normalized to ``[top_left, bottom_right]``.
    Polygons keep their vertices in the given order and are closed only when
    drawn.
    """

    type: GeometryType
    points: List[QPointF]
    color: str
    label: str = " "
    is_filled: bool = False
    selected: bool = False
    label_visible: bool = False

    def __post_init__(self) -> None:
        """Validate geometry and color, and normalize rect corners."""
        try:
            self.type = GeometryType(self.type)
        except ValueError:
            raise InvalidGeometryError(f"Unknown geometry type: {self.type!r}") from None

        validate_color(self.color)

        points = _to_sequence(self.points, "points")
        for point in points:
            if not isinstance(point, QPointF):
                raise InvalidGeometryError(f"Point must be a QPointF, got {point!r}")
            _to_number(point.x())
            _to_number(point.y())

        if self.type == GeometryType.RECT:
            if len(points) != 2:
                raise InvalidGeometryError(f"A rect needs 2 corner points, got {len(points)}")
            rect = normalize_rect(points[0].x(), points[0].y(), points[1].x(), points[1].y())
            self.points = [rect.topLeft(), rect.bottomRight()]
        else:
            if len(points) < 3:
                raise InvalidGeometryError(f"A polygon needs at least 3 points, got {len(points)}")
            self.points = [QPointF(p) for p in points]

        if not isinstance(self.label, str) or not self.label.strip():
            self.label = " "

    @classmethod
    def from_pos(
        cls,
        geometry_type: GeometryType,
        pos: Sequence[Any],
        color: str,
        label: str = "",
    ) -> TagArea:
        """
        Create a tag area from its raw position form.

        Args:
            geometry_type: RECT or POLYGON
            pos: ``[x1, y1, x2, y2]`` for a rect, ``[[x, y], ...]`` for a polygon
            color: ``#RRGGBB`` hex string
            label: Label text

        Returns:
            New TagArea with ``is_filled`` and ``selected`` cleared

        Raises:
            InvalidGeometryError: If the position list does not match the type
            InvalidColorError: If the color is malformed
        """
        try:
            geometry_type = GeometryType(geometry_type)
        except ValueError:
            raise InvalidGeometryError(f"Unknown geometry type: {geometry_type!r}") from None

        values = _to_sequence(pos, "pos")

        if geometry_type == GeometryType.RECT:
            if len(values) != 4:
                raise InvalidGeometryError(f"A rect needs 4 numbers, got {len(values)}")
            x1, y1, x2, y2 = (_to_number(v) for v in values)
            points = [QPointF(x1, y1), QPointF(x2, y2)]
        else:
            if len(values) < 3:
                raise InvalidGeometryError(f"A polygon needs at least 3 points, got {len(values)}")
            points = []
            for pair in values:
                pair = _to_sequence(pair, "polygon point")
                if len(pair) != 2:
                    raise InvalidGeometryError(f"Polygon point must be an (x, y) pair, got {pair!r}")
                points.append(QPointF(_to_number(pair[0]), _to_number(pair[1])))

        return cls(type=geometry_type, points=points, color=color, label=label)

    @property
    def pos(self) -> list:
        """Position in raw form: ``[x1, y1, x2, y2]`` or ``[[x, y], ...]``."""
        if self.type == GeometryType.RECT:
            top_left, bottom_right = self.points
            return [top_left.x(), top_left.y(), bottom_right.x(), bottom_right.y()]
        return [[p.x(), p.y()] for p in self.points]

    def rect(self) -> QRectF:
        """Normalized rectangle of a rect tag area."""
        if self.type != GeometryType.RECT:
            raise InvalidGeometryError("Only rect tag areas have a rect")
        return QRectF(self.points[0], self.points[1])

    def bounds(self) -> QRectF:
        """Bounding rectangle of the shape."""
        xs = [p.x() for p in self.points]
        ys = [p.y() for p in self.points]
        return normalize_rect(min(xs), min(ys), max(xs), max(ys))

    def corners(self) -> List[QPointF]:
        """Rect corners clockwise from top-left, or the polygon vertices."""
        if self.type == GeometryType.RECT:
            rect = self.rect()
            return [rect.topLeft(), rect.topRight(), rect.bottomRight(), rect.bottomLeft()]
        return [QPointF(p) for p in self.points]

    def opposite_corner(self, index: int) -> QPointF:
        """Corner diagonally across from rect corner ``index``."""
        if self.type != GeometryType.RECT:
            raise InvalidGeometryError("Only rect tag areas have opposite corners")
        return self.corners()[(index + 2) % 4]

    def resize_from(self, anchor: QPointF, point: QPointF) -> None:
        """
        Rebuild a rect from a fixed anchor corner and a moving corner.

        Args:
            anchor: Corner that stays in place
            point: New position of the dragged corner
        """
        if self.type != GeometryType.RECT:
            raise InvalidGeometryError("Only rect tag areas can be resized from an anchor")
        rect = normalize_rect(anchor.x(), anchor.y(), point.x(), point.y())
        self.points = [rect.topLeft(), rect.bottomRight()]

    def move_vertex(self, index: int, point: QPointF) -> None:
        """
        Move one polygon vertex.

        Args:
            index: Vertex index
            point: New vertex position
        """
        if self.type != GeometryType.POLYGON:
            raise InvalidGeometryError("Only polygon vertices can be moved individually")
        if not 0 <= index < len(self.points):
            raise IndexError(f"Vertex index {index} out of range")
        self.points[index] = QPointF(point)


@dataclass
class DrawableSet:
    """
    Renderer primitives that belong to one tag area.

    Only the renderer creates or removes these; callers receive them from
    callbacks so they can hand them back without an index lookup.
    """

    outline: Any = None
    label_background: Any = None
    label_text: Any = None
    handles: List[Any] = field(default_factory=list)

    def primitives(self) -> Iterator[Any]:
        """Yield every primitive in the set."""
        for item in (self.outline, self.label_background, self.label_text):
            if item is not None:
                yield item
        yield from self.handles

    def handle_index(self, item: Any) -> Optional[int]:
        """Index of ``item`` among the resize handles, or None."""
        for i, handle in enumerate(self.handles):
            if handle is item:
                return i
        return None
