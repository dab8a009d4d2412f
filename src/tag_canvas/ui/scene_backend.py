"""QGraphicsScene implementation of the canvas rendering backend."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

from PyQt6.QtCore import QObject, QPointF, QRectF, Qt
from PyQt6.QtGui import QBrush, QColor, QFont, QPen, QPixmap, QPolygonF, QTransform
from PyQt6.QtWidgets import (
    QGraphicsEllipseItem, QGraphicsItem, QGraphicsPixmapItem, QGraphicsPolygonItem,
    QGraphicsRectItem, QGraphicsScene, QGraphicsSimpleTextItem
)

from ..core.backend import SceneBackend
from ..core.viewport import ViewTransform

logger = logging.getLogger(__name__)


def to_qcolor(value: str) -> QColor:
    """
    Parse a ``#RRGGBB`` or CSS-style ``#RRGGBBAA`` color.

    Qt reads eight hex digits as ``#AARRGGBB``, so the alpha suffix is split
    off and applied separately.
    """
    if len(value) == 9 and value.startswith("#"):
        color = QColor(value[:7])
        color.setAlpha(int(value[7:], 16))
        return color
    return QColor(value)


class QtSceneBackend(SceneBackend):
    """
    Scene backend drawing into a QGraphicsScene.

    Every primitive is a child of one root item whose transform carries the
    canvas scale and pan, so scene coordinates equal raw viewport pixels when
    the scene is shown unscaled from its top-left corner.
    """

    def __init__(self, parent: Optional[QObject] = None) -> None:
        self.scene = QGraphicsScene(parent)

        self._root = QGraphicsRectItem()
        self._root.setPen(QPen(Qt.PenStyle.NoPen))
        self._root.setFlag(QGraphicsItem.GraphicsItemFlag.ItemHasNoContents, True)
        self.scene.addItem(self._root)

        self._background: Optional[QGraphicsPixmapItem] = None

    # === Image ===

    def set_background(self, pixmap: QPixmap) -> None:
        """Show ``pixmap`` at the logical origin, below every primitive."""
        if self._background is not None:
            self.scene.removeItem(self._background)

        self._background = QGraphicsPixmapItem(pixmap)
        self._background.setTransformationMode(Qt.TransformationMode.SmoothTransformation)
        self._background.setZValue(-1)
        self._background.setParentItem(self._root)
        logger.debug(f"Background set to {pixmap.width()}x{pixmap.height()} image")

    # === Primitive construction ===

    def _pen(self, color: Optional[str], width: float) -> QPen:
        if color is None:
            return QPen(Qt.PenStyle.NoPen)
        pen = QPen(to_qcolor(color))
        pen.setWidthF(width)
        return pen

    def _brush(self, color: Optional[str]) -> QBrush:
        if color is None:
            return QBrush(Qt.BrushStyle.NoBrush)
        return QBrush(to_qcolor(color))

    def create_rect(
        self,
        rect: QRectF,
        stroke: Optional[str],
        stroke_width: float,
        fill: Optional[str]
    ) -> QGraphicsRectItem:
        item = QGraphicsRectItem(rect)
        item.setPen(self._pen(stroke, stroke_width))
        item.setBrush(self._brush(fill))
        return item

    def create_polygon(
        self,
        points: Sequence[QPointF],
        stroke: Optional[str],
        stroke_width: float,
        fill: Optional[str]
    ) -> QGraphicsPolygonItem:
        item = QGraphicsPolygonItem(QPolygonF([QPointF(p) for p in points]))
        item.setPen(self._pen(stroke, stroke_width))
        item.setBrush(self._brush(fill))
        return item

    def create_circle(
        self,
        center: QPointF,
        radius: float,
        stroke: Optional[str],
        stroke_width: float,
        fill: Optional[str]
    ) -> QGraphicsEllipseItem:
        item = QGraphicsEllipseItem(
            QRectF(center.x() - radius, center.y() - radius, 2 * radius, 2 * radius)
        )
        item.setPen(self._pen(stroke, stroke_width))
        item.setBrush(self._brush(fill))
        return item

    def create_text(
        self,
        text: str,
        pos: QPointF,
        font_family: str,
        font_px: int,
        color: str
    ) -> QGraphicsSimpleTextItem:
        item = QGraphicsSimpleTextItem(text)
        font = QFont(font_family)
        font.setPixelSize(font_px)
        item.setFont(font)
        item.setBrush(self._brush(color))
        item.setPos(pos)
        return item

    def text_width(self, item: QGraphicsSimpleTextItem) -> float:
        return item.boundingRect().width()

    # === Primitive updates ===

    def set_rect_geometry(self, item: QGraphicsRectItem, rect: QRectF) -> None:
        item.setRect(rect)

    def set_fill_color(self, item: Any, color: Optional[str]) -> None:
        item.setBrush(self._brush(color))

    # === Composition ===

    def add(self, item: QGraphicsItem) -> None:
        if self.is_attached(item):
            return
        item.setParentItem(self._root)

    def remove(self, item: Optional[QGraphicsItem]) -> None:
        if self.is_attached(item):
            self.scene.removeItem(item)

    def is_attached(self, item: Optional[QGraphicsItem]) -> bool:
        return item is not None and item.scene() is self.scene

    def items_at(self, raw: QPointF) -> List[QGraphicsItem]:
        return [
            item for item in self.scene.items(raw)
            if item is not self._root and item is not self._background
        ]

    def set_view_transform(self, transform: ViewTransform) -> None:
        scale = transform.scale
        pan = transform.pan
        self._root.setTransform(QTransform(scale, 0.0, 0.0, scale, pan.x(), pan.y()))

    def repaint(self) -> None:
        self.scene.update()
