"""Maps tag areas to scene primitives."""

from __future__ import annotations

import logging
from typing import Any, List, Tuple

from PyQt6.QtCore import QPointF, QRectF

from .backend import SceneBackend
from .config import CanvasConfig
from .models import DrawableSet, GeometryType, TagArea, normalize_rect

logger = logging.getLogger(__name__)

# Resize handle styling
HANDLE_STROKE_COLOR = "#000000"
HANDLE_FILL_COLOR = "#ffffff"
VERTEX_HANDLE_COLOR = "#000000"


class ShapeRenderer:
    """
    Builds and updates the drawable set of each tag area.

    All geometry is in logical coordinates; the backend applies the view
    transform.
    """

    def __init__(self, backend: SceneBackend, config: CanvasConfig) -> None:
        self.backend = backend
        self.config = config

    # === Outline and fill ===

    def fill_color(self, data: TagArea) -> str:
        """Translucent fill derived from the tag area color."""
        return data.color + self.config.fill_alpha_suffix

    def build_outline(self, data: TagArea) -> Any:
        """
        Create the closed outline of a tag area.

        The outline always has a fill, the near-transparent placeholder while
        unfilled, so it keeps receiving hover and click hit tests.
        """
        fill = self.fill_color(data) if data.is_filled else self.config.empty_area_color

        if data.type == GeometryType.RECT:
            return self.backend.create_rect(
                data.rect(), data.color, self.config.line_width, fill
            )
        return self.backend.create_polygon(
            data.points, data.color, self.config.line_width, fill
        )

    def apply_fill(self, data: TagArea, drawables: DrawableSet) -> bool:
        """
        Fill the tag area interior.

        Returns:
            False if it was already filled
        """
        if data.is_filled:
            return False
        self.backend.set_fill_color(drawables.outline, self.fill_color(data))
        data.is_filled = True
        return True

    def remove_fill(self, data: TagArea, drawables: DrawableSet) -> bool:
        """
        Reset the interior to the placeholder fill.

        Returns:
            False if it was not filled
        """
        if not data.is_filled:
            return False
        self.backend.set_fill_color(drawables.outline, self.config.empty_area_color)
        data.is_filled = False
        return True

    # === Labels ===

    def compute_label_anchor(self, data: TagArea) -> QPointF:
        """
        Top-left corner of the label background.

        Sits one label height above the top-left of the rect, or above the
        (min x, min y) corner of the polygon bounds.
        """
        if data.type == GeometryType.RECT:
            corner = data.points[0]
        else:
            corner = QPointF(min(p.x() for p in data.points), min(p.y() for p in data.points))
        return QPointF(corner.x(), corner.y() - self.config.label_height)

    def build_label(self, text: str, anchor: QPointF) -> Tuple[Any, Any]:
        """
        Create the label background and text at ``anchor``.

        Returns:
            ``(background, text)`` primitives
        """
        if not text.strip():
            text = " "

        padding = self.config.label_padding
        text_item = self.backend.create_text(
            text,
            QPointF(anchor.x() + padding, anchor.y() + padding),
            self.config.label_font_family,
            self.config.label_font_px,
            self.config.label_text_color,
        )
        width = self.backend.text_width(text_item) + 2 * padding
        background = self.backend.create_rect(
            QRectF(anchor.x(), anchor.y(), width, self.config.label_height),
            None,
            0,
            self.config.label_background_color,
        )
        return background, text_item

    def show_label(self, data: TagArea, drawables: DrawableSet) -> None:
        if not self.backend.is_attached(drawables.label_background):
            self.backend.add(drawables.label_background)
        if not self.backend.is_attached(drawables.label_text):
            self.backend.add(drawables.label_text)
        data.label_visible = True

    def hide_label(self, data: TagArea, drawables: DrawableSet) -> None:
        self.backend.remove(drawables.label_background)
        self.backend.remove(drawables.label_text)
        data.label_visible = False

    def relabel(self, data: TagArea, drawables: DrawableSet) -> None:
        """Rebuild the label primitives from ``data.label``, keeping visibility."""
        self.backend.remove(drawables.label_background)
        self.backend.remove(drawables.label_text)
        drawables.label_background, drawables.label_text = self.build_label(
            data.label, self.compute_label_anchor(data)
        )
        if data.label_visible:
            self.backend.add(drawables.label_background)
            self.backend.add(drawables.label_text)

    # === Resize handles ===

    def build_resize_handles(self, data: TagArea) -> List[Any]:
        """
        Create one circular handle per rect corner or polygon vertex.

        Rect corners come clockwise from top-left.
        """
        radius = self.config.handle_radius
        if data.type == GeometryType.RECT:
            return [
                self.backend.create_circle(
                    corner, radius, HANDLE_STROKE_COLOR, 2, HANDLE_FILL_COLOR
                )
                for corner in data.corners()
            ]
        return [
            self.backend.create_circle(point, radius, None, 0, VERTEX_HANDLE_COLOR)
            for point in data.points
        ]

    def show_handles(self, data: TagArea, drawables: DrawableSet) -> None:
        if not drawables.handles:
            drawables.handles = self.build_resize_handles(data)
        for handle in drawables.handles:
            if not self.backend.is_attached(handle):
                self.backend.add(handle)

    def hide_handles(self, drawables: DrawableSet) -> None:
        for handle in drawables.handles:
            self.backend.remove(handle)
        drawables.handles = []

    # === Whole drawable sets ===

    def build_drawable_set(self, data: TagArea) -> DrawableSet:
        """Create every primitive a tag area needs in its current state."""
        background, text = self.build_label(data.label, self.compute_label_anchor(data))
        drawables = DrawableSet(
            outline=self.build_outline(data),
            label_background=background,
            label_text=text,
        )
        if data.selected:
            drawables.handles = self.build_resize_handles(data)
        return drawables

    def attach(self, data: TagArea, drawables: DrawableSet) -> None:
        """Add the primitives that the tag area state says are visible."""
        self.backend.add(drawables.outline)
        if data.label_visible:
            self.backend.add(drawables.label_background)
            self.backend.add(drawables.label_text)
        for handle in drawables.handles:
            self.backend.add(handle)

    def detach(self, drawables: DrawableSet) -> None:
        """Remove every primitive of the set from the scene."""
        for item in drawables.primitives():
            self.backend.remove(item)

    def redraw(self, data: TagArea, drawables: DrawableSet) -> None:
        """
        Rebuild a drawable set in place after a geometry change.

        The DrawableSet object stays the same so references held by callers
        remain valid.
        """
        self.detach(drawables)
        rebuilt = self.build_drawable_set(data)
        drawables.outline = rebuilt.outline
        drawables.label_background = rebuilt.label_background
        drawables.label_text = rebuilt.label_text
        drawables.handles = rebuilt.handles
        self.attach(data, drawables)

    # === Drag preview ===

    def create_preview(self, start: QPointF) -> Any:
        """Create and attach a zero-size preview rectangle at ``start``."""
        preview = self.backend.create_rect(
            QRectF(start.x(), start.y(), 0, 0),
            self.config.drag_line_color,
            self.config.line_width,
            self.config.empty_area_color,
        )
        self.backend.add(preview)
        return preview

    def update_preview(self, preview: Any, start: QPointF, current: QPointF) -> None:
        """Stretch the preview between ``start`` and ``current``."""
        rect = normalize_rect(start.x(), start.y(), current.x(), current.y())
        self.backend.set_rect_geometry(preview, rect)

    def remove_preview(self, preview: Any) -> None:
        self.backend.remove(preview)
