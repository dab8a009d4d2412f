"""Qt widget hosting a tag canvas."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from PyQt6.QtCore import QEvent, QKeyCombination, QPointF, QRectF, Qt
from PyQt6.QtGui import (
    QKeyEvent, QKeySequence, QMouseEvent, QPainter, QPixmap, QResizeEvent, QWheelEvent
)
from PyQt6.QtWidgets import QFrame, QGraphicsView, QWidget

from ..core.canvas import TagCanvas
from ..core.config import CanvasConfig
from ..core.interaction import CursorHint
from .scene_backend import QtSceneBackend

logger = logging.getLogger(__name__)

CURSOR_SHAPES = {
    CursorHint.DEFAULT: Qt.CursorShape.ArrowCursor,
    CursorHint.POINTER: Qt.CursorShape.PointingHandCursor,
    CursorHint.GRAB: Qt.CursorShape.OpenHandCursor,
    CursorHint.GRABBING: Qt.CursorShape.ClosedHandCursor,
    CursorHint.MOVE: Qt.CursorShape.SizeAllCursor,
}


class TagCanvasView(QGraphicsView):
    """
    Drawing surface that forwards Qt input to a :class:`TagCanvas`.

    The scene is shown unscaled from its top-left corner, so scene
    coordinates are raw viewport pixels and all zooming and panning happens
    inside the canvas.
    """

    def __init__(
        self,
        config: Optional[CanvasConfig] = None,
        parent: Optional[QWidget] = None
    ) -> None:
        super().__init__(parent)
        self.backend = QtSceneBackend(self)
        self.canvas = TagCanvas(self.backend, config)
        self.canvas.callbacks.on_cursor_changed = self._apply_cursor

        self._last_pos = QPointF()

        self._setup_view()

    def _setup_view(self) -> None:
        self.setScene(self.backend.scene)
        self.setFrameShape(QFrame.Shape.NoFrame)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)
        self.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

    # === Image ===

    def load_image(self, path: Union[str, Path]) -> bool:
        """
        Load an image file as the canvas background.

        Args:
            path: Image file path

        Returns:
            True if the image was loaded
        """
        pixmap = QPixmap(str(path))
        if pixmap.isNull():
            logger.error(f"Failed to load image: {path}")
            return False

        self.set_pixmap(pixmap)
        logger.info(f"Loaded image {path} ({pixmap.width()}x{pixmap.height()})")
        return True

    def set_pixmap(self, pixmap: QPixmap) -> None:
        """Show ``pixmap`` as the background and clamp the view to its size."""
        self.backend.set_background(pixmap)
        self.canvas.set_image_size(pixmap.width(), pixmap.height())

    # === Cursor ===

    def _apply_cursor(self, hint: CursorHint) -> None:
        self.viewport().setCursor(CURSOR_SHAPES[hint])

    # === Qt events ===

    def _raw_pos(self, event: Union[QMouseEvent, QWheelEvent]) -> QPointF:
        return self.mapToScene(event.position().toPoint())

    def resizeEvent(self, event: QResizeEvent) -> None:
        """Keep the scene rect and the canvas clamp bounds in step with the widget."""
        super().resizeEvent(event)
        size = self.viewport().size()
        self.setSceneRect(QRectF(0, 0, size.width(), size.height()))
        self.canvas.set_viewport_size(size.width(), size.height())

    def mousePressEvent(self, event: QMouseEvent) -> None:
        """Handle mouse press events."""
        self.setFocus()
        if event.button() != Qt.MouseButton.LeftButton:
            return
        self._last_pos = self._raw_pos(event)
        self.canvas.pointer_down(self._last_pos)
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        """Handle mouse move events."""
        self._last_pos = self._raw_pos(event)
        self.canvas.pointer_move(self._last_pos)
        event.accept()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        """Handle mouse release events."""
        if event.button() != Qt.MouseButton.LeftButton:
            return
        self._last_pos = self._raw_pos(event)
        self.canvas.pointer_up(self._last_pos)
        event.accept()

    def leaveEvent(self, event: QEvent) -> None:
        """Pointer left the widget; ends any gesture at the last known position."""
        self.canvas.pointer_leave(self._last_pos)
        super().leaveEvent(event)

    def wheelEvent(self, event: QWheelEvent) -> None:
        """Handle mouse wheel for zooming."""
        self._last_pos = self._raw_pos(event)
        self.canvas.wheel(event.angleDelta().y(), self._last_pos)
        event.accept()

    def _pan_key_combination(self) -> Optional[QKeyCombination]:
        """First key combination of the configured pan key, or None if unset."""
        pan_key = self.canvas.config.pan_key
        if not pan_key:
            return None
        sequence = QKeySequence(pan_key)
        if sequence.isEmpty():
            logger.warning(f"Pan key {pan_key!r} is not a valid key sequence")
            return None
        return sequence[0]

    def _is_pan_key(self, event: QKeyEvent) -> bool:
        """Check the event's key is the pan key, whatever modifiers are held."""
        combination = self._pan_key_combination()
        if combination is None:
            return False
        return event.key() == combination.key().value

    def _matches_pan_key(self, event: QKeyEvent) -> bool:
        """Check the event's key and modifiers match the configured pan key exactly."""
        key = event.key()
        modifiers = event.modifiers()

        # Build combined key with modifiers
        combined = key
        if modifiers & Qt.KeyboardModifier.ControlModifier:
            combined |= Qt.KeyboardModifier.ControlModifier.value
        if modifiers & Qt.KeyboardModifier.ShiftModifier:
            combined |= Qt.KeyboardModifier.ShiftModifier.value
        if modifiers & Qt.KeyboardModifier.AltModifier:
            combined |= Qt.KeyboardModifier.AltModifier.value
        if modifiers & Qt.KeyboardModifier.MetaModifier:
            combined |= Qt.KeyboardModifier.MetaModifier.value

        return QKeySequence(combined) == QKeySequence(self.canvas.config.pan_key)

    def keyPressEvent(self, event: QKeyEvent) -> None:
        """Handle key press events."""
        if self._is_pan_key(event):
            if not event.isAutoRepeat():
                # Modifiers beyond the configured ones keep the canvas idle
                self.canvas.pan_key_pressed(not self._matches_pan_key(event))
            event.accept()
            return
        super().keyPressEvent(event)

    def keyReleaseEvent(self, event: QKeyEvent) -> None:
        """Handle key release events."""
        if self._is_pan_key(event):
            if not event.isAutoRepeat():
                self.canvas.pan_key_released()
            event.accept()
            return
        super().keyReleaseEvent(event)
