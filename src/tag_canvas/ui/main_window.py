"""Demo window for Tag Canvas."""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Optional, Union

from PyQt6.QtGui import QImageReader
from PyQt6.QtWidgets import QMainWindow, QStatusBar

from ..core.config import CanvasConfig
from ..core.interaction import DraggingEndEvent
from ..core.models import DrawableSet, GeometryType, TagArea, normalize_rect
from .canvas_view import TagCanvasView

logger = logging.getLogger(__name__)

PALETTE = [
    "#f6e58d", "#f9ca24", "#7ed6df", "#22a6b3",
    "#ffbe76", "#f0932b", "#e056fd", "#be2edd",
    "#ff7979", "#eb4d4b", "#686de0", "#4834d4",
    "#badc58", "#6ab04c", "#30336b", "#130f40",
]

# Drags smaller than this (logical pixels) on either axis are treated as clicks
MIN_BOX_SIZE = 4


def random_color() -> str:
    """Pick a tag area color from the demo palette."""
    return random.choice(PALETTE)


class MainWindow(QMainWindow):
    """
    Window with a single tag canvas over one image.

    Wires the demo policy: dragging on empty space creates a rect tag area,
    hovering fills it, clicking toggles its selection.
    """

    def __init__(self, config: Optional[CanvasConfig] = None) -> None:
        super().__init__()
        QImageReader.setAllocationLimit(0)

        self.view = TagCanvasView(config, self)
        self.canvas = self.view.canvas
        self.setCentralWidget(self.view)

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)

        self._connect_callbacks()

        self.setWindowTitle("Tag Canvas")
        self.resize(1024, 768)

    def _connect_callbacks(self) -> None:
        callbacks = self.canvas.callbacks
        callbacks.on_default_dragging_end = self._on_dragging_end
        callbacks.on_shape_hover = self._on_shape_hover
        callbacks.on_shape_leave = self._on_shape_leave
        callbacks.on_shape_click = self._on_shape_click
        callbacks.on_shape_resized = self._on_shape_resized

    def load_image(self, path: Union[str, Path]) -> bool:
        """Load the background image and show its name in the title."""
        if not self.view.load_image(path):
            self.status_bar.showMessage(f"Could not open {path}")
            return False
        self.setWindowTitle(f"Tag Canvas - {Path(path).name}")
        return True

    # === Canvas callbacks ===

    def _on_dragging_end(self, event: DraggingEndEvent) -> None:
        event.clear()

        rect = normalize_rect(event.start.x(), event.start.y(), event.end.x(), event.end.y())
        if rect.width() < MIN_BOX_SIZE or rect.height() < MIN_BOX_SIZE:
            return

        index = self.canvas.append_data(
            GeometryType.RECT,
            [rect.left(), rect.top(), rect.right(), rect.bottom()],
            random_color(),
            f"area {len(self.canvas.get_data_list()) + 1}",
        )
        self.canvas.set_label_visible(True, index)
        self.canvas.update()
        self.status_bar.showMessage(f"Created tag area {index}", 3000)

    def _on_shape_hover(self, data: TagArea, drawables: DrawableSet) -> None:
        self.canvas.fill_tag_area_for(data, drawables)
        self.canvas.update()

    def _on_shape_leave(self, data: TagArea, drawables: DrawableSet) -> None:
        if not data.selected:
            self.canvas.unfill_tag_area_for(data, drawables)
            self.canvas.update()

    def _on_shape_click(self, data: TagArea, drawables: DrawableSet) -> None:
        if data.selected:
            self.canvas.deselect_tag_area_for(data, drawables)
        else:
            self.canvas.select_tag_area_for(data, drawables)

    def _on_shape_resized(self, data: TagArea, drawables: DrawableSet) -> None:
        logger.info(f"Tag area resized to {data.pos}")
