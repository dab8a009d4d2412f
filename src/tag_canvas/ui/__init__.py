"""UI components for Tag Canvas."""

from .scene_backend import QtSceneBackend, to_qcolor
from .canvas_view import TagCanvasView
from .main_window import MainWindow

__all__ = [
    "QtSceneBackend",
    "to_qcolor",
    "TagCanvasView",
    "MainWindow",
]
