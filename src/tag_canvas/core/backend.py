"""Abstract rendering capability used by the shape renderer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from PyQt6.QtCore import QPointF, QRectF

from .viewport import ViewTransform


class SceneBackend(ABC):
    """
    Retained-mode scene the canvas draws into.

    Primitives are opaque handles created by this backend. They live in
    logical (image) coordinates; the backend applies the global view
    transform when it composes the scene. Colors are ``#RRGGBB`` or
    ``#RRGGBBAA`` strings, ``None`` meaning no stroke or no fill.
    """

    @abstractmethod
    def create_rect(
        self,
        rect: QRectF,
        stroke: Optional[str],
        stroke_width: float,
        fill: Optional[str]
    ) -> Any:
        """Create a rectangle primitive, not yet attached."""
        pass

    @abstractmethod
    def create_polygon(
        self,
        points: Sequence[QPointF],
        stroke: Optional[str],
        stroke_width: float,
        fill: Optional[str]
    ) -> Any:
        """Create a closed polygon primitive, not yet attached."""
        pass

    @abstractmethod
    def create_circle(
        self,
        center: QPointF,
        radius: float,
        stroke: Optional[str],
        stroke_width: float,
        fill: Optional[str]
    ) -> Any:
        """Create a circle primitive, not yet attached."""
        pass

    @abstractmethod
    def create_text(
        self,
        text: str,
        pos: QPointF,
        font_family: str,
        font_px: int,
        color: str
    ) -> Any:
        """Create a text primitive with its top-left corner at ``pos``."""
        pass

    @abstractmethod
    def text_width(self, item: Any) -> float:
        """Measured width of a text primitive."""
        pass

    @abstractmethod
    def set_rect_geometry(self, item: Any, rect: QRectF) -> None:
        """Change the geometry of a rectangle primitive in place."""
        pass

    @abstractmethod
    def set_fill_color(self, item: Any, color: Optional[str]) -> None:
        """Change the fill color of a shape primitive."""
        pass

    @abstractmethod
    def add(self, item: Any) -> None:
        """Attach a primitive on top of the scene."""
        pass

    @abstractmethod
    def remove(self, item: Any) -> None:
        """Detach a primitive; detaching an unattached primitive does nothing."""
        pass

    @abstractmethod
    def is_attached(self, item: Any) -> bool:
        """Whether the primitive is currently part of the scene."""
        pass

    @abstractmethod
    def items_at(self, raw: QPointF) -> List[Any]:
        """Attached primitives under a raw position, topmost first."""
        pass

    @abstractmethod
    def set_view_transform(self, transform: ViewTransform) -> None:
        """Apply the global scale and pan to the whole scene."""
        pass

    @abstractmethod
    def repaint(self) -> None:
        """Schedule a repaint of the scene."""
        pass
