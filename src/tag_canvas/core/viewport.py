"""Coordinate transform, pan clamping and zoom stepping for the canvas."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from PyQt6.QtCore import QPointF, QSizeF

from .exceptions import InvalidScaleError

logger = logging.getLogger(__name__)

DEFAULT_MAX_SCALE = 16.0


@dataclass
class ViewTransform:
    """
    Global scale and pan applied to every primitive on the canvas.

    Raw coordinates are viewport pixels. Logical coordinates are image pixels,
    independent of the current zoom and pan.
    """

    scale: float = 1.0
    pan: QPointF = field(default_factory=QPointF)

    def to_logical(self, raw: QPointF) -> QPointF:
        """Convert a raw pointer position to image coordinates."""
        return (raw - self.pan) / self.scale

    def to_raw(self, logical: QPointF) -> QPointF:
        """Convert image coordinates to a raw pointer position."""
        return logical * self.scale + self.pan


def clamp_axis(pan: float, viewport: float, image: float, scale: float) -> float:
    """
    Clamp one pan component so the image never detaches from the viewport.

    The pan is kept between ``0`` and ``viewport - image * scale``. When the
    scaled image covers the viewport that is ``min(0, max(far, pan))``; when it
    is smaller the image may sit anywhere fully inside the viewport.
    """
    far = viewport - image * scale
    low, high = min(0.0, far), max(0.0, far)
    return min(high, max(low, pan))


def clamp_pan(pan: QPointF, viewport: QSizeF, image: QSizeF, scale: float) -> QPointF:
    """Clamp both pan components, see :func:`clamp_axis`."""
    return QPointF(
        clamp_axis(pan.x(), viewport.width(), image.width(), scale),
        clamp_axis(pan.y(), viewport.height(), image.height(), scale),
    )


class Viewport:
    """
    Scale and pan state of the canvas together with the sizes it is clamped to.

    Every accepted change re-clamps the pan and notifies ``on_change``.
    """

    def __init__(
        self,
        max_scale: float = DEFAULT_MAX_SCALE,
        on_change: Optional[Callable[[ViewTransform], None]] = None
    ) -> None:
        """
        Initialize the viewport.

        Args:
            max_scale: Largest accepted scale
            on_change: Called with the transform after every change
        """
        self.transform = ViewTransform()
        self.max_scale = max_scale
        self.image_size = QSizeF(0, 0)
        self.viewport_size = QSizeF(0, 0)
        self.pointer_pos: Optional[QPointF] = None
        self.on_change = on_change

    @property
    def scale(self) -> float:
        return self.transform.scale

    @property
    def pan(self) -> QPointF:
        return QPointF(self.transform.pan)

    def to_logical(self, raw: QPointF) -> QPointF:
        return self.transform.to_logical(raw)

    def to_raw(self, logical: QPointF) -> QPointF:
        return self.transform.to_raw(logical)

    def set_image_size(self, width: float, height: float) -> None:
        """Set the unscaled image size and re-clamp."""
        self.image_size = QSizeF(width, height)
        self.clamp()

    def set_viewport_size(self, width: float, height: float) -> None:
        """Set the visible drawing surface size and re-clamp."""
        self.viewport_size = QSizeF(width, height)
        self.clamp()

    def clamp(self) -> None:
        """Clamp the current pan to the image and viewport sizes."""
        self.transform.pan = clamp_pan(
            self.transform.pan, self.viewport_size, self.image_size, self.transform.scale
        )
        self._notify()

    def pan_to(self, pan: QPointF) -> None:
        """Move the image to ``pan`` (raw pixels), clamped."""
        self.transform.pan = QPointF(pan)
        self.clamp()

    def expand(self, step: float) -> bool:
        """
        Zoom in by ``step``.

        Returns:
            False, with nothing changed, if the result would exceed ``max_scale``
        """
        self._check_step(step)
        new_scale = self.transform.scale + step
        if new_scale > self.max_scale:
            logger.debug(f"Scale {new_scale} above {self.max_scale}, ignoring zoom in")
            return False
        self._zoom(new_scale)
        return True

    def reduce(self, step: float) -> bool:
        """
        Zoom out by ``step``.

        Returns:
            False, with nothing changed, if the result would fall below ``step``
        """
        self._check_step(step)
        new_scale = self.transform.scale - step
        if new_scale < step:
            logger.debug(f"Scale {new_scale} below step {step}, ignoring zoom out")
            return False
        self._zoom(new_scale)
        return True

    def set_scale(self, scale: float) -> None:
        """
        Zoom to an explicit scale around the pointer pivot.

        Raises:
            InvalidScaleError: If ``scale`` is outside ``(0, max_scale]``
        """
        if not 0 < scale <= self.max_scale:
            raise InvalidScaleError(f"Scale must be in (0, {self.max_scale}], got {scale}")
        self._zoom(scale)

    def _check_step(self, step: float) -> None:
        if step <= 0:
            raise InvalidScaleError(f"Scale step must be positive, got {step}")

    def _pivot(self) -> QPointF:
        if self.pointer_pos is not None:
            return QPointF(self.pointer_pos)
        return QPointF(self.viewport_size.width() / 2, self.viewport_size.height() / 2)

    def _zoom(self, new_scale: float) -> None:
        """Change scale keeping the logical point under the pivot in place."""
        pivot = self._pivot()
        logical = self.to_logical(pivot)
        self.transform.scale = new_scale
        self.transform.pan = pivot - logical * new_scale
        logger.debug(f"Scale set to {new_scale}")
        self.clamp()

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self.transform)
