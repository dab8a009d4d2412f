"""Public façade of the tag canvas."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence, Tuple

from PyQt6.QtCore import QPointF

from .backend import SceneBackend
from .config import CanvasConfig
from .exceptions import UnknownTagAreaError
from .interaction import (
    CanvasCallbacks, HitTarget, InteractionStateMachine, TargetKind
)
from .models import DrawableSet, GeometryType, TagArea
from .renderer import ShapeRenderer
from .store import AnnotationStore
from .viewport import Viewport, ViewTransform

logger = logging.getLogger(__name__)


class TagCanvas:
    """
    Tag areas drawn over an image, with pan, zoom and drag-to-create.

    Per-tag-area operations come in two forms: one taking an index, and a
    ``*_for`` form taking the ``(data, drawables)`` pair handed out by the
    callbacks. Index forms raise :class:`TagIndexError` for a bad index, and
    ``*_for`` forms raise :class:`UnknownTagAreaError` for a pair that was
    removed or replaced.

    Integration hooks live on :attr:`callbacks`.
    """

    def __init__(self, backend: SceneBackend, config: Optional[CanvasConfig] = None) -> None:
        """
        Initialize the canvas.

        Args:
            backend: Scene the primitives are drawn into
            config: Canvas settings, defaults if omitted
        """
        self.config = config or CanvasConfig()
        self.backend = backend
        self.store = AnnotationStore()
        self.renderer = ShapeRenderer(backend, self.config)
        self.viewport = Viewport(max_scale=self.config.max_scale, on_change=self._on_view_changed)
        self.callbacks = CanvasCallbacks()
        self.interaction = InteractionStateMachine(
            self.viewport, self.renderer, self.store, self.callbacks, self.config
        )
        self.backend.set_view_transform(self.viewport.transform)

    # === Data ===

    def append_data(
        self,
        geometry_type: GeometryType,
        pos: Sequence[Any],
        color: str,
        label: str = ""
    ) -> int:
        """
        Add a tag area and draw its outline.

        Args:
            geometry_type: RECT or POLYGON
            pos: ``[x1, y1, x2, y2]`` for a rect, ``[[x, y], ...]`` for a polygon
            color: ``#RRGGBB`` hex string
            label: Label text

        Returns:
            Index of the new tag area

        Raises:
            InvalidGeometryError: If ``pos`` does not match ``geometry_type``
            InvalidColorError: If ``color`` is malformed
        """
        data = TagArea.from_pos(geometry_type, pos, color, label)
        data.label_visible = self.config.labels_visible_by_default

        drawables = self.renderer.build_drawable_set(data)
        self.renderer.attach(data, drawables)
        return self.store.append(data, drawables)

    def remove_data_by_index(self, index: int) -> None:
        """
        Remove a tag area and every primitive drawn for it.

        Raises:
            TagIndexError: If ``index`` is out of range
        """
        data, drawables = self.store.remove_at(index)
        self.renderer.detach(drawables)
        self.interaction.forget(data)

    def get_data_list(self) -> List[TagArea]:
        """All tag area records, in order."""
        return self.store.data

    def set_data_list(self, records: Sequence[TagArea]) -> None:
        """
        Replace every tag area.

        Primitives of the previous tag areas are removed and new ones are
        built from each record's current state.
        """
        for _, _, drawables in self.store.entries():
            self.renderer.detach(drawables)
        self.interaction.forget_all()

        records = list(records)
        drawable_sets = [self.renderer.build_drawable_set(data) for data in records]
        self.store.replace_all(records, drawable_sets)
        for data, drawables in zip(records, drawable_sets):
            self.renderer.attach(data, drawables)
        logger.debug(f"Data list set with {len(records)} tag areas")

    def resolve(self, index: int) -> Tuple[TagArea, DrawableSet]:
        """
        Look up the ``(data, drawables)`` pair at ``index``.

        Raises:
            TagIndexError: If ``index`` is out of range
        """
        return self.store.get(index)

    def _check_pair(self, data: TagArea, drawables: DrawableSet) -> None:
        """
        Make sure a resolved pair still belongs to this canvas.

        Raises:
            UnknownTagAreaError: If the pair was removed or replaced
        """
        index = self.store.index_of(data)
        if index is None or self.store.get(index)[1] is not drawables:
            raise UnknownTagAreaError(f"Tag area {data.label!r} is not held by this canvas")

    # === Fill ===

    def fill_tag_area(self, index: int) -> None:
        """Fill the tag area interior with a translucent version of its color."""
        self.fill_tag_area_for(*self.resolve(index))

    def fill_tag_area_for(self, data: TagArea, drawables: DrawableSet) -> None:
        self._check_pair(data, drawables)
        self.renderer.apply_fill(data, drawables)

    def unfill_tag_area(self, index: int) -> None:
        """Clear the tag area interior fill."""
        self.unfill_tag_area_for(*self.resolve(index))

    def unfill_tag_area_for(self, data: TagArea, drawables: DrawableSet) -> None:
        self._check_pair(data, drawables)
        self.renderer.remove_fill(data, drawables)

    # === Labels ===

    def set_label_visible(self, visible: bool, index: int) -> None:
        """Show or hide the label of a tag area."""
        self.set_label_visible_for(visible, *self.resolve(index))

    def set_label_visible_for(self, visible: bool, data: TagArea, drawables: DrawableSet) -> None:
        self._check_pair(data, drawables)
        if visible:
            self.renderer.show_label(data, drawables)
        else:
            self.renderer.hide_label(data, drawables)

    def set_label_text(self, label: str, index: int) -> None:
        """Change the label text of a tag area; visibility is kept."""
        self.set_label_text_for(label, *self.resolve(index))

    def set_label_text_for(self, label: str, data: TagArea, drawables: DrawableSet) -> None:
        self._check_pair(data, drawables)
        data.label = label if label.strip() else " "
        self.renderer.relabel(data, drawables)

    # === Selection ===

    def select_tag_area(self, index: int) -> None:
        """Select a tag area: fill it and show its resize handles."""
        self.select_tag_area_for(*self.resolve(index))

    def select_tag_area_for(self, data: TagArea, drawables: DrawableSet) -> None:
        self._check_pair(data, drawables)
        for _, other, other_drawables in self.store.entries():
            if other is not data and other.selected:
                self.deselect_tag_area_for(other, other_drawables)

        data.selected = True
        self.renderer.apply_fill(data, drawables)
        self.renderer.show_handles(data, drawables)
        self.update()

    def deselect_tag_area(self, index: int) -> None:
        """Deselect a tag area: hide its handles and clear its fill."""
        self.deselect_tag_area_for(*self.resolve(index))

    def deselect_tag_area_for(self, data: TagArea, drawables: DrawableSet) -> None:
        self._check_pair(data, drawables)
        data.selected = False
        self.renderer.hide_handles(drawables)
        self.renderer.remove_fill(data, drawables)
        self.update()

    # === View ===

    @property
    def scale(self) -> float:
        return self.viewport.scale

    @property
    def pan(self) -> QPointF:
        return self.viewport.pan

    def expand_canvas_scale(self, step: Optional[float] = None) -> bool:
        """
        Zoom in by ``step`` (default ``config.scale_step``) around the pointer.

        Returns:
            False if the new scale would exceed the maximum
        """
        return self.viewport.expand(self.config.scale_step if step is None else step)

    def reduce_canvas_scale(self, step: Optional[float] = None) -> bool:
        """
        Zoom out by ``step`` (default ``config.scale_step``) around the pointer.

        Returns:
            False if the new scale would fall below ``step``
        """
        return self.viewport.reduce(self.config.scale_step if step is None else step)

    def set_scale(self, scale: float) -> None:
        """Zoom to an explicit scale around the pointer."""
        self.viewport.set_scale(scale)

    def set_image_size(self, width: float, height: float) -> None:
        self.viewport.set_image_size(width, height)

    def set_viewport_size(self, width: float, height: float) -> None:
        self.viewport.set_viewport_size(width, height)

    def update(self) -> None:
        """Repaint the scene."""
        self.backend.repaint()

    def _on_view_changed(self, transform: ViewTransform) -> None:
        self.backend.set_view_transform(transform)
        self.backend.repaint()

    # === Events ===

    def hit_test(self, raw: QPointF) -> Optional[HitTarget]:
        """Topmost tag area outline or resize handle under a raw position."""
        for item in self.backend.items_at(raw):
            for index, _, drawables in self.store.entries():
                if item is drawables.outline:
                    return HitTarget(TargetKind.TAG_AREA, index)
                handle_index = drawables.handle_index(item)
                if handle_index is not None:
                    return HitTarget(TargetKind.HANDLE, index, handle_index)
        return None

    def pointer_down(self, raw: QPointF) -> None:
        self.interaction.pointer_down(raw, self.hit_test(raw))

    def pointer_move(self, raw: QPointF) -> None:
        self.interaction.pointer_move(raw, self.hit_test(raw))

    def pointer_up(self, raw: QPointF) -> None:
        self.interaction.pointer_up(raw, self.hit_test(raw))

    def pointer_leave(self, raw: QPointF) -> None:
        self.interaction.pointer_leave(raw)

    def wheel(self, delta: float, raw: QPointF) -> None:
        self.interaction.wheel(delta, raw)

    def pan_key_pressed(self, has_modifier: bool = False) -> None:
        self.interaction.pan_key_pressed(has_modifier)

    def pan_key_released(self) -> None:
        self.interaction.pan_key_released()
