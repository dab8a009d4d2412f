"""Pointer and keyboard interaction state machine for the canvas."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Tuple

from PyQt6.QtCore import QPointF

from .config import CanvasConfig
from .models import DrawableSet, GeometryType, TagArea
from .renderer import ShapeRenderer
from .store import AnnotationStore
from .viewport import Viewport

logger = logging.getLogger(__name__)


class InteractionState(str, Enum):
    """Interaction modes of the canvas."""

    IDLE = "idle"
    PAN_READY = "pan_ready"  # Pan key held, pointer not pressed
    PANNING = "panning"
    CREATING_BOX = "creating_box"
    HANDLE_DRAG_SUPPRESSED = "handle_drag_suppressed"  # Pressed on a tag area or handle


class CursorHint(str, Enum):
    """Cursor the host widget should show."""

    DEFAULT = "default"
    POINTER = "pointer"
    GRAB = "grab"
    GRABBING = "grabbing"
    MOVE = "move"


class TargetKind(str, Enum):
    """What a pointer event landed on."""

    TAG_AREA = "tag_area"
    HANDLE = "handle"


@dataclass(frozen=True)
class HitTarget:
    """Tag area (and optionally resize handle) under the pointer."""

    kind: TargetKind
    index: int
    handle_index: Optional[int] = None


@dataclass
class DragSession:
    """
    State of one drag-to-create gesture.

    ``current`` stays None until the pointer moves, ``end`` until it is
    released. ``clear()`` removes the preview exactly once.
    """

    start: QPointF
    preview: Any
    on_clear: Callable[[DragSession], None] = field(repr=False)
    current: Optional[QPointF] = None
    end: Optional[QPointF] = None
    cleared: bool = False

    def clear(self) -> None:
        """Remove the preview and end the session; later calls do nothing."""
        if self.cleared:
            return
        self.cleared = True
        self.on_clear(self)


@dataclass
class DraggingEndEvent:
    """Passed to ``on_default_dragging_end`` when a drag-to-create finishes."""

    start: QPointF
    current: Optional[QPointF]
    end: QPointF
    preview: Any
    clear: Callable[[], None]


@dataclass
class CanvasCallbacks:
    """
    Optional integration hooks. A hook left as None is simply not called.

    Shape hooks receive ``(data, drawables)`` so the caller can hand the
    pair straight back to the canvas.
    """

    on_shape_hover: Optional[Callable[[TagArea, DrawableSet], None]] = None
    on_shape_leave: Optional[Callable[[TagArea, DrawableSet], None]] = None
    on_shape_click: Optional[Callable[[TagArea, DrawableSet], None]] = None
    on_shape_resized: Optional[Callable[[TagArea, DrawableSet], None]] = None
    on_default_dragging_end: Optional[Callable[[DraggingEndEvent], None]] = None
    on_cursor_changed: Optional[Callable[[CursorHint], None]] = None


class InteractionStateMachine:
    """
    Turns raw pointer and pan-key input into canvas state changes.

    Raw positions are viewport pixels; they are converted to logical
    coordinates through the viewport before any geometry math, except for the
    raw delta used while panning. A press on a tag area or handle never starts
    a drag-to-create gesture. The pan key is honoured only while idle; pressing
    it in the middle of another gesture is ignored.
    """

    def __init__(
        self,
        viewport: Viewport,
        renderer: ShapeRenderer,
        store: AnnotationStore,
        callbacks: CanvasCallbacks,
        config: CanvasConfig
    ) -> None:
        self.viewport = viewport
        self.renderer = renderer
        self.store = store
        self.callbacks = callbacks
        self.config = config

        self.state = InteractionState.IDLE
        self.cursor = CursorHint.DEFAULT

        self._session: Optional[DragSession] = None
        self._suppress_next_move = False
        self._pan_key_down = False
        self._pan_start_raw: Optional[QPointF] = None
        self._pan_start_offset: Optional[QPointF] = None

        # Press on a tag area or handle: (target, data, drawables)
        self._pressed: Optional[Tuple[HitTarget, TagArea, DrawableSet]] = None
        self._resize_anchor: Optional[QPointF] = None
        self._handle_moved = False

        self._hovered: Optional[Tuple[TagArea, DrawableSet]] = None
        self._hover_kind: Optional[TargetKind] = None

    @property
    def session(self) -> Optional[DragSession]:
        """The current or last uncleared drag-to-create session."""
        return self._session

    @property
    def suppressing_next_move(self) -> bool:
        return self._suppress_next_move

    # === Keyboard ===

    def pan_key_pressed(self, has_modifier: bool = False) -> None:
        """Pan key went down; ready to pan when idle and unmodified."""
        if has_modifier or self.state != InteractionState.IDLE:
            return
        self._pan_key_down = True
        self.state = InteractionState.PAN_READY
        self._set_cursor(CursorHint.GRAB)

    def pan_key_released(self) -> None:
        """Pan key went up; leaves pan-ready or an active pan."""
        if not self._pan_key_down:
            return
        self._pan_key_down = False
        if self.state in (InteractionState.PAN_READY, InteractionState.PANNING):
            self._finish_panning()

    # === Pointer ===

    def pointer_down(self, raw: QPointF, target: Optional[HitTarget] = None) -> None:
        """Primary button pressed at ``raw`` over ``target``."""
        self.viewport.pointer_pos = QPointF(raw)

        if self.state == InteractionState.PAN_READY:
            self.state = InteractionState.PANNING
            self._pan_start_raw = QPointF(raw)
            self._pan_start_offset = self.viewport.pan
            self._set_cursor(CursorHint.GRABBING)
            return

        if self.state != InteractionState.IDLE:
            return

        if target is not None:
            self._begin_press(target)
        else:
            self._begin_box(raw)

    def pointer_move(self, raw: QPointF, target: Optional[HitTarget] = None) -> None:
        """Pointer moved to ``raw`` over ``target``."""
        self.viewport.pointer_pos = QPointF(raw)

        if self._suppress_next_move:
            self._suppress_next_move = False
        elif self.state == InteractionState.PANNING:
            self.viewport.pan_to(self._pan_start_offset + (raw - self._pan_start_raw))
        elif self.state == InteractionState.CREATING_BOX:
            self._stretch_box(raw)
        elif self.state == InteractionState.HANDLE_DRAG_SUPPRESSED:
            self._drag_handle(raw)

        self._update_hover(target)

    def pointer_up(self, raw: QPointF, target: Optional[HitTarget] = None) -> None:
        """Primary button released at ``raw`` over ``target``."""
        self.viewport.pointer_pos = QPointF(raw)
        self._end_gesture(raw, target)

    def pointer_leave(self, raw: QPointF) -> None:
        """Pointer left the drawing surface; ends any gesture like a release."""
        self._end_gesture(raw, None)
        self._update_hover(None)

    def wheel(self, delta: float, raw: QPointF) -> None:
        """
        Wheel turned; positive ``delta`` zooms in around ``raw``.

        A zoom in the middle of a pan restarts the pan from the zoomed view so
        the next move does not undo the pivot adjustment.
        """
        self.viewport.pointer_pos = QPointF(raw)
        if delta > 0:
            changed = self.viewport.expand(self.config.scale_step)
        elif delta < 0:
            changed = self.viewport.reduce(self.config.scale_step)
        else:
            return

        if changed and self.state == InteractionState.PANNING:
            self._pan_start_raw = QPointF(raw)
            self._pan_start_offset = self.viewport.pan

    def forget(self, data: TagArea) -> None:
        """Drop hover and press state that refers to a removed tag area."""
        if self._hovered is not None and self._hovered[0] is data:
            self._hovered = None
            self._hover_kind = None
            if self.state == InteractionState.IDLE:
                self._set_cursor(self._idle_cursor())

        if self._pressed is not None and self._pressed[1] is data:
            self._pressed = None
            self._resize_anchor = None
            self._handle_moved = False
            self._suppress_next_move = False
            self.state = InteractionState.IDLE

    def forget_all(self) -> None:
        """Drop hover and press state for every tag area."""
        if self._hovered is not None:
            self.forget(self._hovered[0])
        if self._pressed is not None:
            self.forget(self._pressed[1])

    # === Gestures ===

    def _begin_press(self, target: HitTarget) -> None:
        data, drawables = self.store.get(target.index)
        self.state = InteractionState.HANDLE_DRAG_SUPPRESSED
        self._suppress_next_move = True
        self._pressed = (target, data, drawables)
        self._handle_moved = False
        self._resize_anchor = None

        if target.kind == TargetKind.HANDLE and data.type == GeometryType.RECT:
            self._resize_anchor = data.opposite_corner(target.handle_index)

    def _begin_box(self, raw: QPointF) -> None:
        if self._session is not None:
            self._session.clear()

        start = self.viewport.to_logical(raw)
        preview = self.renderer.create_preview(start)
        self._session = DragSession(start=start, preview=preview, on_clear=self._clear_session)
        self.state = InteractionState.CREATING_BOX
        self.renderer.backend.repaint()

    def _stretch_box(self, raw: QPointF) -> None:
        session = self._session
        if session is None or session.end is not None:
            return
        session.current = self.viewport.to_logical(raw)
        self.renderer.update_preview(session.preview, session.start, session.current)
        self.renderer.backend.repaint()

    def _drag_handle(self, raw: QPointF) -> None:
        target, data, drawables = self._pressed
        if target.kind != TargetKind.HANDLE:
            return

        point = self.viewport.to_logical(raw)
        if data.type == GeometryType.RECT:
            data.resize_from(self._resize_anchor, point)
        else:
            data.move_vertex(target.handle_index, point)

        self.renderer.redraw(data, drawables)
        self._handle_moved = True
        self.renderer.backend.repaint()

    def _end_gesture(self, raw: QPointF, target: Optional[HitTarget]) -> None:
        if self.state == InteractionState.PANNING:
            self._finish_panning()
        elif self.state == InteractionState.CREATING_BOX:
            self._end_dragging(raw)
        elif self.state == InteractionState.HANDLE_DRAG_SUPPRESSED:
            self._finish_press(target)
        self._suppress_next_move = False

    def _finish_panning(self) -> None:
        self._pan_start_raw = None
        self._pan_start_offset = None
        if self._pan_key_down:
            self.state = InteractionState.PAN_READY
            self._set_cursor(CursorHint.GRAB)
        else:
            self.state = InteractionState.IDLE
            self._set_cursor(self._idle_cursor())

    def _end_dragging(self, raw: QPointF) -> None:
        self.state = InteractionState.IDLE
        session = self._session
        if session is None or session.end is not None:
            return

        session.end = self.viewport.to_logical(raw)
        logger.debug(f"Drag ended from {session.start} to {session.end}")
        self._emit(
            self.callbacks.on_default_dragging_end,
            DraggingEndEvent(
                start=QPointF(session.start),
                current=QPointF(session.current) if session.current is not None else None,
                end=QPointF(session.end),
                preview=session.preview,
                clear=session.clear,
            ),
        )

    def _finish_press(self, target: Optional[HitTarget]) -> None:
        pressed = self._pressed
        moved = self._handle_moved
        self._pressed = None
        self._resize_anchor = None
        self._handle_moved = False
        self.state = InteractionState.IDLE

        if pressed is None:
            return
        pressed_target, data, drawables = pressed

        if moved:
            self._emit(self.callbacks.on_shape_resized, data, drawables)
        elif (
            pressed_target.kind == TargetKind.TAG_AREA
            and target is not None
            and target.kind == TargetKind.TAG_AREA
            and self.store.index_of(data) == target.index
        ):
            self._emit(self.callbacks.on_shape_click, data, drawables)

    def _clear_session(self, session: DragSession) -> None:
        self.renderer.remove_preview(session.preview)
        if self._session is session:
            self._session = None
            if self.state == InteractionState.CREATING_BOX:
                self.state = InteractionState.IDLE
        self.renderer.backend.repaint()

    # === Hover and cursor ===

    def _update_hover(self, target: Optional[HitTarget]) -> None:
        entered: Optional[Tuple[TagArea, DrawableSet]] = None
        if target is not None and target.kind == TargetKind.TAG_AREA:
            entered = self.store.get(target.index)

        previous = self._hovered
        self._hover_kind = target.kind if target is not None else None

        if (previous[0] if previous else None) is not (entered[0] if entered else None):
            self._hovered = entered
            if previous is not None:
                self._emit(self.callbacks.on_shape_leave, *previous)
            if entered is not None:
                self._emit(self.callbacks.on_shape_hover, *entered)

        if self.state not in (InteractionState.PAN_READY, InteractionState.PANNING):
            self._set_cursor(self._idle_cursor())

    def _idle_cursor(self) -> CursorHint:
        if self._hover_kind == TargetKind.HANDLE:
            return CursorHint.MOVE
        if self._hovered is not None and self.config.cursor_pointer:
            return CursorHint.POINTER
        return CursorHint.DEFAULT

    def _set_cursor(self, hint: CursorHint) -> None:
        if hint != self.cursor:
            self.cursor = hint
            self._emit(self.callbacks.on_cursor_changed, hint)

    @staticmethod
    def _emit(callback: Optional[Callable[..., None]], *args: Any) -> None:
        if callback is not None:
            callback(*args)
