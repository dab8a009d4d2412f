"""Tests for pointer and pan-key interaction on the canvas."""

import pytest
from PyQt6.QtCore import QPointF

from tag_canvas.core.interaction import CursorHint, InteractionState, TargetKind
from tag_canvas.core.models import GeometryType


@pytest.fixture
def recorder(canvas):
    """Record every callback the canvas fires."""
    calls = {
        "hover": [],
        "leave": [],
        "click": [],
        "resized": [],
        "dragging_end": [],
        "cursor": [],
    }
    callbacks = canvas.callbacks
    callbacks.on_shape_hover = lambda data, drawables: calls["hover"].append(data)
    callbacks.on_shape_leave = lambda data, drawables: calls["leave"].append(data)
    callbacks.on_shape_click = lambda data, drawables: calls["click"].append((data, drawables))
    callbacks.on_shape_resized = lambda data, drawables: calls["resized"].append(data)
    callbacks.on_default_dragging_end = calls["dragging_end"].append
    callbacks.on_cursor_changed = calls["cursor"].append
    return calls


def drag(canvas, *points):
    """Press at the first point, move through the rest and release at the last."""
    canvas.pointer_down(points[0])
    for point in points[1:]:
        canvas.pointer_move(point)
    canvas.pointer_up(points[-1])


class TestDragToCreate:
    """Tests for dragging on empty space."""

    def test_drag_reports_positions(self, canvas, recorder):
        """Test a drag reports its start, last and end positions."""
        drag(canvas, QPointF(10, 10), QPointF(30, 40), QPointF(50, 80))

        assert len(recorder["dragging_end"]) == 1
        event = recorder["dragging_end"][0]
        assert event.start == QPointF(10, 10)
        assert event.current == QPointF(50, 80)
        assert event.end == QPointF(50, 80)
        assert event.preview.rect().width() == 40
        assert canvas.interaction.state == InteractionState.IDLE

    def test_clear_removes_preview(self, canvas, recorder, backend):
        """Test clearing the preview leaves nothing in the scene."""
        drag(canvas, QPointF(10, 10), QPointF(50, 80))
        event = recorder["dragging_end"][0]

        event.clear()

        assert backend.items_at(QPointF(30, 40)) == []
        assert not backend.is_attached(event.preview)
        assert canvas.interaction.session is None

        # Clearing twice is harmless
        event.clear()

    def test_clear_inside_callback(self, canvas, backend):
        """Test the preview can be cleared from the callback itself."""
        canvas.callbacks.on_default_dragging_end = lambda event: event.clear()

        drag(canvas, QPointF(10, 10), QPointF(50, 80))

        assert canvas.interaction.session is None
        assert backend.items_at(QPointF(30, 40)) == []

    def test_preview_stays_without_callback(self, canvas, backend):
        """Test an unhandled drag keeps its preview until the next drag starts."""
        drag(canvas, QPointF(10, 10), QPointF(50, 80))
        first_preview = canvas.interaction.session.preview

        assert backend.is_attached(first_preview)

        canvas.pointer_down(QPointF(300, 300))

        assert not backend.is_attached(first_preview)
        assert canvas.interaction.session.preview is not first_preview

    def test_preview_follows_pointer(self, canvas):
        """Test the preview spans from the start to the pointer in any direction."""
        canvas.pointer_down(QPointF(50, 80))
        canvas.pointer_move(QPointF(10, 10))

        preview = canvas.interaction.session.preview
        assert preview.rect().topLeft() == QPointF(10, 10)
        assert preview.rect().bottomRight() == QPointF(50, 80)

    def test_release_without_move(self, canvas, recorder):
        """Test a plain click on empty space ends with no current position."""
        drag(canvas, QPointF(10, 10))

        event = recorder["dragging_end"][0]
        assert event.current is None
        assert event.end == QPointF(10, 10)

    def test_logical_positions_when_zoomed(self, canvas, recorder):
        """Test reported positions are image coordinates."""
        canvas.pointer_move(QPointF(0, 0))
        canvas.set_scale(2.0)

        drag(canvas, QPointF(20, 20), QPointF(100, 160))

        event = recorder["dragging_end"][0]
        assert event.start == QPointF(10, 10)
        assert event.end == QPointF(50, 80)

    def test_leave_ends_drag(self, canvas, recorder):
        """Test leaving the surface finishes the drag like a release."""
        canvas.pointer_down(QPointF(10, 10))
        canvas.pointer_move(QPointF(50, 80))

        canvas.pointer_leave(QPointF(50, 80))

        assert len(recorder["dragging_end"]) == 1
        assert canvas.interaction.state == InteractionState.IDLE

    def test_append_from_callback(self, canvas):
        """Test a tag area can be created from inside the callback."""
        def create(event):
            event.clear()
            canvas.append_data(
                GeometryType.RECT,
                [event.start.x(), event.start.y(), event.end.x(), event.end.y()],
                "#f9ca24"
            )

        canvas.callbacks.on_default_dragging_end = create

        drag(canvas, QPointF(10, 10), QPointF(50, 80))

        assert [data.pos for data in canvas.get_data_list()] == [[10.0, 10.0, 50.0, 80.0]]
        assert canvas.hit_test(QPointF(30, 40)).index == 0


class TestPressOnTagArea:
    """Tests for presses that land on a tag area."""

    @pytest.fixture
    def area(self, canvas):
        canvas.append_data(GeometryType.RECT, [100, 100, 200, 200], "#7ed6df")
        return canvas.get_data_list()[0]

    def test_no_box_over_tag_area(self, canvas, recorder, area):
        """Test dragging from a tag area never starts drag-to-create."""
        drag(canvas, QPointF(150, 150), QPointF(300, 300), QPointF(400, 400))

        assert recorder["dragging_end"] == []
        assert canvas.interaction.session is None

    def test_first_move_suppressed(self, canvas, area):
        """Test the first move after the press is swallowed."""
        canvas.pointer_down(QPointF(150, 150))

        assert canvas.interaction.state == InteractionState.HANDLE_DRAG_SUPPRESSED
        assert canvas.interaction.suppressing_next_move is True

        canvas.pointer_move(QPointF(155, 155))

        assert canvas.interaction.suppressing_next_move is False

    def test_release_clears_suppression(self, canvas, area):
        """Test a release without a move leaves nothing pending."""
        canvas.pointer_down(QPointF(150, 150))
        canvas.pointer_up(QPointF(150, 150))

        assert canvas.interaction.suppressing_next_move is False
        assert canvas.interaction.state == InteractionState.IDLE

    def test_click(self, canvas, recorder, area):
        """Test press and release on the same tag area is a click."""
        drag(canvas, QPointF(150, 150), QPointF(160, 160))

        assert len(recorder["click"]) == 1
        data, drawables = recorder["click"][0]
        assert data is area
        assert drawables is canvas.resolve(0)[1]

    def test_release_elsewhere_is_not_click(self, canvas, recorder, area):
        """Test releasing outside the pressed tag area is not a click."""
        drag(canvas, QPointF(150, 150), QPointF(500, 500))

        assert recorder["click"] == []

    def test_click_after_drag_to_create(self, canvas, recorder, area):
        """Test a click still works after an earlier drag-to-create."""
        drag(canvas, QPointF(10, 10), QPointF(50, 80))
        recorder["dragging_end"][0].clear()

        drag(canvas, QPointF(150, 150))

        assert len(recorder["click"]) == 1


class TestHover:
    """Tests for hover and cursor hints."""

    @pytest.fixture
    def area(self, canvas):
        canvas.append_data(GeometryType.RECT, [100, 100, 200, 200], "#7ed6df")
        return canvas.get_data_list()[0]

    def test_hover_and_leave(self, canvas, recorder, area):
        """Test entering and leaving a tag area fire once each."""
        canvas.pointer_move(QPointF(150, 150))
        canvas.pointer_move(QPointF(160, 160))
        canvas.pointer_move(QPointF(500, 500))

        assert recorder["hover"] == [area]
        assert recorder["leave"] == [area]

    def test_move_between_tag_areas(self, canvas, recorder, area):
        """Test moving straight from one tag area to another."""
        canvas.append_data(GeometryType.RECT, [200, 100, 300, 200], "#22a6b3")
        other = canvas.get_data_list()[1]

        canvas.pointer_move(QPointF(150, 150))
        canvas.pointer_move(QPointF(250, 150))

        assert recorder["hover"] == [area, other]
        assert recorder["leave"] == [area]

    def test_pointer_cursor(self, canvas, recorder, area):
        """Test the pointer cursor shows over tag areas."""
        canvas.pointer_move(QPointF(150, 150))
        assert canvas.interaction.cursor == CursorHint.POINTER

        canvas.pointer_move(QPointF(500, 500))
        assert canvas.interaction.cursor == CursorHint.DEFAULT
        assert recorder["cursor"] == [CursorHint.POINTER, CursorHint.DEFAULT]

    def test_pointer_cursor_disabled(self, canvas, area):
        """Test the pointer cursor can be turned off."""
        canvas.config.cursor_pointer = False

        canvas.pointer_move(QPointF(150, 150))

        assert canvas.interaction.cursor == CursorHint.DEFAULT

    def test_move_cursor_over_handle(self, canvas, area):
        """Test the move cursor shows over a resize handle."""
        canvas.select_tag_area(0)

        canvas.pointer_move(QPointF(200, 200))

        assert canvas.interaction.cursor == CursorHint.MOVE

    def test_leave_surface(self, canvas, recorder, area):
        """Test leaving the surface ends the hover."""
        canvas.pointer_move(QPointF(150, 150))

        canvas.pointer_leave(QPointF(150, 150))

        assert recorder["leave"] == [area]
        assert canvas.interaction.cursor == CursorHint.DEFAULT

    def test_removed_tag_area_is_forgotten(self, canvas, recorder, area):
        """Test removing the hovered tag area does not fire a late leave."""
        canvas.pointer_move(QPointF(150, 150))

        canvas.remove_data_by_index(0)
        canvas.pointer_move(QPointF(500, 500))

        assert recorder["leave"] == []
        assert canvas.interaction.cursor == CursorHint.DEFAULT


class TestPanning:
    """Tests for pan-key panning."""

    def test_pan_key_states(self, canvas, recorder):
        """Test the pan key walks through ready, panning and back."""
        canvas.pan_key_pressed()
        assert canvas.interaction.state == InteractionState.PAN_READY
        assert canvas.interaction.cursor == CursorHint.GRAB

        canvas.pointer_down(QPointF(400, 300))
        assert canvas.interaction.state == InteractionState.PANNING
        assert canvas.interaction.cursor == CursorHint.GRABBING

        canvas.pointer_up(QPointF(400, 300))
        assert canvas.interaction.state == InteractionState.PAN_READY
        assert canvas.interaction.cursor == CursorHint.GRAB

        canvas.pan_key_released()
        assert canvas.interaction.state == InteractionState.IDLE
        assert canvas.interaction.cursor == CursorHint.DEFAULT
        assert recorder["cursor"] == [
            CursorHint.GRAB, CursorHint.GRABBING, CursorHint.GRAB, CursorHint.DEFAULT
        ]

    def test_pan_moves_view(self, canvas):
        """Test dragging with the pan key held moves the image with the pointer."""
        canvas.pan_key_pressed()
        canvas.pointer_down(QPointF(400, 300))
        canvas.pointer_move(QPointF(300, 250))

        assert canvas.pan == QPointF(-100, -50)

        canvas.pointer_move(QPointF(350, 200))

        assert canvas.pan == QPointF(-50, -100)

    def test_pan_is_clamped(self, canvas):
        """Test panning stops at the image edges."""
        canvas.pan_key_pressed()
        canvas.pointer_down(QPointF(400, 300))

        canvas.pointer_move(QPointF(500, 400))
        assert canvas.pan == QPointF(0, 0)

        canvas.pointer_move(QPointF(-1000, -1000))
        assert canvas.pan == QPointF(-200, -400)

    def test_pan_does_not_create_box(self, canvas, recorder):
        """Test no preview or drag end happens while panning."""
        canvas.pan_key_pressed()
        drag(canvas, QPointF(400, 300), QPointF(300, 250))

        assert recorder["dragging_end"] == []
        assert canvas.interaction.session is None

    def test_release_key_while_panning(self, canvas):
        """Test releasing the pan key mid-pan stops panning."""
        canvas.pan_key_pressed()
        canvas.pointer_down(QPointF(400, 300))
        canvas.pointer_move(QPointF(300, 250))

        canvas.pan_key_released()
        canvas.pointer_move(QPointF(200, 200))

        assert canvas.interaction.state == InteractionState.IDLE
        assert canvas.pan == QPointF(-100, -50)

    def test_pan_key_during_drag_ignored(self, canvas, recorder):
        """Test pressing the pan key in the middle of a drag changes nothing."""
        canvas.pointer_down(QPointF(10, 10))
        canvas.pan_key_pressed()

        assert canvas.interaction.state == InteractionState.CREATING_BOX

        canvas.pointer_move(QPointF(50, 80))
        canvas.pointer_up(QPointF(50, 80))
        canvas.pan_key_released()

        assert len(recorder["dragging_end"]) == 1
        assert canvas.pan == QPointF(0, 0)
        assert canvas.interaction.state == InteractionState.IDLE

    def test_zoom_while_panning(self, canvas):
        """Test a wheel zoom mid-pan keeps the image point under the pointer."""
        canvas.set_image_size(4000, 4000)
        canvas.pan_key_pressed()
        canvas.pointer_down(QPointF(400, 300))
        canvas.pointer_move(QPointF(390, 300))

        canvas.wheel(120, QPointF(390, 300))
        assert canvas.scale == 1.25
        assert canvas.viewport.to_logical(QPointF(390, 300)) == QPointF(400, 300)

        canvas.pointer_move(QPointF(389, 300))

        assert canvas.viewport.to_logical(QPointF(389, 300)) == QPointF(400, 300)
        assert canvas.pan == QPointF(-111, -75)

    def test_modified_pan_key_ignored(self, canvas):
        """Test the pan key with a modifier held does nothing."""
        canvas.pan_key_pressed(has_modifier=True)

        assert canvas.interaction.state == InteractionState.IDLE


class TestHandleDrag:
    """Tests for resizing through handles."""

    def test_rect_resize(self, canvas, recorder):
        """Test dragging the bottom-right handle keeps the top-left corner."""
        canvas.append_data(GeometryType.RECT, [100, 100, 200, 200], "#be2edd")
        canvas.select_tag_area(0)

        assert canvas.hit_test(QPointF(200, 200)).kind == TargetKind.HANDLE

        drag(canvas, QPointF(200, 200), QPointF(250, 260), QPointF(250, 260))

        data = canvas.get_data_list()[0]
        assert data.pos == [100.0, 100.0, 250.0, 260.0]
        assert recorder["resized"] == [data]
        assert recorder["click"] == []
        assert recorder["dragging_end"] == []

    def test_rect_resize_top_left(self, canvas):
        """Test dragging the top-left handle keeps the bottom-right corner."""
        canvas.append_data(GeometryType.RECT, [100, 100, 200, 200], "#be2edd")
        canvas.select_tag_area(0)

        drag(canvas, QPointF(100, 100), QPointF(50, 60), QPointF(50, 60))

        assert canvas.get_data_list()[0].pos == [50.0, 60.0, 200.0, 200.0]

    def test_handles_follow_resize(self, canvas):
        """Test the handles and outline are redrawn at the new geometry."""
        canvas.append_data(GeometryType.RECT, [100, 100, 200, 200], "#be2edd")
        canvas.select_tag_area(0)

        drag(canvas, QPointF(200, 200), QPointF(300, 300), QPointF(300, 300))

        target = canvas.hit_test(QPointF(300, 300))
        assert target.kind == TargetKind.HANDLE
        assert target.handle_index == 2
        assert canvas.hit_test(QPointF(250, 250)).kind == TargetKind.TAG_AREA

    def test_polygon_vertex(self, canvas, recorder):
        """Test dragging a polygon handle moves only that vertex."""
        canvas.append_data(
            GeometryType.POLYGON, [[100, 100], [300, 100], [200, 300]], "#6ab04c"
        )
        canvas.select_tag_area(0)

        drag(canvas, QPointF(300, 100), QPointF(320, 120), QPointF(320, 120))

        assert canvas.get_data_list()[0].pos == [[100.0, 100.0], [320.0, 120.0], [200.0, 300.0]]
        assert len(recorder["resized"]) == 1

    def test_suppressed_move_does_not_resize(self, canvas, recorder):
        """Test the swallowed first move leaves the geometry alone."""
        canvas.append_data(GeometryType.RECT, [100, 100, 200, 200], "#be2edd")
        canvas.select_tag_area(0)

        drag(canvas, QPointF(200, 200), QPointF(250, 260))

        assert canvas.get_data_list()[0].pos == [100.0, 100.0, 200.0, 200.0]
        assert recorder["resized"] == []


class TestWheel:
    """Tests for wheel zooming."""

    def test_wheel_zooms(self, canvas):
        """Test positive deltas zoom in and negative deltas zoom out."""
        canvas.wheel(120, QPointF(400, 300))
        assert canvas.scale == 1.25

        canvas.wheel(-120, QPointF(400, 300))
        assert canvas.scale == 1.0

    def test_wheel_keeps_point_under_pointer(self, canvas):
        """Test the image point under the pointer stays in place."""
        canvas.wheel(120, QPointF(200, 100))

        assert canvas.viewport.to_logical(QPointF(200, 100)) == QPointF(200, 100)

    def test_zero_delta(self, canvas):
        """Test a zero delta does nothing."""
        canvas.wheel(0, QPointF(400, 300))

        assert canvas.scale == 1.0
