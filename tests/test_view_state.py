"""
Unit tests for the ViewState machine.

Covers the cursor rules: origin on startup and after view switches,
clamped up/down movement, Board-only left/right, click-to-select,
filter/sort events, and the empty-snapshot no-op behavior.
"""

import threading

import pytest

from projecthub.core.board import (
    ApplyFilter,
    ClearFilter,
    Direction,
    FlatCursor,
    GroupedCursor,
    MoveCursor,
    ProjectSnapshot,
    SelectAtIndex,
    SortField,
    SortTable,
    Status,
    SwitchView,
    TableSort,
    ViewKind,
    ViewState,
)


def move(state: ViewState, direction: Direction, times: int = 1):
    for _ in range(times):
        state.dispatch(MoveCursor(direction))
    return state.cursor


class TestInitialState:
    """Test the state right after construction."""

    def test_board_origin(self, sample):
        """Test the initial state is Board at (0, 0)."""
        state = ViewState(sample)
        assert state.active_view == ViewKind.BOARD
        assert state.cursor == GroupedCursor(group=0, offset=0)
        assert state.frame.selected_item.id == "#123"

    def test_initial_view_option(self, sample):
        """Test starting in another view."""
        state = ViewState(sample, initial_view=ViewKind.TABLE)
        assert state.cursor == FlatCursor(row=0)

    def test_origin_skips_empty_first_column(self, item_factory):
        """Test the origin is the first item of the first non-empty column."""
        snapshot = ProjectSnapshot(items=[item_factory("#1", Status.REVIEW)])
        state = ViewState(snapshot)
        assert state.cursor == GroupedCursor(group=2, offset=0)

    def test_empty_snapshot(self, empty_snapshot):
        """Test an empty snapshot starts on Board with the empty cursor."""
        state = ViewState(empty_snapshot)
        assert state.active_view == ViewKind.BOARD
        assert state.cursor is None
        assert state.frame.selected_item is None
        assert state.projection.is_empty


class TestMoveCursor:
    """Test cursor movement."""

    def test_right_across_board_then_stop(self, sample):
        """Test moving right through 3/2/1/2 columns stops at the last one."""
        state = ViewState(sample)
        assert move(state, Direction.RIGHT, 3) == GroupedCursor(group=3, offset=0)
        assert move(state, Direction.RIGHT) == GroupedCursor(group=3, offset=0)

    def test_left_at_first_column_is_noop(self, sample):
        """Test moving left from the first column stays put."""
        state = ViewState(sample)
        assert move(state, Direction.LEFT) == GroupedCursor(group=0, offset=0)

    def test_down_clamps_at_group_end(self, sample):
        """Test repeated down stops at the last item of the column."""
        state = ViewState(sample)
        assert move(state, Direction.DOWN, 10) == GroupedCursor(group=0, offset=2)

    def test_up_clamps_at_zero(self, sample):
        """Test up at the top stays at offset 0."""
        state = ViewState(sample)
        assert move(state, Direction.UP) == GroupedCursor(group=0, offset=0)

    def test_top_and_bottom(self, sample):
        """Test jumping to the ends of the current group."""
        state = ViewState(sample)
        assert move(state, Direction.BOTTOM) == GroupedCursor(group=0, offset=2)
        assert move(state, Direction.TOP) == GroupedCursor(group=0, offset=0)

    def test_horizontal_move_clamps_offset(self, sample):
        """Test moving into a shorter column clamps the offset."""
        state = ViewState(sample)
        move(state, Direction.DOWN, 2)
        assert move(state, Direction.RIGHT) == GroupedCursor(group=1, offset=1)
        assert move(state, Direction.RIGHT) == GroupedCursor(group=2, offset=0)

    def test_horizontal_move_skips_empty_columns(self, item_factory):
        """Test left/right jump over columns with no items."""
        snapshot = ProjectSnapshot(
            items=[item_factory("#1", Status.BACKLOG), item_factory("#2", Status.DONE)]
        )
        state = ViewState(snapshot)
        assert move(state, Direction.RIGHT) == GroupedCursor(group=3, offset=0)
        assert move(state, Direction.LEFT) == GroupedCursor(group=0, offset=0)

    def test_table_rows(self, sample):
        """Test up/down in the Table move through all rows."""
        state = ViewState(sample, initial_view=ViewKind.TABLE)
        assert move(state, Direction.DOWN, 3) == FlatCursor(row=3)
        assert move(state, Direction.DOWN, 20) == FlatCursor(row=7)
        assert move(state, Direction.UP) == FlatCursor(row=6)

    @pytest.mark.parametrize("view", [ViewKind.TABLE, ViewKind.ROADMAP])
    @pytest.mark.parametrize("direction", [Direction.LEFT, Direction.RIGHT])
    def test_left_right_noop_outside_board(self, sample, view, direction):
        """Test left/right do nothing in Table and Roadmap."""
        state = ViewState(sample, initial_view=view)
        before = state.frame
        assert state.dispatch(MoveCursor(direction)) is before

    def test_roadmap_moves_within_sprint(self, sample):
        """Test down in the Roadmap stays within the sprint group."""
        state = ViewState(sample, initial_view=ViewKind.ROADMAP)
        assert move(state, Direction.DOWN, 5) == GroupedCursor(group=0, offset=1)

    @pytest.mark.parametrize("direction", list(Direction))
    def test_empty_snapshot_moves_are_noops(self, empty_snapshot, direction):
        """Test every move on an empty snapshot keeps the empty cursor."""
        state = ViewState(empty_snapshot)
        assert move(state, direction) is None


class TestSwitchView:
    """Test view switching."""

    def test_switch_to_table_resets_cursor(self, five_item_snapshot):
        """Test switching to Table resets to row 0 over five rows."""
        state = ViewState(five_item_snapshot)
        move(state, Direction.RIGHT)
        move(state, Direction.DOWN)
        frame = state.dispatch(SwitchView(ViewKind.TABLE))
        assert frame.active_view == ViewKind.TABLE
        assert frame.cursor == FlatCursor(row=0)
        assert frame.projection.total == 5

    @pytest.mark.parametrize("view", list(ViewKind))
    def test_cursor_always_resolves(self, sample, view):
        """Test the cursor after a switch points at a real item."""
        state = ViewState(sample)
        move(state, Direction.RIGHT, 2)
        frame = state.dispatch(SwitchView(view))
        assert frame.selected_item is not None

    @pytest.mark.parametrize("view", list(ViewKind))
    def test_switch_on_empty_snapshot(self, empty_snapshot, view):
        """Test switching on an empty snapshot yields the empty cursor."""
        state = ViewState(empty_snapshot)
        assert state.dispatch(SwitchView(view)).cursor is None

    def test_switch_to_same_view_resets(self, sample):
        """Test re-selecting the active view also resets the cursor."""
        state = ViewState(sample)
        move(state, Direction.RIGHT)
        assert state.dispatch(SwitchView(ViewKind.BOARD)).cursor == GroupedCursor(0, 0)

    def test_frame_is_consistent(self, sample):
        """Test the frame's projection always belongs to its active view."""
        state = ViewState(sample)
        for view in (ViewKind.ROADMAP, ViewKind.TABLE, ViewKind.BOARD):
            frame = state.dispatch(SwitchView(view))
            assert frame.projection.view is frame.active_view


class TestSelectAtIndex:
    """Test click-to-select."""

    def test_select_existing(self, sample):
        """Test selecting an existing Board position."""
        state = ViewState(sample)
        frame = state.dispatch(SelectAtIndex(group=1, offset=1))
        assert frame.cursor == GroupedCursor(group=1, offset=1)
        assert frame.selected_item.id == "#127"

    def test_select_table_row(self, sample):
        """Test selecting a Table row uses group 0."""
        state = ViewState(sample, initial_view=ViewKind.TABLE)
        assert state.dispatch(SelectAtIndex(0, 4)).cursor == FlatCursor(row=4)

    @pytest.mark.parametrize("group,offset", [(2, 1), (9, 0), (0, -1), (-1, 0)])
    def test_select_missing_is_noop(self, sample, group, offset):
        """Test positions that do not exist leave the cursor unchanged."""
        state = ViewState(sample)
        assert state.dispatch(SelectAtIndex(group, offset)).cursor == GroupedCursor(0, 0)

    def test_select_on_empty_is_noop(self, empty_snapshot):
        """Test selecting on an empty view keeps the empty cursor."""
        state = ViewState(empty_snapshot)
        assert state.dispatch(SelectAtIndex(0, 0)).cursor is None


class TestFilterAndSort:
    """Test filter and table sort events."""

    def test_apply_filter_resets_cursor(self, sample):
        """Test applying a filter re-projects and resets to the origin."""
        state = ViewState(sample)
        move(state, Direction.RIGHT)
        frame = state.dispatch(ApplyFilter("label:docs"))
        assert frame.projection.total == 2
        assert frame.cursor == GroupedCursor(group=0, offset=0)
        assert frame.selected_item.id == "#125"

    def test_filter_hiding_everything(self, sample):
        """Test a filter matching nothing gives the empty cursor."""
        state = ViewState(sample)
        frame = state.dispatch(ApplyFilter("nothing-matches-this"))
        assert frame.projection.is_empty
        assert frame.cursor is None
        assert move(state, Direction.DOWN) is None

    def test_filter_survives_view_switch(self, sample):
        """Test the filter stays active across views."""
        state = ViewState(sample)
        state.dispatch(ApplyFilter("assignee:@sato"))
        frame = state.dispatch(SwitchView(ViewKind.TABLE))
        assert [i.id for i in frame.projection.items()] == ["#124", "#128"]

    def test_clear_filter(self, sample):
        """Test clearing restores every item."""
        state = ViewState(sample)
        state.dispatch(ApplyFilter("label:bug"))
        frame = state.dispatch(ClearFilter())
        assert frame.filter.is_empty
        assert frame.projection.total == 8

    def test_sort_table_toggles(self, sample):
        """Test repeated SortTable on one field flips direction."""
        state = ViewState(sample, initial_view=ViewKind.TABLE)
        state.dispatch(MoveCursor(Direction.DOWN))
        frame = state.dispatch(SortTable(SortField.UPDATED))
        assert frame.sort == TableSort(SortField.UPDATED, ascending=True)
        assert frame.cursor == FlatCursor(row=0)
        assert frame.selected_item.id == "#129"
        frame = state.dispatch(SortTable(SortField.UPDATED))
        assert frame.sort == TableSort(SortField.UPDATED, ascending=False)
        assert frame.selected_item.id == "#127"

    def test_sort_outside_table_keeps_cursor(self, sample):
        """Test sorting while on the Board does not move the Board cursor."""
        state = ViewState(sample)
        move(state, Direction.RIGHT)
        frame = state.dispatch(SortTable(SortField.TITLE))
        assert frame.cursor == GroupedCursor(group=1, offset=0)
        assert frame.sort == TableSort(SortField.TITLE)
        table = state.dispatch(SwitchView(ViewKind.TABLE))
        assert table.selected_item.id == "#128"  # "Add test code"


class TestDispatch:
    """Test dispatch edge cases."""

    def test_unknown_event_ignored(self, sample):
        """Test unrecognized events return the current frame unchanged."""
        state = ViewState(sample)
        before = state.frame
        assert state.dispatch("not-an-event") is before
        assert state.dispatch(object()) is before

    def test_snapshot_not_mutated(self, sample):
        """Test navigation never changes the snapshot."""
        items = sample.items
        state = ViewState(sample)
        for view in ViewKind:
            state.dispatch(SwitchView(view))
            move(state, Direction.DOWN, 3)
        assert state.snapshot.items is items

    def test_concurrent_dispatch_keeps_frames_consistent(self, sample):
        """Test frames stay consistent when events arrive from several threads."""
        state = ViewState(sample)
        errors: list[str] = []

        def worker(view: ViewKind) -> None:
            for _ in range(50):
                frame = state.dispatch(SwitchView(view))
                state.dispatch(MoveCursor(Direction.DOWN))
                if frame.projection.view is not frame.active_view:
                    errors.append("projection/view mismatch")
                if frame.cursor is not None and frame.selected_item is None:
                    errors.append("dangling cursor")

        threads = [threading.Thread(target=worker, args=(v,)) for v in ViewKind]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert errors == []

    def test_switch_to_unknown_view_ignored(self, sample):
        """Test a view name that does not exist leaves the frame as is."""
        state = ViewState(sample)
        move(state, Direction.RIGHT)
        before = state.frame
        assert state.dispatch(SwitchView("calendar")) is before

    def test_switch_by_view_value(self, sample):
        """Test a plain string view value is normalized to ViewKind."""
        state = ViewState(sample)
        frame = state.dispatch(SwitchView("board"))
        assert frame.active_view is ViewKind.BOARD
        assert move(state, Direction.RIGHT) == GroupedCursor(group=1, offset=0)
        frame = state.dispatch(SwitchView("table"))
        assert frame.active_view is ViewKind.TABLE
        assert frame.cursor == FlatCursor(row=0)

    def test_move_by_direction_value(self, sample):
        """Test plain string directions behave like Direction members."""
        state = ViewState(sample)
        assert move(state, "right") == GroupedCursor(group=1, offset=0)
        assert move(state, "left") == GroupedCursor(group=0, offset=0)
        before = state.frame
        assert state.dispatch(MoveCursor("diagonal")) is before

    def test_sort_on_unknown_field_ignored(self, sample):
        """Test sorting on a field that does not exist changes nothing."""
        state = ViewState(sample, initial_view=ViewKind.TABLE)
        before = state.frame
        assert state.dispatch(SortTable("estimate")) is before
        assert state.dispatch(SortTable("priority")).sort == TableSort(SortField.PRIORITY)
