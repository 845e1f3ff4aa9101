"""
View and selection state machine.

ViewState owns the active view, the cursor within that view's projection,
and the active filter and table sort. It changes only in response to
events passed to dispatch(); each dispatch re-projects the snapshot and
publishes a new immutable ViewFrame.

Cursor rules:
- The cursor always resolves to an item of the current projection, or is
  None when the projection is empty.
- Switching view, changing the filter, or re-sorting an active Table resets
  the cursor to the origin (first item of the first non-empty group).
- up/down/top/bottom move within the current group and clamp at its ends.
- left/right move between Board columns, skipping empty ones; they are a
  no-op in the Table and Roadmap views.
- Navigation on an empty projection, or to a position that does not exist,
  is a no-op. Navigation never raises.

Usage:
    >>> state = ViewState(sample_snapshot())
    >>> frame = state.dispatch(MoveCursor(Direction.RIGHT))
    >>> frame.cursor
    GroupedCursor(group=1, offset=0)
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum

from projecthub.core.board.filters import FilterState, parse_filter
from projecthub.core.board.models import (
    Cursor,
    FlatCursor,
    GroupedCursor,
    Item,
    ProjectSnapshot,
    ViewKind,
)
from projecthub.core.board.projector import Projection, SortField, TableSort, project

logger = logging.getLogger(__name__)


class Direction(str, Enum):
    """Cursor movement directions."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"


# ===========================================================================
# Events
# ===========================================================================


@dataclass(frozen=True)
class SwitchView:
    """Make another view active."""

    target: ViewKind


@dataclass(frozen=True)
class MoveCursor:
    """Move the cursor within the active view."""

    direction: Direction


@dataclass(frozen=True)
class SelectAtIndex:
    """Select a position directly (click-to-select). Table uses group 0."""

    group: int
    offset: int


@dataclass(frozen=True)
class ApplyFilter:
    """Replace the active filter with a parsed query."""

    query: str


@dataclass(frozen=True)
class ClearFilter:
    """Remove the active filter."""


@dataclass(frozen=True)
class SortTable:
    """Toggle table sorting on a field."""

    field: SortField


Event = SwitchView | MoveCursor | SelectAtIndex | ApplyFilter | ClearFilter | SortTable


# ===========================================================================
# Frame - what renderers read
# ===========================================================================


@dataclass(frozen=True)
class ViewFrame:
    """
    A consistent, read-only view of the state after an event.

    The cursor was always computed against this frame's own projection.
    """

    active_view: ViewKind
    projection: Projection
    cursor: Cursor
    filter: FilterState
    sort: TableSort | None = None

    @property
    def selected_item(self) -> Item | None:
        """Get the item under the cursor, if any."""
        if self.cursor is None:
            return None
        group, offset = self.cursor.as_pair()
        return self.projection.item_at(group, offset)

    def is_selected(self, group: int, offset: int) -> bool:
        return self.cursor is not None and self.cursor.as_pair() == (group, offset)


def origin_cursor(projection: Projection) -> Cursor:
    """
    Get the starting cursor for a projection.

    This is (0, 0) whenever the first group has items; otherwise the first
    item of the first non-empty group. None for an empty projection.
    """
    for index, group in enumerate(projection.groups):
        if group.count:
            return make_cursor(projection.view, index, 0)
    return None


def make_cursor(view: ViewKind, group: int, offset: int) -> Cursor:
    """Build the cursor variant that matches a view."""
    if view.is_grouped:
        return GroupedCursor(group=group, offset=offset)
    return FlatCursor(row=offset)


class ViewState:
    """
    The single writer of view/selection state.

    Example:
        >>> state = ViewState(snapshot)
        >>> state.dispatch(SwitchView(ViewKind.TABLE)).cursor
        FlatCursor(row=0)
        >>> state.dispatch(MoveCursor(Direction.DOWN)).cursor
        FlatCursor(row=1)
    """

    def __init__(self, snapshot: ProjectSnapshot, initial_view: ViewKind = ViewKind.BOARD):
        """
        Initialize state with the cursor at the origin of the initial view.

        Args:
            snapshot: Validated project snapshot (never mutated)
            initial_view: View active at startup (default: Board)
        """
        self.snapshot = snapshot
        self._lock = threading.Lock()
        self._frame = self._build_frame(
            ViewKind(initial_view), FilterState(), None, cursor=None, reset=True
        )

    @property
    def frame(self) -> ViewFrame:
        """The latest frame. Safe to read while another thread dispatches."""
        return self._frame

    @property
    def active_view(self) -> ViewKind:
        return self._frame.active_view

    @property
    def cursor(self) -> Cursor:
        return self._frame.cursor

    @property
    def projection(self) -> Projection:
        return self._frame.projection

    def dispatch(self, event: object) -> ViewFrame:
        """
        Apply one event and publish the resulting frame.

        Unrecognized events, and events naming an unknown view, direction
        or sort field, are ignored. Events never raise: positions that do
        not exist and moves on an empty view leave the state as is.

        Args:
            event: One of the Event types

        Returns:
            The frame current after the event
        """
        with self._lock:
            frame = self._frame
            match event:
                case SwitchView(target=target):
                    try:
                        view = ViewKind(target)
                    except ValueError:
                        logger.debug(f"Ignoring switch to unknown view: {target!r}")
                        return frame
                    new = self._build_frame(view, frame.filter, frame.sort, None, reset=True)
                case MoveCursor(direction=direction):
                    try:
                        direction = Direction(direction)
                    except ValueError:
                        logger.debug(f"Ignoring move in unknown direction: {direction!r}")
                        return frame
                    new = self._with_cursor(frame, self._move(frame, direction))
                case SelectAtIndex(group=group, offset=offset):
                    new = self._with_cursor(frame, self._select(frame, group, offset))
                case ApplyFilter(query=query):
                    new = self._build_frame(
                        frame.active_view, parse_filter(query), frame.sort, None, reset=True
                    )
                case ClearFilter():
                    new = self._build_frame(
                        frame.active_view, FilterState(), frame.sort, None, reset=True
                    )
                case SortTable(field=field):
                    try:
                        field = SortField(field)
                    except ValueError:
                        logger.debug(f"Ignoring sort on unknown field: {field!r}")
                        return frame
                    sort = frame.sort.toggled(field) if frame.sort else TableSort(field=field)
                    new = self._build_frame(
                        frame.active_view,
                        frame.filter,
                        sort,
                        frame.cursor,
                        reset=frame.active_view is ViewKind.TABLE,
                    )
                case _:
                    logger.debug(f"Ignoring unrecognized event: {event!r}")
                    return frame

            if new is not frame:
                logger.debug(
                    f"{type(event).__name__}: view={new.active_view.value} "
                    f"cursor={new.cursor.as_pair() if new.cursor else None}"
                )
            self._frame = new
            return new

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _build_frame(
        self,
        view: ViewKind,
        flt: FilterState,
        sort: TableSort | None,
        cursor: Cursor,
        reset: bool,
    ) -> ViewFrame:
        projection = project(self.snapshot, view, flt, sort)
        if reset:
            cursor = origin_cursor(projection)
        return ViewFrame(
            active_view=view, projection=projection, cursor=cursor, filter=flt, sort=sort
        )

    @staticmethod
    def _with_cursor(frame: ViewFrame, cursor: Cursor) -> ViewFrame:
        if cursor == frame.cursor:
            return frame
        return ViewFrame(
            active_view=frame.active_view,
            projection=frame.projection,
            cursor=cursor,
            filter=frame.filter,
            sort=frame.sort,
        )

    @staticmethod
    def _move(frame: ViewFrame, direction: Direction) -> Cursor:
        if frame.cursor is None:
            return None
        projection = frame.projection
        group, offset = frame.cursor.as_pair()
        size = projection.group_size(group)

        match direction:
            case Direction.UP:
                offset = max(0, offset - 1)
            case Direction.DOWN:
                offset = min(size - 1, offset + 1)
            case Direction.TOP:
                offset = 0
            case Direction.BOTTOM:
                offset = size - 1
            case Direction.LEFT | Direction.RIGHT:
                if frame.active_view is not ViewKind.BOARD:
                    return frame.cursor
                step = 1 if direction is Direction.RIGHT else -1
                target = group + step
                while 0 <= target < len(projection.groups) and not projection.group_size(target):
                    target += step
                if not 0 <= target < len(projection.groups):
                    return frame.cursor
                group = target
                offset = min(offset, projection.group_size(group) - 1)

        return make_cursor(frame.active_view, group, offset)

    @staticmethod
    def _select(frame: ViewFrame, group: int, offset: int) -> Cursor:
        if frame.projection.item_at(group, offset) is None:
            return frame.cursor
        return make_cursor(frame.active_view, group, offset)
