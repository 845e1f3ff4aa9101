"""
Project board core: snapshot models, view projections, and view state.

Example usage:
    >>> from projecthub.core.board import ViewState, SwitchView, ViewKind, sample_snapshot
    >>> state = ViewState(sample_snapshot())
    >>> frame = state.dispatch(SwitchView(ViewKind.TABLE))
    >>> frame.projection.total
    8
"""

from projecthub.core.board.filters import FilterState, parse_filter
from projecthub.core.board.loader import SnapshotLoadError, load_snapshot
from projecthub.core.board.models import (
    ColumnDefinition,
    Cursor,
    FlatCursor,
    GroupedCursor,
    Item,
    Priority,
    ProjectSnapshot,
    Status,
    ViewKind,
)
from projecthub.core.board.projector import (
    Projection,
    ProjectionGroup,
    SortField,
    TableSort,
    progress_bar,
    progress_cells,
    project,
    project_board,
    project_roadmap,
    project_table,
)
from projecthub.core.board.samples import sample_snapshot
from projecthub.core.board.state import (
    ApplyFilter,
    ClearFilter,
    Direction,
    Event,
    MoveCursor,
    SelectAtIndex,
    SortTable,
    SwitchView,
    ViewFrame,
    ViewState,
)

__all__ = [
    # Models
    "ColumnDefinition",
    "Cursor",
    "FlatCursor",
    "GroupedCursor",
    "Item",
    "Priority",
    "ProjectSnapshot",
    "Status",
    "ViewKind",
    # Filtering
    "FilterState",
    "parse_filter",
    # Projections
    "Projection",
    "ProjectionGroup",
    "SortField",
    "TableSort",
    "progress_bar",
    "progress_cells",
    "project",
    "project_board",
    "project_roadmap",
    "project_table",
    # State
    "ApplyFilter",
    "ClearFilter",
    "Direction",
    "Event",
    "MoveCursor",
    "SelectAtIndex",
    "SortTable",
    "SwitchView",
    "ViewFrame",
    "ViewState",
    # Loading
    "SnapshotLoadError",
    "load_snapshot",
    "sample_snapshot",
]
