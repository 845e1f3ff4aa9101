"""
View projections over a ProjectSnapshot.

Each projection is a pure, deterministic restructuring of the snapshot for
one view. Projections never mutate the snapshot and are total: an empty
snapshot (or a filter that hides everything) yields empty groups, never an
error.

- Board: one group per column, in column order, items in insertion order
- Table: one flat group, insertion order unless a TableSort is given
- Roadmap: one group per sprint (natural order), "Unassigned" last;
  items ordered by updated_at, then id
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

from projecthub.core.board.filters import FilterState
from projecthub.core.board.models import Item, ProjectSnapshot, ViewKind

PROGRESS_CELLS = 10
FILLED_GLYPH = "█"
EMPTY_GLYPH = "░"
UNASSIGNED_SPRINT = "Unassigned"


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (4.5 -> 5)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def progress_cells(percent: int | None) -> int:
    """
    Get the number of filled progress-bar cells (out of 10) for a percentage.

    Example:
        >>> progress_cells(70), progress_cells(45), progress_cells(0)
        (7, 5, 0)
    """
    if percent is None:
        return 0
    filled = round_half_up(percent / PROGRESS_CELLS)
    return max(0, min(PROGRESS_CELLS, filled))


def progress_bar(percent: int | None) -> str:
    """Render a 10-cell progress bar glyph (e.g., '███████░░░')."""
    filled = progress_cells(percent)
    return FILLED_GLYPH * filled + EMPTY_GLYPH * (PROGRESS_CELLS - filled)


# ===========================================================================
# Projection results
# ===========================================================================


@dataclass(frozen=True)
class ProjectionGroup:
    """An ordered run of items under one heading (column, sprint, or table)."""

    key: str
    title: str
    items: tuple[Item, ...] = ()

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def progress_percent(self) -> int | None:
        """Mean progress of the group's items, or None if none report progress."""
        values = [i.progress_percent for i in self.items if i.progress_percent is not None]
        if not values:
            return None
        return round_half_up(sum(values) / len(values))


@dataclass(frozen=True)
class Projection:
    """The view-specific shape of the snapshot handed to renderers."""

    view: ViewKind
    groups: tuple[ProjectionGroup, ...] = ()

    @property
    def total(self) -> int:
        return sum(group.count for group in self.groups)

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    def item_at(self, group: int, offset: int) -> Item | None:
        """Get the item at a position, or None if it does not exist."""
        if not 0 <= group < len(self.groups):
            return None
        items = self.groups[group].items
        if not 0 <= offset < len(items):
            return None
        return items[offset]

    def group_size(self, group: int) -> int:
        if not 0 <= group < len(self.groups):
            return 0
        return self.groups[group].count

    def items(self) -> list[Item]:
        """Flatten the projection in display order."""
        return [item for group in self.groups for item in group.items]


# ===========================================================================
# Table sorting
# ===========================================================================


class SortField(str, Enum):
    """Table columns that can be sorted."""

    ID = "id"
    TITLE = "title"
    STATUS = "status"
    ASSIGNEE = "assignee"
    PRIORITY = "priority"
    UPDATED = "updated"
    SPRINT = "sprint"
    PROGRESS = "progress"


def _natural_key(text: str) -> list[Any]:
    # "Sprint 2" < "Sprint 10"; "#9" < "#10"
    return [int(part) if part.isdigit() else part.lower() for part in re.split(r"(\d+)", text)]


_SORT_KEYS: dict[SortField, Callable[[Item], Any]] = {
    SortField.ID: lambda item: _natural_key(item.id),
    SortField.TITLE: lambda item: item.title.lower(),
    SortField.STATUS: lambda item: item.status.order,
    SortField.ASSIGNEE: lambda item: item.assignee.lower() if item.assignee else None,
    SortField.PRIORITY: lambda item: item.priority.rank,
    SortField.UPDATED: lambda item: item.updated_at,
    SortField.SPRINT: lambda item: _natural_key(item.sprint) if item.sprint else None,
    SortField.PROGRESS: lambda item: item.progress_percent,
}


@dataclass(frozen=True)
class TableSort:
    """Table ordering: a field and a direction."""

    field: SortField
    ascending: bool = True

    def toggled(self, field: SortField) -> TableSort:
        """Sorting on the same field flips direction; a new field starts ascending."""
        if field == self.field:
            return TableSort(field=field, ascending=not self.ascending)
        return TableSort(field=field, ascending=True)

    def apply(self, items: Iterable[Item]) -> list[Item]:
        """
        Sort items stably. Ties keep insertion order; items missing the
        field (no assignee, sprint or progress) always sort last.
        """
        key = _SORT_KEYS[self.field]
        present: list[Item] = []
        missing: list[Item] = []
        for item in items:
            (missing if key(item) is None else present).append(item)
        # sorted() keeps ties in insertion order even with reverse=True
        present = sorted(present, key=key, reverse=not self.ascending)
        return present + missing


# ===========================================================================
# Projections
# ===========================================================================


def _visible(snapshot: ProjectSnapshot, flt: FilterState | None) -> list[Item]:
    if flt is None or flt.is_empty:
        return list(snapshot.items)
    return [item for item in snapshot.items if flt.matches(item)]


def project_board(snapshot: ProjectSnapshot, flt: FilterState | None = None) -> Projection:
    """
    Group items into Board columns.

    Every column appears, in column order, even with zero items.
    """
    items = _visible(snapshot, flt)
    groups = tuple(
        ProjectionGroup(
            key=column.status.value,
            title=column.name,
            items=tuple(item for item in items if item.status == column.status),
        )
        for column in snapshot.columns
    )
    return Projection(view=ViewKind.BOARD, groups=groups)


def project_table(
    snapshot: ProjectSnapshot,
    flt: FilterState | None = None,
    sort: TableSort | None = None,
) -> Projection:
    """Project all visible items into a single flat table group."""
    items = _visible(snapshot, flt)
    if sort is not None:
        items = sort.apply(items)
    return Projection(
        view=ViewKind.TABLE,
        groups=(ProjectionGroup(key="all", title="All Items", items=tuple(items)),),
    )


def project_roadmap(snapshot: ProjectSnapshot, flt: FilterState | None = None) -> Projection:
    """
    Group items by sprint for the Roadmap.

    Sprints are ordered naturally by name; items with no sprint form the
    trailing "Unassigned" group. Within a sprint, items are ordered by
    updated_at ascending with id as tie-break.
    """
    buckets: dict[str | None, list[Item]] = {}
    for item in _visible(snapshot, flt):
        buckets.setdefault(item.sprint, []).append(item)

    named = sorted((s for s in buckets if s is not None), key=_natural_key)
    order: list[str | None] = [*named, None] if None in buckets else named

    groups = tuple(
        ProjectionGroup(
            key=sprint if sprint is not None else "",
            title=sprint if sprint is not None else UNASSIGNED_SPRINT,
            items=tuple(sorted(buckets[sprint], key=lambda i: (i.updated_at, i.id))),
        )
        for sprint in order
    )
    return Projection(view=ViewKind.ROADMAP, groups=groups)


def project(
    snapshot: ProjectSnapshot,
    view: ViewKind,
    flt: FilterState | None = None,
    sort: TableSort | None = None,
) -> Projection:
    """Project the snapshot for the given view."""
    match view:
        case ViewKind.BOARD:
            return project_board(snapshot, flt)
        case ViewKind.TABLE:
            return project_table(snapshot, flt, sort)
        case ViewKind.ROADMAP:
            return project_roadmap(snapshot, flt)
    raise ValueError(f"Unknown view: {view!r}")
