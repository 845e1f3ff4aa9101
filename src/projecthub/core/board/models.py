"""
Data models for the project board.

These models describe the immutable snapshot every view is derived from:
- Item: one trackable unit of work
- ColumnDefinition: a Board column bound to a single status
- ProjectSnapshot: the validated, read-only dataset for a session
- ViewKind / Cursor: which view is active and what it has selected

Snapshot invariants are enforced at construction. Invalid data raises
pydantic.ValidationError and is never silently coerced.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Status(str, Enum):
    """Workflow status of an item.

    Declaration order is the Board display order.
    """

    BACKLOG = "backlog"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    DONE = "done"

    @property
    def label(self) -> str:
        """Get the display label (e.g., 'In Progress')."""
        return _STATUS_LABELS[self]

    @property
    def order(self) -> int:
        """Get the position of this status in the Board column order."""
        return list(Status).index(self)


_STATUS_LABELS = {
    Status.BACKLOG: "Backlog",
    Status.IN_PROGRESS: "In Progress",
    Status.REVIEW: "Review",
    Status.DONE: "Done",
}


class Priority(str, Enum):
    """Item priority levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def label(self) -> str:
        """Get the display label (e.g., 'High')."""
        return self.value.capitalize()

    @property
    def rank(self) -> int:
        """Get numeric rank for sorting (higher = more urgent)."""
        return {Priority.LOW: 1, Priority.MEDIUM: 2, Priority.HIGH: 3}[self]


class ViewKind(str, Enum):
    """The three views of the board. Exactly one is active at a time."""

    BOARD = "board"
    TABLE = "table"
    ROADMAP = "roadmap"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def is_grouped(self) -> bool:
        """Board and Roadmap address items by (group, offset)."""
        return self is not ViewKind.TABLE


class Item(BaseModel):
    """
    A single trackable unit of work.

    Example:
        >>> item = Item(
        ...     id="#126",
        ...     title="TUI design implementation",
        ...     status=Status.IN_PROGRESS,
        ...     assignee="@tanaka",
        ...     priority=Priority.HIGH,
        ...     updated_at=date(2024, 12, 5),
        ...     sprint="Sprint 1",
        ...     progress_percent=70,
        ... )
        >>> item.status.label
        'In Progress'
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1, description="Stable unique identifier (e.g., '#123')")
    title: str = Field(..., min_length=1, description="Display title")
    status: Status = Field(..., description="Workflow status (Board column)")
    assignee: str | None = Field(default=None, description="Assigned user handle")
    priority: Priority = Field(default=Priority.MEDIUM, description="Priority level")
    updated_at: date = Field(..., alias="updated", description="Last update date")
    sprint: str | None = Field(default=None, description="Sprint the item is scheduled in")
    progress_percent: int | None = Field(
        default=None,
        ge=0,
        le=100,
        alias="progress",
        description="Completion percentage shown on the Roadmap",
    )
    labels: tuple[str, ...] = Field(default_factory=tuple, description="Labels/tags")

    @field_validator("sprint", "assignee", mode="before")
    @classmethod
    def blank_to_none(cls, v: object) -> object:
        """Treat empty or whitespace-only strings as unset."""
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("labels", mode="before")
    @classmethod
    def validate_labels(cls, v: object) -> object:
        """Drop blank labels and accept a single comma-separated string."""
        if v is None:
            return ()
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, (list, tuple)):
            return tuple(str(label).strip() for label in v if str(label).strip())
        return v


class ColumnDefinition(BaseModel):
    """A Board column. Membership is implicit: items whose status matches."""

    model_config = ConfigDict(frozen=True)

    status: Status = Field(..., description="Status collected by this column")
    title: str | None = Field(default=None, description="Display title (defaults to label)")

    @property
    def name(self) -> str:
        return self.title or self.status.label


def default_columns() -> tuple[ColumnDefinition, ...]:
    """Get one column per status, in display order."""
    return tuple(ColumnDefinition(status=status) for status in Status)


class ProjectSnapshot(BaseModel):
    """
    The full, immutable dataset for one session.

    Items keep their declared (insertion) order. Columns are always held
    in canonical status order, whatever order they were declared in.

    Raises:
        ValidationError: On duplicate item ids, out-of-range progress,
            unknown status/priority values, duplicate columns, or an item
            whose status has no column.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="Project", description="Project name shown in the header")
    items: tuple[Item, ...] = Field(default_factory=tuple)
    columns: tuple[ColumnDefinition, ...] = Field(default_factory=default_columns)

    @field_validator("columns")
    @classmethod
    def order_columns(cls, v: tuple[ColumnDefinition, ...]) -> tuple[ColumnDefinition, ...]:
        """Reject duplicate column statuses and sort into display order."""
        seen: set[Status] = set()
        for column in v:
            if column.status in seen:
                raise ValueError(f"Duplicate column for status '{column.status.value}'")
            seen.add(column.status)
        return tuple(sorted(v, key=lambda c: c.status.order))

    @model_validator(mode="after")
    def check_items(self) -> ProjectSnapshot:
        """Enforce id uniqueness and column membership for every item."""
        seen: set[str] = set()
        column_statuses = {column.status for column in self.columns}
        for item in self.items:
            if item.id in seen:
                raise ValueError(f"Duplicate item id '{item.id}'")
            seen.add(item.id)
            if item.status not in column_statuses:
                raise ValueError(
                    f"Item '{item.id}' has status '{item.status.value}' with no matching column"
                )
        return self

    def item_by_id(self, item_id: str) -> Item | None:
        """Look up an item by id."""
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def __len__(self) -> int:
        return len(self.items)


# ===========================================================================
# Cursor - tagged position within the active view
# ===========================================================================


@dataclass(frozen=True)
class GroupedCursor:
    """Position within a grouped view (Board columns, Roadmap sprints)."""

    group: int
    offset: int

    def as_pair(self) -> tuple[int, int]:
        return (self.group, self.offset)


@dataclass(frozen=True)
class FlatCursor:
    """Position within the flat Table view."""

    row: int

    def as_pair(self) -> tuple[int, int]:
        return (0, self.row)


# None is the empty cursor: the active projection has no items.
Cursor = GroupedCursor | FlatCursor | None
