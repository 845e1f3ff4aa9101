"""
Built-in sample project.

Used when no snapshot file is configured, and as a reference for the
snapshot file format (see loader.py).
"""

from datetime import date

from projecthub.core.board.models import Item, Priority, ProjectSnapshot, Status


def sample_snapshot() -> ProjectSnapshot:
    """
    Get the sample "Web App v2.0" project.

    Board columns hold 3 / 2 / 1 / 2 items (Backlog, In Progress, Review,
    Done). Four items are scheduled across two sprints.

    Example:
        >>> snapshot = sample_snapshot()
        >>> len(snapshot.items)
        8
    """
    return ProjectSnapshot(
        name="Web App v2.0",
        items=(
            Item(
                id="#123",
                title="User authentication",
                status=Status.BACKLOG,
                assignee="@tanaka",
                priority=Priority.HIGH,
                updated_at=date(2024, 12, 1),
                sprint="Sprint 1",
                progress_percent=50,
                labels=("feature",),
            ),
            Item(
                id="#124",
                title="API integration",
                status=Status.BACKLOG,
                assignee="@sato",
                priority=Priority.MEDIUM,
                updated_at=date(2024, 12, 2),
                sprint="Sprint 2",
                progress_percent=0,
                labels=("backend",),
            ),
            Item(
                id="#125",
                title="Update documentation",
                status=Status.BACKLOG,
                priority=Priority.LOW,
                updated_at=date(2024, 12, 3),
                labels=("docs",),
            ),
            Item(
                id="#126",
                title="TUI design implementation",
                status=Status.IN_PROGRESS,
                assignee="@tanaka",
                priority=Priority.HIGH,
                updated_at=date(2024, 12, 5),
                sprint="Sprint 1",
                progress_percent=70,
                labels=("ui",),
            ),
            Item(
                id="#127",
                title="Keybinding configuration",
                status=Status.IN_PROGRESS,
                assignee="@yamada",
                priority=Priority.LOW,
                updated_at=date(2024, 12, 6),
                labels=("ui",),
            ),
            Item(
                id="#128",
                title="Add test code",
                status=Status.REVIEW,
                assignee="@sato",
                priority=Priority.MEDIUM,
                updated_at=date(2024, 12, 4),
                sprint="Sprint 2",
                progress_percent=40,
                labels=("bug",),
            ),
            Item(
                id="#129",
                title="Initial setup",
                status=Status.DONE,
                assignee="@yamada",
                priority=Priority.MEDIUM,
                updated_at=date(2024, 11, 28),
                progress_percent=100,
            ),
            Item(
                id="#130",
                title="Write README",
                status=Status.DONE,
                assignee="@tanaka",
                priority=Priority.LOW,
                updated_at=date(2024, 11, 29),
                progress_percent=100,
                labels=("docs",),
            ),
        ),
    )
