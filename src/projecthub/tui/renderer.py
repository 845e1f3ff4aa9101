"""
Rich-based renderer for the project board.

Turns a ViewFrame into a Rich renderable:
- Header: project name and view tabs, with the active view highlighted
- Body: Board columns of cards, the item Table, or the sprint Roadmap
- Footer: input mode and key hints

In detail mode the body is replaced by a panel with every field of the
focused item.
"""

from rich.columns import Columns
from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from projecthub.core.board.models import Item, Priority, ViewKind
from projecthub.core.board.projector import Projection, SortField, progress_bar
from projecthub.core.board.state import ViewFrame
from projecthub.core.config.models import DisplayConfig, KeyAction
from projecthub.tui.keymap import Keymap

VIEW_KEYS = {ViewKind.BOARD: "1", ViewKind.TABLE: "2", ViewKind.ROADMAP: "3"}

TABLE_COLUMNS: list[tuple[str, SortField]] = [
    ("ID", SortField.ID),
    ("Title", SortField.TITLE),
    ("Status", SortField.STATUS),
    ("Assignee", SortField.ASSIGNEE),
    ("Priority", SortField.PRIORITY),
    ("Updated", SortField.UPDATED),
]

SELECTED_STYLE = "bold yellow"


class BoardRenderer:
    """
    Render frames of the project board using Rich.

    Example:
        >>> state = ViewState(sample_snapshot())
        >>> renderer = BoardRenderer()
        >>> renderer.console.print(renderer.render(state.frame, project_name="Web App v2.0"))
    """

    def __init__(
        self,
        console: Console | None = None,
        display: DisplayConfig | None = None,
        keymap: Keymap | None = None,
    ):
        """
        Initialize the renderer.

        Args:
            console: Rich console for rendering. If None, creates a new one.
            display: Display preferences (card width, labels)
            keymap: Key bindings shown in the footer
        """
        self.console = console or Console()
        self.display = display or DisplayConfig()
        self.keymap = keymap or Keymap()

    def render(
        self,
        frame: ViewFrame,
        project_name: str = "Project",
        mode: str = "normal",
        prompt: str | None = None,
    ) -> RenderableType:
        """
        Render the full screen for a frame.

        Args:
            frame: Frame to display
            project_name: Name shown in the header
            mode: Input mode shown in the footer (normal, filter, sort, detail)
            prompt: Text being typed in filter mode

        Returns:
            Rich renderable with header, body and footer
        """
        if mode == "detail":
            body = self.render_detail(frame.selected_item)
        else:
            body = self.render_body(frame)
        return Group(
            self._render_header(frame, project_name),
            body,
            self._render_footer(mode, prompt),
        )

    def render_body(self, frame: ViewFrame) -> RenderableType:
        """Render only the active view."""
        if frame.projection.is_empty:
            return self._render_empty(frame)
        match frame.active_view:
            case ViewKind.BOARD:
                return self._render_board(frame)
            case ViewKind.TABLE:
                return self._render_table(frame)
            case ViewKind.ROADMAP:
                return self._render_roadmap(frame)
        raise ValueError(f"Unknown view: {frame.active_view!r}")

    def _render_header(self, frame: ViewFrame, project_name: str) -> Panel:
        """Render the header with project name, view tabs and filter badge."""
        left = Text()
        left.append("█ Project Hub", style="bold green")
        left.append("  |  ", style="dim")
        left.append(f"Project: {project_name}", style="blue")

        tabs = Text()
        for view in ViewKind:
            style = "bold yellow" if view is frame.active_view else "dim"
            tabs.append(f"[{VIEW_KEYS[view]}:{view.label}]", style=style)
            tabs.append(" ")

        grid = Table.grid(expand=True)
        grid.add_column()
        grid.add_column(justify="right")
        grid.add_row(left, tabs)

        if not frame.filter.is_empty:
            badge = Text()
            badge.append(" filter:on ", style="bold white on magenta")
            badge.append(f" {frame.filter.query}", style="cyan")
            grid.add_row(badge, Text(f"{frame.projection.total} match(es)", style="dim"))

        return Panel(grid, border_style="green", padding=(0, 1))

    def _render_footer(self, mode: str, prompt: str | None) -> Text:
        """Render the mode indicator and key hints."""
        footer = Text()
        footer.append(f"{mode.upper()} MODE", style="bold green")
        footer.append("  ")
        if mode == "filter":
            footer.append(f"/{prompt or ''}", style="bold cyan")
            footer.append("▏", style="cyan")
            footer.append("  enter:apply esc:clear", style="dim")
            return footer
        if mode == "sort":
            footer.append(
                "i:id t:title s:status a:assignee p:priority u:updated r:sprint c:progress "
                "esc:cancel",
                style="dim",
            )
            return footer
        if mode == "detail":
            footer.append("esc/q:close", style="dim")
            return footer

        hints = [
            (KeyAction.MOVE_DOWN, "down"),
            (KeyAction.MOVE_UP, "up"),
            (KeyAction.MOVE_LEFT, "left"),
            (KeyAction.MOVE_RIGHT, "right"),
            (KeyAction.FILTER, "filter"),
            (KeyAction.SORT, "sort"),
            (KeyAction.DETAIL, "details"),
            (KeyAction.QUIT, "quit"),
        ]
        footer.append(
            "  ".join(f"{self.keymap.hint(action)}:{label}" for action, label in hints),
            style="dim",
        )
        footer.append("  1-3:switch view", style="dim")
        return footer

    def _render_empty(self, frame: ViewFrame) -> Panel:
        message = "No items match the filter" if not frame.filter.is_empty else "No items"
        return Panel(
            Text(message, style="dim italic", justify="center"),
            title=f"[bold]{frame.active_view.label}[/bold]",
            border_style="blue",
            padding=(1, 2),
        )

    # ------------------------------------------------------------------
    # Item detail
    # ------------------------------------------------------------------

    def render_detail(self, item: Item | None) -> Panel:
        """
        Render every field of one item in a read-only panel.

        Args:
            item: Focused item, or None when nothing is selected

        Returns:
            Panel with the item's fields, or an empty-state panel
        """
        if item is None:
            return Panel(
                Text("No item selected", style="dim italic", justify="center"),
                title="[bold]Details[/bold]",
                border_style="blue",
                padding=(1, 2),
            )

        grid = Table.grid(padding=(0, 2))
        grid.add_column(style="grey50", no_wrap=True)
        grid.add_column()
        grid.add_row("ID", Text(item.id, style="green"))
        grid.add_row("Status", Text(item.status.label, style="cyan"))
        grid.add_row("Assignee", Text(item.assignee or "-", style="magenta"))
        grid.add_row(
            "Priority", Text(item.priority.label, style=self._priority_style(item.priority))
        )
        grid.add_row("Updated", Text(item.updated_at.isoformat()))
        grid.add_row("Sprint", Text(item.sprint or "Unassigned"))
        progress = Text(progress_bar(item.progress_percent), style="green")
        progress.append(f" {self._percent_label(item.progress_percent)}", style="yellow")
        grid.add_row("Progress", progress)
        grid.add_row("Labels", Text(", ".join(item.labels) or "-", style="cyan"))

        return Panel(
            grid,
            title=Text(item.title, style="bold blue"),
            title_align="left",
            border_style="grey50",
            padding=(1, 2),
        )

    # ------------------------------------------------------------------
    # Board
    # ------------------------------------------------------------------

    def _render_board(self, frame: ViewFrame) -> Columns:
        panels = []
        for group_index, group in enumerate(frame.projection.groups):
            cards: list[RenderableType] = [
                self._render_card(item, frame.is_selected(group_index, offset))
                for offset, item in enumerate(group.items)
            ]
            body: RenderableType = (
                Group(*cards) if cards else Text("(empty)", style="dim italic")
            )
            panels.append(
                Panel(
                    body,
                    title=self._group_title(group.title, group.count, "bold blue"),
                    width=self.display.card_width + 4,
                    border_style="grey50",
                )
            )
        return Columns(panels)

    @staticmethod
    def _group_title(title: str, count: int, style: str) -> Text:
        # Column titles and sprint names come from snapshot files: never markup
        return Text.assemble((title, style), f" ({count})")

    def _render_card(self, item: Item, selected: bool) -> Panel:
        content = Text()
        content.append(f"{item.id}\n", style="green")
        content.append(item.title, style="bold" if selected else "")
        meta = Text()
        if item.assignee:
            meta.append(item.assignee, style="magenta")
        if self.display.show_labels:
            for label in item.labels:
                meta.append(f" [{label}]", style="cyan")
        if meta:
            content.append("\n")
            content.append_text(meta)
        return Panel(
            content,
            border_style=SELECTED_STYLE if selected else "grey37",
            width=self.display.card_width,
        )

    # ------------------------------------------------------------------
    # Table
    # ------------------------------------------------------------------

    def _render_table(self, frame: ViewFrame) -> Table:
        table = Table(expand=True, header_style="bold blue", border_style="grey37")
        for title, field in TABLE_COLUMNS:
            if frame.sort is not None and frame.sort.field is field:
                title = f"{title} {'↑' if frame.sort.ascending else '↓'}"
            table.add_column(title, no_wrap=field is not SortField.TITLE)

        for row, item in enumerate(frame.projection.groups[0].items):
            table.add_row(
                Text(item.id, style="green"),
                Text(item.title),
                Text(item.status.label, style="cyan"),
                Text(item.assignee or "-", style="magenta"),
                Text(item.priority.label, style=self._priority_style(item.priority)),
                Text(item.updated_at.isoformat(), style="dim"),
                style="bold yellow on grey23" if frame.is_selected(0, row) else None,
            )
        return table

    @staticmethod
    def _priority_style(priority: Priority) -> str:
        return {
            Priority.HIGH: "red",
            Priority.MEDIUM: "yellow",
            Priority.LOW: "green",
        }.get(priority, "")

    # ------------------------------------------------------------------
    # Roadmap
    # ------------------------------------------------------------------

    def _render_roadmap(self, frame: ViewFrame) -> Group:
        projection = frame.projection
        sections: list[RenderableType] = [self._render_timeline(projection)]

        for group_index, group in enumerate(projection.groups):
            rows = Table.grid(padding=(0, 2), expand=True)
            rows.add_column(ratio=1)
            rows.add_column(no_wrap=True)
            rows.add_column(justify="right", no_wrap=True)
            for offset, item in enumerate(group.items):
                selected = frame.is_selected(group_index, offset)
                title = Text(f"{item.title} {item.id}", style=SELECTED_STYLE if selected else "")
                if selected:
                    title = Text("▶ ") + title
                rows.add_row(
                    title,
                    Text(progress_bar(item.progress_percent), style="green"),
                    Text(self._percent_label(item.progress_percent), style="yellow"),
                )
            sections.append(
                Panel(
                    rows,
                    title=self._group_title(group.title, group.count, "bold cyan"),
                    title_align="left",
                    border_style="grey37",
                )
            )

        sections.append(self._render_sprint_overview(projection))
        return Group(*sections)

    @staticmethod
    def _percent_label(percent: int | None) -> str:
        return "n/a" if percent is None else f"{percent}%"

    def _render_timeline(self, projection: Projection) -> Text:
        sprints = [g for g in projection.groups if g.key]
        text = Text()
        if sprints:
            span = sprints[0].title if len(sprints) == 1 else f"{sprints[0].title} - {sprints[-1].title}"
            text.append(f"Timeline: {span}", style="bold blue")
            dates = [item.updated_at for g in sprints for item in g.items]
            text.append(f"  ({min(dates).isoformat()} → {max(dates).isoformat()})", style="dim")
        else:
            text.append("Timeline: no sprints scheduled", style="bold blue")
        return text

    def _render_sprint_overview(self, projection: Projection) -> Panel:
        grid = Table.grid(padding=(0, 2))
        grid.add_column(style="cyan", no_wrap=True)
        grid.add_column(style="green", no_wrap=True)
        grid.add_column(style="yellow", justify="right")
        for group in projection.groups:
            if not group.key:
                continue
            percent = group.progress_percent
            grid.add_row(
                Text(f"{group.title}:"), progress_bar(percent), self._percent_label(percent)
            )
        return Panel(
            grid,
            title="[dim]Sprint Progress Overview[/dim]",
            title_align="left",
            border_style="grey37",
        )
