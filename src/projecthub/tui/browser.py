"""
Interactive board browser.

Reads one key at a time, maps it through the keymap to a ViewState event,
and redraws. Four input modes exist:
- normal: navigation and view switching
- filter: typing a query after '/', applied on enter
- sort: the key after 's' picks the table column to sort by
- detail: a read-only panel for the focused item, closed with esc or q
"""

import logging
from collections.abc import Callable

import click
from rich.console import Console
from rich.live import Live

from projecthub.core.board.state import ApplyFilter, ClearFilter, SortTable, ViewState
from projecthub.core.config.models import KeyAction
from projecthub.tui.keymap import SORT_KEYS, Keymap, event_for, key_name
from projecthub.tui.renderer import BoardRenderer

logger = logging.getLogger(__name__)

MODE_NORMAL = "normal"
MODE_FILTER = "filter"
MODE_SORT = "sort"
MODE_DETAIL = "detail"


class BoardBrowser:
    """
    Drive a ViewState from keyboard input.

    handle_key() holds all input logic and does no I/O, so it can be
    exercised without a terminal.

    Example:
        >>> browser = BoardBrowser(ViewState(sample_snapshot()), project_name="Demo")
        >>> browser.handle_key("l")
        True
        >>> browser.state.cursor
        GroupedCursor(group=1, offset=0)
    """

    def __init__(
        self,
        state: ViewState,
        project_name: str = "Project",
        keymap: Keymap | None = None,
        renderer: BoardRenderer | None = None,
        read_key: Callable[[], str] | None = None,
    ):
        self.state = state
        self.project_name = project_name
        self.keymap = keymap or Keymap()
        self.renderer = renderer or BoardRenderer(keymap=self.keymap)
        self.read_key = read_key or click.getchar
        self.mode = MODE_NORMAL
        self.buffer = ""

    @property
    def console(self) -> Console:
        return self.renderer.console

    def handle_key(self, raw: str) -> bool:
        """
        Process one key press.

        Args:
            raw: Raw input as returned by click.getchar()

        Returns:
            False when the browser should exit, True otherwise
        """
        key = key_name(raw)
        if self.mode == MODE_FILTER:
            self._handle_filter_key(key, raw)
            return True
        if self.mode == MODE_SORT:
            self._handle_sort_key(key)
            return True
        if self.mode == MODE_DETAIL:
            if key in ("esc", "q"):
                self.mode = MODE_NORMAL
            return key != "ctrl+c"

        action = self.keymap.action_for(key)
        if action is None:
            logger.debug(f"Unbound key: {key!r}")
            return True

        match action:
            case KeyAction.QUIT:
                return False
            case KeyAction.FILTER:
                self.mode = MODE_FILTER
                self.buffer = self.state.frame.filter.query
            case KeyAction.CLEAR_FILTER:
                self.state.dispatch(ClearFilter())
            case KeyAction.SORT:
                self.mode = MODE_SORT
            case KeyAction.DETAIL:
                self.mode = MODE_DETAIL
            case _:
                event = event_for(action)
                if event is not None:
                    self.state.dispatch(event)
        return True

    def _handle_filter_key(self, key: str, raw: str) -> None:
        if key == "enter":
            self.state.dispatch(ApplyFilter(self.buffer))
            self.mode = MODE_NORMAL
        elif key == "esc":
            self.state.dispatch(ClearFilter())
            self.buffer = ""
            self.mode = MODE_NORMAL
        elif key == "backspace":
            self.buffer = self.buffer[:-1]
        elif key == "ctrl+c":
            self.buffer = ""
            self.mode = MODE_NORMAL
        elif len(raw) == 1 and raw.isprintable():
            self.buffer += raw

    def _handle_sort_key(self, key: str) -> None:
        field = SORT_KEYS.get(key)
        if field is not None:
            self.state.dispatch(SortTable(field))
        self.mode = MODE_NORMAL

    def render(self):
        """Render the current frame with the browser's mode and prompt."""
        return self.renderer.render(
            self.state.frame,
            project_name=self.project_name,
            mode=self.mode,
            prompt=self.buffer if self.mode == MODE_FILTER else None,
        )

    def run(self) -> None:
        """Run the key loop until quit. Blocks."""
        with Live(
            self.render(),
            console=self.console,
            screen=True,
            auto_refresh=False,
        ) as live:
            while True:
                try:
                    raw = self.read_key()
                except (KeyboardInterrupt, EOFError):
                    break
                if not self.handle_key(raw):
                    break
                live.update(self.render(), refresh=True)
