"""
Key bindings for the interactive browser.

Translates raw terminal input into key names ("j", "up", "ctrl+c") and key
names into actions, and actions into ViewState events. Only this module
knows about keys; the state machine only sees events.
"""

from __future__ import annotations

from collections.abc import Mapping

from projecthub.core.board.models import ViewKind
from projecthub.core.board.projector import SortField
from projecthub.core.board.state import Direction, Event, MoveCursor, SwitchView
from projecthub.core.config.models import KeyAction, KeymapConfig

DEFAULT_BINDINGS: dict[str, KeyAction] = {
    "1": KeyAction.VIEW_BOARD,
    "b": KeyAction.VIEW_BOARD,
    "2": KeyAction.VIEW_TABLE,
    "t": KeyAction.VIEW_TABLE,
    "3": KeyAction.VIEW_ROADMAP,
    "r": KeyAction.VIEW_ROADMAP,
    "k": KeyAction.MOVE_UP,
    "up": KeyAction.MOVE_UP,
    "j": KeyAction.MOVE_DOWN,
    "down": KeyAction.MOVE_DOWN,
    "h": KeyAction.MOVE_LEFT,
    "left": KeyAction.MOVE_LEFT,
    "l": KeyAction.MOVE_RIGHT,
    "right": KeyAction.MOVE_RIGHT,
    "g": KeyAction.MOVE_TOP,
    "G": KeyAction.MOVE_BOTTOM,
    "/": KeyAction.FILTER,
    "esc": KeyAction.CLEAR_FILTER,
    "s": KeyAction.SORT,
    "o": KeyAction.DETAIL,
    "q": KeyAction.QUIT,
    "ctrl+c": KeyAction.QUIT,
}

# Second key after SORT picks the table column
SORT_KEYS: dict[str, SortField] = {
    "i": SortField.ID,
    "t": SortField.TITLE,
    "s": SortField.STATUS,
    "a": SortField.ASSIGNEE,
    "p": SortField.PRIORITY,
    "u": SortField.UPDATED,
    "r": SortField.SPRINT,
    "c": SortField.PROGRESS,
}

_ACTION_EVENTS: dict[KeyAction, Event] = {
    KeyAction.VIEW_BOARD: SwitchView(ViewKind.BOARD),
    KeyAction.VIEW_TABLE: SwitchView(ViewKind.TABLE),
    KeyAction.VIEW_ROADMAP: SwitchView(ViewKind.ROADMAP),
    KeyAction.MOVE_UP: MoveCursor(Direction.UP),
    KeyAction.MOVE_DOWN: MoveCursor(Direction.DOWN),
    KeyAction.MOVE_LEFT: MoveCursor(Direction.LEFT),
    KeyAction.MOVE_RIGHT: MoveCursor(Direction.RIGHT),
    KeyAction.MOVE_TOP: MoveCursor(Direction.TOP),
    KeyAction.MOVE_BOTTOM: MoveCursor(Direction.BOTTOM),
}

# Escape sequences from click.getchar(); the \xe0 forms are Windows consoles
_RAW_KEYS: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\xe0H": "up",
    "\xe0P": "down",
    "\xe0M": "right",
    "\xe0K": "left",
    "\x1b": "esc",
    "\x03": "ctrl+c",
    "\r": "enter",
    "\n": "enter",
    "\x7f": "backspace",
    "\x08": "backspace",
}


def key_name(raw: str) -> str:
    """
    Normalize raw terminal input to a key name.

    Example:
        >>> key_name("\\x1b[A"), key_name("j"), key_name("\\x03")
        ('up', 'j', 'ctrl+c')
    """
    return _RAW_KEYS.get(raw, raw)


def event_for(action: KeyAction) -> Event | None:
    """Get the ViewState event for an action, or None for modal actions."""
    return _ACTION_EVENTS.get(action)


class Keymap:
    """
    Resolve key names to actions.

    Example:
        >>> keymap = Keymap.from_config(KeymapConfig(bindings={"n": "move_down", "j": "none"}))
        >>> keymap.action_for("n")
        <KeyAction.MOVE_DOWN: 'move_down'>
        >>> keymap.action_for("j") is None
        True
    """

    def __init__(self, bindings: Mapping[str, KeyAction] | None = None):
        self.bindings: dict[str, KeyAction] = dict(
            DEFAULT_BINDINGS if bindings is None else bindings
        )

    @classmethod
    def from_config(cls, config: KeymapConfig) -> Keymap:
        """Apply configured overrides on top of the default bindings."""
        bindings = dict(DEFAULT_BINDINGS)
        for key, action in config.bindings.items():
            if action is None:
                bindings.pop(key, None)
            else:
                bindings[key] = action
        return cls(bindings)

    def action_for(self, key: str) -> KeyAction | None:
        return self.bindings.get(key)

    def keys_for(self, action: KeyAction) -> list[str]:
        """Get all keys bound to an action, in binding order."""
        return [key for key, bound in self.bindings.items() if bound is action]

    def hint(self, action: KeyAction) -> str:
        """Short key label for footers (e.g., 'j/down')."""
        return "/".join(self.keys_for(action)) or "-"
