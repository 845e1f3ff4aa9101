"""
Configuration data models for project-hub.

These models define the structure of .project-hub.json and
~/.config/project-hub/config.json, with validation via Pydantic.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from projecthub.core.board.models import ViewKind


class KeyAction(str, Enum):
    """Actions a key can be bound to in the interactive browser."""

    VIEW_BOARD = "view_board"
    VIEW_TABLE = "view_table"
    VIEW_ROADMAP = "view_roadmap"
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    MOVE_TOP = "move_top"
    MOVE_BOTTOM = "move_bottom"
    FILTER = "filter"
    CLEAR_FILTER = "clear_filter"
    SORT = "sort"
    DETAIL = "detail"
    QUIT = "quit"


class KeymapConfig(BaseModel):
    """
    Key binding overrides.

    Maps a key name (e.g. "j", "down", "ctrl+c") to an action. Entries are
    merged over the default bindings; binding a key to "none" unbinds it.
    """

    bindings: dict[str, KeyAction | None] = Field(
        default_factory=dict,
        description="Key name -> action overrides",
    )

    @field_validator("bindings", mode="before")
    @classmethod
    def normalize_unbind(cls, v: object) -> object:
        """Accept "none" (any case) as an explicit unbind."""
        if isinstance(v, dict):
            return {
                str(key): None if isinstance(action, str) and action.lower() == "none" else action
                for key, action in v.items()
            }
        return v


class DisplayConfig(BaseModel):
    """Rendering preferences."""

    color: bool = Field(default=True, description="Use colors in terminal output")
    show_labels: bool = Field(default=True, description="Show label chips on Board cards")
    card_width: int = Field(
        default=28, ge=12, le=80, description="Width of a Board column in characters"
    )


class HubConfig(BaseModel):
    """
    Main project-hub configuration model.

    Example:
        >>> config = HubConfig(default_view="table")
        >>> config.default_view
        <ViewKind.TABLE: 'table'>
    """

    default_view: ViewKind = Field(
        default=ViewKind.BOARD, description="View active when the browser starts"
    )
    data_path: str | None = Field(
        default=None,
        description="Snapshot file (YAML or JSON); the built-in sample is used if unset",
    )
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    keymap: KeymapConfig = Field(default_factory=KeymapConfig)

    model_config = ConfigDict(
        extra="ignore",
    )
