"""
project-hub - Terminal Project Board

A CLI tool that shows one project snapshot as a Board, a Table and a Roadmap.
"""

__version__ = "0.1.0"

# Re-export core models for convenience
from projecthub.core.board.models import Item, Priority, ProjectSnapshot, Status, ViewKind
from projecthub.core.board.state import ViewState
from projecthub.core.config.models import HubConfig

__all__ = [
    "HubConfig",
    "Item",
    "Priority",
    "ProjectSnapshot",
    "Status",
    "ViewKind",
    "ViewState",
    "__version__",
]
