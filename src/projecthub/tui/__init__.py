"""
Terminal UI for project-hub using Rich.

Provides the frame renderer, key bindings, and the interactive browser.
"""

from projecthub.tui.browser import BoardBrowser
from projecthub.tui.keymap import Keymap
from projecthub.tui.renderer import BoardRenderer

__all__ = ["BoardBrowser", "BoardRenderer", "Keymap"]
