"""Layered .env loading for project-hub settings.

The settings read from the environment are PROJECT_HUB_DATA (snapshot file),
PROJECT_HUB_DEFAULT_VIEW (board, table or roadmap) and PROJECT_HUB_COLOR,
plus the standard NO_COLOR. They can be kept in .env files instead of the
shell profile:
- ~/.config/project-hub/.env applies to every project
- .env and .env.local in the working directory apply to one project and
  win over the user file

A variable already exported in the shell is never replaced.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from dotenv import dotenv_values

from projecthub.core.config.loader import APP_NAME, get_xdg_config_home


def _read_env(path: Path) -> dict[str, str]:
    """Read one .env file, skipping keys declared without a value."""
    if not path.exists():
        return {}
    return {str(k): str(v) for k, v in dotenv_values(path).items() if k and v is not None}


def user_env_path() -> Path:
    return get_xdg_config_home() / APP_NAME / ".env"


def load_layered_env(
    *,
    project_dir: Path | None = None,
    user_env_paths: Iterable[Path] | None = None,
    project_env_paths: Iterable[Path] | None = None,
) -> set[str]:
    """Export variables from the user and project .env files.

    Args:
        project_dir: Directory holding the project .env files (defaults to cwd)
        user_env_paths: Override the user .env location(s)
        project_env_paths: Override the project .env location(s)

    Returns:
        Names of the variables that were set from .env files
    """
    base = project_dir or Path.cwd()
    if user_env_paths is None:
        user_env_paths = [user_env_path()]
    if project_env_paths is None:
        project_env_paths = [base / ".env", base / ".env.local"]

    # Snapshot before loading: only these names are protected from .env values
    exported = set(os.environ)
    loaded: set[str] = set()
    for path in [*user_env_paths, *project_env_paths]:
        for key, value in _read_env(Path(path)).items():
            if key in exported:
                continue
            os.environ[key] = value
            loaded.add(key)
    return loaded
