"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from projecthub.core.board.models import ViewKind

from .models import HubConfig

logger = logging.getLogger(__name__)

APP_NAME = "project-hub"
PROJECT_CONFIG_NAME = ".project-hub.json"

# Global cache to avoid reloading config multiple times per session
_config_cache: HubConfig | None = None


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_path() -> Path:
    """
    Get path to user configuration file.

    Returns:
        Path to ~/.config/project-hub/config.json (or XDG equivalent)
    """
    return get_xdg_config_home() / APP_NAME / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """
    Get path to project configuration file.

    Args:
        cwd: Working directory to search from (defaults to current directory)

    Returns:
        Path to .project-hub.json in the given directory
    """
    if cwd is None:
        cwd = Path.cwd()
    return cwd / PROJECT_CONFIG_NAME


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`.
    Nested dicts are merged, not replaced.

    Example:
        >>> deep_merge({"display": {"color": True, "card_width": 28}}, {"display": {"color": False}})
        {'display': {'color': False, 'card_width': 28}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON file, returning None if it doesn't exist or is invalid.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON as dict, or None if file doesn't exist or can't be parsed
    """
    if not path.exists():
        return None

    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, dict):
            return data
        logger.warning(f"Ignoring config at {path}: expected an object, got {type(data).__name__}")
        return None
    except (json.JSONDecodeError, OSError) as e:
        # config system should be resilient to a broken file
        logger.warning(f"Failed to parse config at {path}: {e}")
        return None


def _env_flag(value: str) -> bool:
    return value.lower() not in ("false", "0", "no", "off", "")


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Supported env vars:
        PROJECT_HUB_DEFAULT_VIEW - overrides default_view (board/table/roadmap)
        PROJECT_HUB_DATA - overrides data_path
        PROJECT_HUB_COLOR - overrides display.color
        NO_COLOR - when set, disables display.color

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = config_dict.copy()

    if view_str := os.environ.get("PROJECT_HUB_DEFAULT_VIEW"):
        valid = {v.value for v in ViewKind}
        if view_str.lower() in valid:
            result["default_view"] = view_str.lower()
        else:
            logger.warning(
                f"Invalid PROJECT_HUB_DEFAULT_VIEW value '{view_str}' "
                f"(expected one of: {', '.join(sorted(valid))}), ignoring"
            )

    if data_str := os.environ.get("PROJECT_HUB_DATA"):
        result["data_path"] = data_str

    if (color_str := os.environ.get("PROJECT_HUB_COLOR")) is not None:
        result["display"] = {**result.get("display", {}), "color": _env_flag(color_str)}

    if os.environ.get("NO_COLOR") is not None:
        result["display"] = {**result.get("display", {}), "color": False}

    return result


def get_default_config() -> dict[str, Any]:
    """
    Get hardcoded default configuration.

    Returns:
        Dictionary with default configuration values
    """
    return {
        "default_view": ViewKind.BOARD.value,
        "display": {"color": True, "show_labels": True, "card_width": 28},
        "keymap": {"bindings": {}},
    }


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> HubConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (PROJECT_HUB_*)
        2. Project config (.project-hub.json)
        3. User config (~/.config/project-hub/config.json)
        4. Hardcoded defaults

    A relative data_path from the project config is resolved against the
    project directory.

    Args:
        project_dir: Project directory to load .project-hub.json from (defaults to cwd)
        use_cache: If True, return cached config from previous load

    Returns:
        Validated HubConfig instance

    Raises:
        ValidationError: If the merged config fails Pydantic validation
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    if project_dir is None:
        project_dir = Path.cwd()

    merged = get_default_config()

    if user_config := load_json_file(get_user_config_path()):
        merged = deep_merge(merged, user_config)

    project_config_path = get_project_config_path(project_dir)
    if project_config := load_json_file(project_config_path):
        data_path = project_config.get("data_path")
        if isinstance(data_path, str) and not Path(data_path).is_absolute():
            project_config = {**project_config, "data_path": str(project_dir / data_path)}
        merged = deep_merge(merged, project_config)

    merged = apply_env_overrides(merged)

    config = HubConfig(**merged)
    logger.debug(f"Loaded config: {config.model_dump(mode='json')}")

    _config_cache = config
    return config


def clear_cache() -> None:
    """
    Clear the cached configuration.

    Useful for testing or when config files change during execution.
    """
    global _config_cache
    _config_cache = None
