"""
Snapshot file loader.

Reads a project snapshot from YAML (.yaml/.yml) or JSON (.json). The file
is a mapping validated against the ProjectSnapshot Pydantic model:

```yaml
name: Web App v2.0

columns:          # optional, defaults to all four statuses
  - status: backlog
  - status: in_progress
    title: Doing

items:
  - id: "#123"
    title: User authentication
    status: backlog          # backlog | in_progress | review | done
    assignee: "@tanaka"
    priority: high           # low | medium | high
    updated: 2024-12-01
    sprint: Sprint 1
    progress: 50
    labels: [feature]
```

Structural problems (missing file, bad syntax, unsupported extension, a
document that is not a mapping) raise SnapshotLoadError. Invalid data
raises pydantic.ValidationError unchanged.
"""

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from projecthub.core.board.models import ProjectSnapshot

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}
JSON_SUFFIXES = {".json"}


class SnapshotLoadError(Exception):
    """Raised when a snapshot file cannot be read or parsed."""

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


def _read_document(path: Path) -> Any:
    suffix = path.suffix.lower()
    if suffix not in YAML_SUFFIXES | JSON_SUFFIXES:
        raise SnapshotLoadError(
            path, f"unsupported file type '{suffix or '(none)'}' (expected .yaml, .yml or .json)"
        )

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise SnapshotLoadError(path, "file not found") from None
    except OSError as e:
        raise SnapshotLoadError(path, f"could not read file: {e}") from e

    try:
        if suffix in JSON_SUFFIXES:
            return json.loads(text)
        return yaml.safe_load(text)
    except json.JSONDecodeError as e:
        raise SnapshotLoadError(path, f"invalid JSON: {e}") from e
    except yaml.YAMLError as e:
        raise SnapshotLoadError(path, f"invalid YAML: {e}") from e


def load_snapshot(path: Path) -> ProjectSnapshot:
    """
    Load and validate a snapshot file.

    Args:
        path: Path to a .yaml, .yml or .json file

    Returns:
        Validated ProjectSnapshot

    Raises:
        SnapshotLoadError: If the file cannot be read or is not a mapping
        ValidationError: If the data violates snapshot invariants
    """
    path = Path(path)
    data = _read_document(path)
    if not isinstance(data, dict):
        raise SnapshotLoadError(
            path, f"expected a mapping at top level, got {type(data).__name__}"
        )

    snapshot = ProjectSnapshot.model_validate(data)
    logger.info(f"Loaded snapshot '{snapshot.name}' with {len(snapshot.items)} item(s) from {path}")
    return snapshot
