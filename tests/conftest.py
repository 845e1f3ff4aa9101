"""
Pytest configuration and shared fixtures.

Provides sample snapshots, snapshot files on disk, and isolation of the
config/env layers so tests never read the developer's real settings.
"""

import json
from datetime import date
from pathlib import Path
from typing import Any

import pytest

from projecthub.core.board import (
    Item,
    Priority,
    ProjectSnapshot,
    Status,
    sample_snapshot,
)
from projecthub.core.config import clear_cache

ENV_VARS = (
    "PROJECT_HUB_DEFAULT_VIEW",
    "PROJECT_HUB_DATA",
    "PROJECT_HUB_COLOR",
    "NO_COLOR",
)


# ==============================================================================
# Isolation
# ==============================================================================


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """
    Point config and .env lookups at an empty temp directory.

    Clears the config cache before and after every test.
    """
    home = tmp_path / "xdg"
    home.mkdir()
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home))
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(workdir)
    clear_cache()
    yield
    clear_cache()


# ==============================================================================
# Snapshot Fixtures
# ==============================================================================


@pytest.fixture
def sample() -> ProjectSnapshot:
    """The built-in 8-item project (Board columns hold 3/2/1/2 items)."""
    return sample_snapshot()


@pytest.fixture
def five_item_snapshot() -> ProjectSnapshot:
    """
    The five items of the Table example rows.

    Backlog: #123, #124 / In Progress: #126, #127 / Review: #128 / Done: empty
    """
    keep = {"#123", "#124", "#126", "#127", "#128"}
    items = [item for item in sample_snapshot().items if item.id in keep]
    return ProjectSnapshot(name="Web App v2.0", items=tuple(items))


@pytest.fixture
def empty_snapshot() -> ProjectSnapshot:
    """A snapshot with every column present and no items."""
    return ProjectSnapshot(name="Empty")


def make_item(item_id: str, status: Status = Status.BACKLOG, **kwargs: Any) -> Item:
    """Build an Item with sensible defaults for tests."""
    defaults: dict[str, Any] = {
        "title": f"Item {item_id}",
        "priority": Priority.MEDIUM,
        "updated_at": date(2024, 12, 1),
    }
    defaults.update(kwargs)
    return Item(id=item_id, status=status, **defaults)


@pytest.fixture
def item_factory():
    """Provide make_item as a fixture."""
    return make_item


# ==============================================================================
# File Fixtures
# ==============================================================================


def sample_document() -> dict[str, Any]:
    """A small snapshot in the on-disk mapping format."""
    return {
        "name": "File Project",
        "items": [
            {
                "id": "#1",
                "title": "Set up CI",
                "status": "done",
                "assignee": "@sato",
                "priority": "high",
                "updated": "2024-12-01",
                "sprint": "Sprint 1",
                "progress": 100,
                "labels": ["infra"],
            },
            {
                "id": "#2",
                "title": "Login form",
                "status": "in_progress",
                "priority": "medium",
                "updated": "2024-12-03",
                "sprint": "Sprint 1",
                "progress": 45,
            },
            {
                "id": "#3",
                "title": "Password reset",
                "status": "backlog",
                "priority": "low",
                "updated": "2024-12-02",
            },
        ],
    }


@pytest.fixture
def snapshot_json(tmp_path) -> Path:
    """Write sample_document() as JSON and return its path."""
    path = tmp_path / "board.json"
    path.write_text(json.dumps(sample_document(), indent=2))
    return path


@pytest.fixture
def snapshot_yaml(tmp_path) -> Path:
    """Write a YAML snapshot equivalent to sample_document()."""
    path = tmp_path / "board.yaml"
    path.write_text(
        """\
name: File Project
items:
  - id: "#1"
    title: Set up CI
    status: done
    assignee: "@sato"
    priority: high
    updated: 2024-12-01
    sprint: Sprint 1
    progress: 100
    labels: [infra]
  - id: "#2"
    title: Login form
    status: in_progress
    priority: medium
    updated: 2024-12-03
    sprint: Sprint 1
    progress: 45
  - id: "#3"
    title: Password reset
    status: backlog
    priority: low
    updated: 2024-12-02
"""
    )
    return path
