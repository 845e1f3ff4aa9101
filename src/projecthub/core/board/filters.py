"""
Filter query parsing and item matching.

A query is a whitespace-separated list of tokens. Prefixed tokens restrict
a single field; anything else is free text matched against id and title:

    label:bug assignee:@sato status:in-progress sprint:"Sprint 1" auth

Within one field any listed value may match (OR); across fields every
restriction must hold (AND). Every free-text token must match.
"""

from __future__ import annotations

import shlex
from dataclasses import dataclass

from projecthub.core.board.models import Item, Priority, Status

# Token prefix -> FilterState field
FILTER_PREFIXES: dict[str, str] = {
    "label": "labels",
    "assignee": "assignees",
    "status": "statuses",
    "sprint": "sprints",
    "iteration": "sprints",
    "priority": "priorities",
}


@dataclass(frozen=True)
class FilterState:
    """Parsed filter query. An empty filter matches every item."""

    query: str = ""
    labels: tuple[str, ...] = ()
    assignees: tuple[str, ...] = ()
    statuses: tuple[Status, ...] = ()
    sprints: tuple[str, ...] = ()
    priorities: tuple[Priority, ...] = ()
    text: tuple[str, ...] = ()
    # status:/priority: values that name no known member
    unknown: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (
            self.labels
            or self.assignees
            or self.statuses
            or self.sprints
            or self.priorities
            or self.text
            or self.unknown
        )

    def matches(self, item: Item) -> bool:
        """Check whether an item satisfies every restriction of the filter."""
        if self.unknown:
            return False
        if self.labels:
            item_labels = {label.lower() for label in item.labels}
            if not any(label.lower() in item_labels for label in self.labels):
                return False
        if self.assignees:
            assignee = _normalize_handle(item.assignee or "")
            if not any(_normalize_handle(a) == assignee for a in self.assignees):
                return False
        if self.statuses and item.status not in self.statuses:
            return False
        if self.sprints:
            sprint = (item.sprint or "").lower()
            if not any(s.lower() == sprint for s in self.sprints):
                return False
        if self.priorities and item.priority not in self.priorities:
            return False
        haystack = f"{item.id} {item.title}".lower()
        return all(token.lower() in haystack for token in self.text)


def _normalize_handle(handle: str) -> str:
    return handle.strip().lstrip("@").lower()


def _normalize_key(value: str) -> str:
    return value.strip().lower().replace("-", "_").replace(" ", "_")


def parse_status(value: str) -> Status | None:
    """Resolve a status by value or label, case-insensitively."""
    key = _normalize_key(value)
    for status in Status:
        if key in (status.value, _normalize_key(status.label), status.label.lower().replace(" ", "")):
            return status
    return None


def parse_priority(value: str) -> Priority | None:
    """Resolve a priority by value, case-insensitively."""
    key = _normalize_key(value)
    for priority in Priority:
        if key == priority.value:
            return priority
    return None


def _split_tokens(query: str) -> list[str]:
    # Quoted values ("sprint:Sprint 1") stay together; unbalanced quotes fall
    # back to plain whitespace splitting.
    try:
        return shlex.split(query)
    except ValueError:
        return query.split()


def parse_filter(query: str) -> FilterState:
    """
    Parse a raw filter query into a FilterState.

    Status and priority tokens that do not name a known value never match
    anything, so a mistyped status yields an empty view rather than an
    unfiltered one.

    Args:
        query: Raw text typed after '/'

    Returns:
        Parsed FilterState (empty if the query is blank)

    Example:
        >>> fs = parse_filter("label:bug assignee:@sato api")
        >>> fs.labels, fs.assignees, fs.text
        (('bug',), ('@sato',), ('api',))
    """
    raw = query.strip()
    if not raw:
        return FilterState()

    fields: dict[str, list] = {name: [] for name in set(FILTER_PREFIXES.values())}
    text: list[str] = []
    unknown: list[str] = []

    for token in _split_tokens(raw):
        prefix, sep, value = token.partition(":")
        field_name = FILTER_PREFIXES.get(prefix.lower()) if sep else None
        if field_name is None or not value:
            text.append(token)
            continue
        if field_name == "statuses":
            status = parse_status(value)
            if status is None:
                unknown.append(token)
            else:
                fields[field_name].append(status)
        elif field_name == "priorities":
            priority = parse_priority(value)
            if priority is None:
                unknown.append(token)
            else:
                fields[field_name].append(priority)
        else:
            fields[field_name].append(value)

    return FilterState(
        query=raw,
        labels=tuple(fields["labels"]),
        assignees=tuple(fields["assignees"]),
        statuses=tuple(fields["statuses"]),
        sprints=tuple(fields["sprints"]),
        priorities=tuple(fields["priorities"]),
        text=tuple(text),
        unknown=tuple(unknown),
    )
