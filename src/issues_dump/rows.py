"""Flatten nested GraphQL issue records into CSV rows."""

from __future__ import annotations

import sys
from typing import Any, Dict, Iterable, List, Optional

CSV_HEADER = [
    "Issue #",
    "Title",
    "State",
    "Author",
    "Assignees",
    "Type labels",
    "Milestone",
    "Created",
    "Commented",
    "Total comments",
    "Positive reactions",
    "Negative reactions",
    "Participants",
]

POSITIVE_REACTIONS = ("react_thumbs_up", "react_heart", "react_hooray", "react_rocket")
NEGATIVE_REACTIONS = ("react_thumbs_down", "react_confused")


def header(with_participants: bool = True) -> List[str]:
    return list(CSV_HEADER) if with_participants else CSV_HEADER[:-1]


def _nodes(connection: Optional[dict]) -> List[dict]:
    """Return the non-null nodes of a GraphQL connection, tolerating nulls at any level."""
    nodes = (connection or {}).get("nodes") or []
    return [node for node in nodes if isinstance(node, dict)]


def _total(connection: Optional[dict]) -> int:
    return int((connection or {}).get("totalCount") or 0)


def date_part(timestamp: Optional[str]) -> str:
    """Drop everything from the first 'T' on: '2021-06-01T12:00:00Z' -> '2021-06-01'."""
    if not timestamp:
        return ""
    return str(timestamp).split("T", 1)[0]


def prefixed_labels(issue: Dict[str, Any], prefix: str) -> List[str]:
    """Return label names carrying `prefix` (case-sensitive), with the prefix stripped."""
    names = [node.get("name") or "" for node in _nodes(issue.get("labels"))]
    return [name[len(prefix):] for name in names if name.startswith(prefix)]


def last_comment_date(issue: Dict[str, Any]) -> str:
    comments = _nodes(issue.get("lastComment"))
    return date_part(comments[0].get("createdAt")) if comments else ""


def reaction_sum(issue: Dict[str, Any], aliases: Iterable[str]) -> int:
    return sum(_total(issue.get(alias)) for alias in aliases)


def participant_count(issue: Dict[str, Any]) -> int:
    """Count distinct logins among participants and reacting users."""
    logins = {node.get("login") for node in _nodes(issue.get("participants"))}
    logins.update(
        (node.get("user") or {}).get("login")
        for node in _nodes(issue.get("reactions"))
    )
    logins.discard(None)
    logins.discard("")
    return len(logins)


def issue_to_row(issue: Dict[str, Any],
                 *,
                 label_prefix: str = "type/",
                 with_participants: bool = True) -> List[Any]:
    """Project one issue record onto the fixed CSV column order."""
    row: List[Any] = [
        issue.get("number"),
        issue.get("title") or "",
        issue.get("state") or "",
        (issue.get("author") or {}).get("login") or "",
        ",".join(node.get("login") or "" for node in _nodes(issue.get("assignees"))),
        ",".join(prefixed_labels(issue, label_prefix)),
        (issue.get("milestone") or {}).get("title") or "",
        date_part(issue.get("createdAt")),
        last_comment_date(issue),
        _total(issue.get("comments")),
        reaction_sum(issue, POSITIVE_REACTIONS),
        reaction_sum(issue, NEGATIVE_REACTIONS),
    ]
    if with_participants:
        row.append(participant_count(issue))
    return row


def unique_by_number(issues: Iterable[Dict[str, Any]], *, warn: bool = True) -> List[Dict[str, Any]]:
    """Drop records whose number was already seen, keeping the first occurrence."""
    seen = set()
    unique: List[Dict[str, Any]] = []
    for issue in issues:
        number = issue.get("number")
        if number in seen:
            if warn:
                print(f"[warn] duplicate issue #{number} skipped", file=sys.stderr)
            continue
        seen.add(number)
        unique.append(issue)
    return unique


def build_rows(issues: Iterable[Dict[str, Any]],
               *,
               label_prefix: str = "type/",
               with_participants: bool = True) -> List[List[Any]]:
    """Return rows for all issues, unique and sorted by issue number ascending."""
    ordered = sorted(unique_by_number(issues), key=lambda issue: int(issue.get("number") or 0))
    return [
        issue_to_row(issue, label_prefix=label_prefix, with_participants=with_participants)
        for issue in ordered
    ]


__all__ = [
    "CSV_HEADER",
    "POSITIVE_REACTIONS",
    "NEGATIVE_REACTIONS",
    "header",
    "date_part",
    "prefixed_labels",
    "last_comment_date",
    "reaction_sum",
    "participant_count",
    "issue_to_row",
    "unique_by_number",
    "build_rows",
]
