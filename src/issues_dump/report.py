"""Dump files, CSV serialization, and run summaries."""

from __future__ import annotations

import csv
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Dict, Iterable, List, Optional, Union

from .errors import DumpFormatError
from .rows import build_rows, header, unique_by_number

PathLike = Union[str, Path]


def ensure_parent_dir(path: PathLike) -> None:
    """Create the parent directory of `path` if needed."""
    parent = os.path.dirname(os.fspath(path))
    if parent:
        os.makedirs(parent, exist_ok=True)


def save_dump(path: PathLike, issues: Iterable[Dict[str, Any]]) -> int:
    """Write issues as newline-delimited JSON, one compact record per line."""
    ensure_parent_dir(path)
    count = 0
    with open(path, "w", encoding="utf-8") as f:
        for issue in issues:
            f.write(json.dumps(issue, ensure_ascii=False, separators=(",", ":")))
            f.write("\n")
            count += 1
    return count


def load_dump(path: PathLike) -> List[Dict[str, Any]]:
    """Read a newline-delimited JSON dump back into a list of issue records."""
    issues: List[Dict[str, Any]] = []
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except ValueError as exc:
                raise DumpFormatError(f"{path}:{lineno}: invalid JSON ({exc})") from exc
            if not isinstance(record, dict):
                raise DumpFormatError(f"{path}:{lineno}: expected a JSON object")
            issues.append(record)
    return issues


def write_csv(issues: Iterable[Dict[str, Any]],
              handle: IO[str],
              *,
              label_prefix: str = "type/",
              with_participants: bool = True) -> int:
    """Write the header and one row per issue, ordered by issue number; return the row count."""
    rows = build_rows(issues, label_prefix=label_prefix, with_participants=with_participants)
    writer = csv.writer(handle, lineterminator="\n")
    writer.writerow(header(with_participants))
    writer.writerows(rows)
    return len(rows)


def save_csv(path: PathLike,
             issues: Iterable[Dict[str, Any]],
             *,
             label_prefix: str = "type/",
             with_participants: bool = True) -> int:
    """Write the CSV report to `path`."""
    ensure_parent_dir(path)
    with open(path, "w", encoding="utf-8", newline="") as f:
        return write_csv(issues, f, label_prefix=label_prefix, with_participants=with_participants)


@dataclass(frozen=True)
class Summary:
    total: int
    last_number: Optional[int]


def summarize(issues: Iterable[Dict[str, Any]]) -> Summary:
    """Count the distinct records and find the highest issue number among them."""
    numbers = [issue.get("number") for issue in unique_by_number(issues, warn=False)]
    known = [int(n) for n in numbers if n is not None]
    return Summary(total=len(numbers), last_number=max(known) if known else None)


def format_summary(summary: Summary) -> str:
    last = "-" if summary.last_number is None else str(summary.last_number)
    return f"TOTAL: {summary.total}\nLAST ISSUE: #{last}"


__all__ = [
    "ensure_parent_dir",
    "save_dump",
    "load_dump",
    "write_csv",
    "save_csv",
    "Summary",
    "summarize",
    "format_summary",
]
