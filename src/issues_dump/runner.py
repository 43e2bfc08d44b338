"""Entry point wiring configuration, pagination, and report writers."""

from __future__ import annotations

import sys
from functools import partial
from typing import Any, Dict, List, Optional

from .config import (
    MODE_ALL,
    MODE_CONVERT,
    MODE_DUMP,
    MODE_INFO,
    NETWORK_MODES,
    ExportSettings,
    parse_args,
    resolve_settings,
    resolve_token,
)
from .errors import ExportError
from .http_client import execute_query
from .paginator import dump_issues
from .report import format_summary, load_dump, save_csv, save_dump, summarize, write_csv
from .scratch import scratch_directory

EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


def fetch_issues(settings: ExportSettings, token: str, scratch_dir: Optional[str] = None) -> List[Dict[str, Any]]:
    """Page through every issue of the configured repository."""
    print(f"=== {settings.repo} ===")
    execute = partial(execute_query, token=token, timeout=settings.timeout, scratch_dir=scratch_dir)
    return dump_issues(
        settings.owner,
        settings.name,
        execute,
        page_size=settings.page_size,
        direction=settings.order,
        max_pages=settings.max_pages,
    )


def run(settings: ExportSettings) -> None:
    """Execute one mode; raises ExportError (or OSError) on failure."""
    token = resolve_token() if settings.mode in NETWORK_MODES else None
    csv_options = {"label_prefix": settings.label_prefix, "with_participants": settings.with_participants}

    if settings.mode == MODE_INFO:
        print(format_summary(summarize(load_dump(settings.path))))
        return

    if settings.mode == MODE_CONVERT:
        issues = load_dump(settings.path)
        if settings.output is None:
            write_csv(issues, sys.stdout, **csv_options)
            return
        count = save_csv(settings.output, issues, **csv_options)
        print(f"[info] wrote {count} rows to {settings.output}")
        return

    with scratch_directory(keep=settings.keep_scratch) as scratch_dir:
        issues = fetch_issues(settings, token, scratch_dir)

    if settings.mode == MODE_DUMP:
        count = save_dump(settings.path, issues)
        print(f"[info] wrote {count} issues to {settings.path}")
        return

    if settings.mode == MODE_ALL:
        count = save_csv(settings.path, issues, **csv_options)
        print(f"[info] wrote {count} rows to {settings.path}")
        print(format_summary(summarize(issues)))
        return

    raise ValueError(f"unknown mode {settings.mode!r}")


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point; exits 0 on success, 1 on export errors, 130 on interrupt."""
    args = parse_args(argv)
    try:
        settings = resolve_settings(args)
    except ValueError as exc:
        print(f"[error] {exc}")
        sys.exit(EXIT_USAGE)

    try:
        run(settings)
    except ExportError as exc:
        print(f"[error] {exc}")
        sys.exit(EXIT_ERROR)
    except OSError as exc:
        print(f"[error] {exc}")
        sys.exit(EXIT_ERROR)
    except KeyboardInterrupt:
        print("[error] interrupted")
        sys.exit(EXIT_INTERRUPTED)


__all__ = ["fetch_issues", "run", "main"]
