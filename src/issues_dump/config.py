"""Configuration constants and CLI settings for the issues dump workflow."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from src.secrets import first_local_token

from .errors import ConfigurationError

TOKEN_ENV_VAR = "REST_API_GITHUB_TOKEN"
USER_AGENT = "issues-dump/1.0"
GRAPHQL_URL = "https://api.github.com/graphql"
# Reaction fields on issues were gated behind this preview when the report was designed.
ACCEPT_MEDIA_TYPE = "application/vnd.github.groot-preview+json"
MAX_PAGE_SIZE = 100
ORDER_DIRECTIONS = ("ASC", "DESC")

REPO = os.getenv("ISSUES_DUMP_REPO", "deckhouse/deckhouse")
PAGE_SIZE = int(os.getenv("ISSUES_DUMP_PAGE_SIZE", str(MAX_PAGE_SIZE)))
ORDER_DIRECTION = os.getenv("ISSUES_DUMP_ORDER", "DESC").upper()
LABEL_PREFIX = os.getenv("ISSUES_DUMP_LABEL_PREFIX", "type/")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "90"))
MAX_PAGES = int(os.getenv("ISSUES_DUMP_MAX_PAGES", "0"))  # 0 = no cap

MODE_DUMP = "dump"
MODE_INFO = "info"
MODE_CONVERT = "convert"
MODE_ALL = "all"
FILE_MODES = (MODE_DUMP, MODE_INFO, MODE_CONVERT)
NETWORK_MODES = (MODE_DUMP, MODE_ALL)


@dataclass(frozen=True)
class ExportSettings:
    """Resolved runtime settings for one invocation."""

    mode: str
    path: Path
    output: Optional[Path]
    owner: str
    name: str
    page_size: int
    order: str
    label_prefix: str
    with_participants: bool
    timeout: float
    max_pages: int
    keep_scratch: bool

    @property
    def repo(self) -> str:
        return f"{self.owner}/{self.name}"


def split_repo(full_name: str) -> tuple[str, str]:
    """Split `owner/name`; raise ValueError when either half is missing."""
    owner, sep, name = (full_name or "").strip().partition("/")
    if not sep or not owner or not name or "/" in name:
        raise ValueError(f"repository must look like 'owner/name', got {full_name!r}")
    return owner, name


def validate_page_size(value) -> int:
    size = int(value)
    if not 1 <= size <= MAX_PAGE_SIZE:
        raise ValueError(f"page size must be between 1 and {MAX_PAGE_SIZE}, got {size}")
    return size


def validate_order(value) -> str:
    direction = str(value).upper()
    if direction not in ORDER_DIRECTIONS:
        raise ValueError(f"order must be one of {', '.join(ORDER_DIRECTIONS)}, got {value!r}")
    return direction


def validate_timeout(value) -> float:
    timeout = float(value)
    if timeout <= 0:
        raise ValueError(f"timeout must be positive, got {value}")
    return timeout


def _argparse_type(validator):
    """Adapt a ValueError-raising validator to argparse's error reporting."""

    def convert(value: str):
        try:
            return validator(value)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    convert.__name__ = validator.__name__
    return convert


def build_arg_parser() -> argparse.ArgumentParser:
    """Return the CLI parser used by the issues dump entry point."""

    parser = argparse.ArgumentParser(
        prog="issues-dump",
        description=(
            "Dump every issue of a GitHub repository and convert it to a CSV report. "
            "Modes: 'dump FILE', 'info FILE', 'convert FILE [--output CSV]', "
            "or just 'OUTPUT.csv' to fetch, convert and summarize in one go."
        ),
    )
    parser.add_argument("target", help="mode (dump, info, convert) or the CSV output path")
    parser.add_argument("path", nargs="?", help="dump file for dump/info/convert modes")
    parser.add_argument("--output", "-o", default=None, help="CSV path for convert mode (default: stdout)")
    parser.add_argument("--repo", default=REPO, help="repository as owner/name")
    parser.add_argument("--page-size", type=_argparse_type(validate_page_size), default=PAGE_SIZE)
    parser.add_argument("--order", type=_argparse_type(validate_order), default=ORDER_DIRECTION, help="ASC or DESC by creation time")
    parser.add_argument("--label-prefix", default=LABEL_PREFIX)
    parser.add_argument("--no-participants", action="store_true", help="omit the Participants column")
    parser.add_argument("--timeout", type=_argparse_type(validate_timeout), default=REQUEST_TIMEOUT, help="per-request timeout in seconds")
    parser.add_argument("--max-pages", type=int, default=MAX_PAGES, help="abort after this many pages (0 = no cap)")
    parser.add_argument("--keep-scratch", action="store_true", help="keep request captures after the run")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments; accepts argv overrides for testing."""

    return build_arg_parser().parse_args(argv)


def resolve_settings(args: argparse.Namespace) -> ExportSettings:
    """Turn parsed arguments into settings; raise ValueError on inconsistent input."""

    if args.target in FILE_MODES:
        if not args.path:
            raise ValueError(f"'{args.target}' mode needs a dump file path")
        mode, path = args.target, Path(args.path)
    else:
        if args.path:
            raise ValueError(f"unknown mode {args.target!r}; expected one of {', '.join(FILE_MODES)}")
        mode, path = MODE_ALL, Path(args.target)

    owner, name = split_repo(args.repo)
    return ExportSettings(
        mode=mode,
        path=path,
        output=Path(args.output) if args.output else None,
        owner=owner,
        name=name,
        page_size=validate_page_size(args.page_size),
        order=validate_order(args.order),
        label_prefix=args.label_prefix,
        with_participants=not args.no_participants,
        timeout=validate_timeout(args.timeout),
        max_pages=max(0, int(args.max_pages)),
        keep_scratch=bool(args.keep_scratch),
    )


def resolve_token() -> str:
    """Return the API token from the environment or local secrets file."""

    token = (os.getenv(TOKEN_ENV_VAR) or "").strip() or first_local_token()
    if not token:
        raise ConfigurationError(f"{TOKEN_ENV_VAR} is not set")
    return token


__all__ = [
    "TOKEN_ENV_VAR",
    "USER_AGENT",
    "GRAPHQL_URL",
    "ACCEPT_MEDIA_TYPE",
    "MAX_PAGE_SIZE",
    "ORDER_DIRECTIONS",
    "REPO",
    "PAGE_SIZE",
    "ORDER_DIRECTION",
    "LABEL_PREFIX",
    "REQUEST_TIMEOUT",
    "MAX_PAGES",
    "MODE_DUMP",
    "MODE_INFO",
    "MODE_CONVERT",
    "MODE_ALL",
    "FILE_MODES",
    "NETWORK_MODES",
    "ExportSettings",
    "split_repo",
    "validate_page_size",
    "validate_order",
    "validate_timeout",
    "build_arg_parser",
    "parse_args",
    "resolve_settings",
    "resolve_token",
]
