"""Cursor pagination over a repository's issues."""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from .errors import ApiError, PageLimitError, TransportError
from .http_client import ApiResult
from .query import build_query

Executor = Callable[[str], ApiResult]


def error_messages(response: Any) -> Optional[str]:
    """Return the concatenated GraphQL error messages, or None when there are none."""
    if not isinstance(response, dict) or not response.get("errors"):
        return None
    errors = response["errors"]
    if not isinstance(errors, list):
        errors = [errors]
    messages = [
        str(err.get("message")) if isinstance(err, dict) and err.get("message") else str(err)
        for err in errors
    ]
    return ", ".join(messages)


def _describe(result: ApiResult) -> str:
    text = result.response if isinstance(result.response, str) else repr(result.response)
    return f"HTTP {result.status}: {text[:300]}"


def extract_page(result: ApiResult) -> Tuple[List[Dict[str, Any]], Optional[str], bool]:
    """Validate one result and return (nodes, end cursor, has next page)."""
    if result.error:
        raise TransportError(f"request failed: {result.error}")

    messages = error_messages(result.response)
    if messages is not None:
        raise ApiError(f"GitHub API error: {messages}")

    try:
        issues = result.response["data"]["repository"]["issues"]
        page_info = issues["pageInfo"]
        nodes = issues["nodes"]
        cursor = page_info.get("endCursor")
        has_next = bool(page_info.get("hasNextPage"))
    except (AttributeError, KeyError, TypeError) as exc:
        raise ApiError(f"unexpected GraphQL response ({_describe(result)})") from exc

    if not isinstance(nodes, list):
        raise ApiError(f"issue nodes are not a list ({_describe(result)})")
    # null nodes (items the token cannot resolve) are skipped
    return [node for node in nodes if isinstance(node, dict)], cursor, has_next


def iter_issue_pages(owner: str,
                     name: str,
                     execute: Executor,
                     *,
                     page_size: int,
                     direction: str = "DESC",
                     max_pages: int = 0) -> Iterator[List[Dict[str, Any]]]:
    """Yield each page of issues until GitHub reports no next page.

    Requests are strictly sequential: every page after the first is requested
    with the cursor returned by the page before it. Any error aborts the loop.
    `max_pages` (0 = no cap) guards against an upstream that never stops.
    """
    cursor: Optional[str] = None
    has_next = True
    page = 0
    while has_next:
        if max_pages and page >= max_pages:
            raise PageLimitError(f"stopped after {page} pages; more issues are still available")
        page += 1
        print(f"  fetching page {page}...")
        body = build_query(owner, name, page_size, cursor=cursor, direction=direction)
        nodes, cursor, has_next = extract_page(execute(body))
        if has_next and not cursor:
            raise ApiError(f"page {page} reports more pages but no end cursor")
        yield nodes


def dump_issues(owner: str,
                name: str,
                execute: Executor,
                *,
                page_size: int,
                direction: str = "DESC",
                max_pages: int = 0) -> List[Dict[str, Any]]:
    """Return every issue of `owner/name` in the order GitHub emitted them."""
    issues: List[Dict[str, Any]] = []
    for nodes in iter_issue_pages(owner, name, execute,
                                  page_size=page_size, direction=direction, max_pages=max_pages):
        issues.extend(nodes)
    print(f"  fetched {len(issues)} issues from {owner}/{name}")
    return issues


__all__ = [
    "Executor",
    "error_messages",
    "extract_page",
    "iter_issue_pages",
    "dump_issues",
]
