"""GraphQL query rendering for paging through repository issues."""

from __future__ import annotations

import json
from typing import Optional

from .config import MAX_PAGE_SIZE, ORDER_DIRECTIONS

# Placeholders are substituted literally; values are pre-encoded as GraphQL literals.
ISSUES_QUERY_TEMPLATE = """
query {
  repository(owner: ##OWNER##, name: ##NAME##) {
    issues(
      ##AFTER_CURSOR##
      first: ##PAGE_SIZE##,
      orderBy: { field: CREATED_AT, direction: ##DIRECTION## }
    ) {
      nodes {
        id
        number
        title
        state
        author { login }
        assignees(first: 100) { nodes { login } }
        labels(first: 100) { nodes { name } }
        milestone { number title url }
        createdAt
        participants(first: 100) { nodes { login } }
        lastComment: comments(last: 1) { nodes { createdAt } }
        comments { totalCount }
        reactions(first: 100) {
          totalCount
          nodes { user { login } }
        }
        react_thumbs_down: reactions(content: THUMBS_DOWN) { totalCount }
        react_confused: reactions(content: CONFUSED) { totalCount }
        react_thumbs_up: reactions(content: THUMBS_UP) { totalCount }
        react_heart: reactions(content: HEART) { totalCount }
        react_hooray: reactions(content: HOORAY) { totalCount }
        react_rocket: reactions(content: ROCKET) { totalCount }
      }
      pageInfo {
        endCursor
        hasNextPage
      }
      totalCount
    }
  }
}
"""


def graphql_string(value: str) -> str:
    """Encode a Python string as a GraphQL string literal (JSON escaping is compatible)."""
    return json.dumps(value, ensure_ascii=False)


def render_issues_query(owner: str,
                        name: str,
                        page_size: int,
                        cursor: Optional[str] = None,
                        direction: str = "DESC") -> str:
    """Return the GraphQL document for one page of issues."""
    if not 1 <= int(page_size) <= MAX_PAGE_SIZE:
        raise ValueError(f"page size must be between 1 and {MAX_PAGE_SIZE}, got {page_size}")
    direction = (direction or "").upper()
    if direction not in ORDER_DIRECTIONS:
        raise ValueError(f"unsupported order direction {direction!r}")

    after = f"after: {graphql_string(cursor)}," if cursor else ""
    return (
        ISSUES_QUERY_TEMPLATE
        .replace("##OWNER##", graphql_string(owner))
        .replace("##NAME##", graphql_string(name))
        .replace("##PAGE_SIZE##", str(int(page_size)))
        .replace("##DIRECTION##", direction)
        .replace("##AFTER_CURSOR##", after, 1)
    )


def build_query(owner: str,
                name: str,
                page_size: int,
                cursor: Optional[str] = None,
                direction: str = "DESC") -> str:
    """Return the JSON request body (`{"query": ...}`) for one page of issues."""
    query = render_issues_query(owner, name, page_size, cursor=cursor, direction=direction)
    return json.dumps({"query": query})


__all__ = [
    "ISSUES_QUERY_TEMPLATE",
    "graphql_string",
    "render_issues_query",
    "build_query",
]
