"""Single-request GraphQL executor that captures the outcome as one structured result."""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

import requests

from .config import ACCEPT_MEDIA_TYPE, GRAPHQL_URL, REQUEST_TIMEOUT, USER_AGENT

SESSION = requests.Session()
SESSION.headers.update({"User-Agent": USER_AGENT})


@dataclass
class ApiResult:
    """Outcome of one POST: transport error, status, flat headers, and parsed body."""

    error: str = ""
    status: int = 0
    headers: Dict[str, str] = field(default_factory=dict)
    response: Any = None


def graphql_headers(token: str) -> Dict[str, str]:
    """Build headers for GraphQL requests."""
    return {
        "Authorization": f"Bearer {token}",
        "Accept": ACCEPT_MEDIA_TYPE,
        "Content-Type": "application/json",
    }


def parse_body(resp: requests.Response) -> Any:
    """Return the JSON body when it parses, otherwise the raw text."""
    try:
        return resp.json()
    except ValueError:
        return resp.text or ""


def save_capture(scratch_dir: str, body: str, result: ApiResult) -> str:
    """Write the request body and its result to a fresh file under scratch_dir."""
    fd, path = tempfile.mkstemp(prefix="graphql-", suffix=".json", dir=scratch_dir)
    with os.fdopen(fd, "w", encoding="utf-8") as handle:
        json.dump({"request": body, "result": asdict(result)}, handle, indent=2, ensure_ascii=False)
    return path


def execute_query(body: str,
                  *,
                  token: str,
                  timeout: Optional[float] = REQUEST_TIMEOUT,
                  scratch_dir: Optional[str] = None,
                  url: str = GRAPHQL_URL) -> ApiResult:
    """POST one request body; never raises for transport failures, never checks status."""
    try:
        resp = SESSION.post(url, data=body.encode("utf-8"), headers=graphql_headers(token), timeout=timeout)
    except requests.RequestException as exc:
        result = ApiResult(error=str(exc) or exc.__class__.__name__)
    else:
        result = ApiResult(
            status=int(resp.status_code),
            headers={str(k): str(v) for k, v in (resp.headers or {}).items()},
            response=parse_body(resp),
        )

    if scratch_dir:
        save_capture(scratch_dir, body, result)
    return result


__all__ = [
    "SESSION",
    "ApiResult",
    "graphql_headers",
    "parse_body",
    "save_capture",
    "execute_query",
]
