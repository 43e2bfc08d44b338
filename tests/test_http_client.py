"""Unit tests for src.issues_dump.http_client covering result capture and transport errors.

Execute with coverage to validate the request executor:
    pytest tests/test_http_client.py --maxfail=1 -v --cov=src.issues_dump.http_client --cov-report=term-missing
"""

import json
from typing import Any, Dict, Optional
from unittest.mock import MagicMock, patch

import requests

from src.issues_dump import config
from src.issues_dump import http_client


def _make_resp(status: int = 200, payload: Any = None, headers: Optional[Dict[str, str]] = None):
    resp = MagicMock()
    resp.status_code = status
    resp.headers = headers or {}
    if payload is None:
        payload = {}
    resp.json.return_value = payload
    resp.text = json.dumps(payload)
    return resp


def test_graphql_headers_carry_token_and_preview_media_type():
    headers = http_client.graphql_headers("tok")
    assert headers["Authorization"] == "Bearer tok"
    assert headers["Accept"] == config.ACCEPT_MEDIA_TYPE
    assert headers["Content-Type"] == "application/json"
    assert "User-Agent" not in headers
    assert http_client.SESSION.headers["User-Agent"] == config.USER_AGENT


@patch("src.issues_dump.http_client.SESSION")
def test_execute_query_success(mock_session):
    payload = {"data": {"repository": None}}
    mock_session.post.return_value = _make_resp(200, payload, headers={"X-RateLimit-Remaining": "4999"})
    result = http_client.execute_query('{"query": "q"}', token="tok", timeout=5)

    assert result.error == ""
    assert result.status == 200
    assert result.headers == {"X-RateLimit-Remaining": "4999"}
    assert result.response == payload

    args, kwargs = mock_session.post.call_args
    assert args[0] == config.GRAPHQL_URL
    assert kwargs["data"] == b'{"query": "q"}'
    assert kwargs["timeout"] == 5
    assert kwargs["headers"]["Authorization"] == "Bearer tok"


@patch("src.issues_dump.http_client.SESSION")
def test_execute_query_does_not_validate_status(mock_session):
    mock_session.post.return_value = _make_resp(502, {"message": "Bad gateway"})
    result = http_client.execute_query("{}", token="tok")
    assert result.error == ""
    assert result.status == 502
    assert result.response == {"message": "Bad gateway"}


@patch("src.issues_dump.http_client.SESSION")
def test_execute_query_falls_back_to_raw_text(mock_session):
    resp = _make_resp(200)
    resp.json.side_effect = ValueError("not json")
    resp.text = "<html>unicorn</html>"
    mock_session.post.return_value = resp
    result = http_client.execute_query("{}", token="tok")
    assert result.response == "<html>unicorn</html>"


@patch("src.issues_dump.http_client.SESSION")
def test_execute_query_captures_transport_error(mock_session):
    mock_session.post.side_effect = requests.ConnectionError("Name or service not known")
    result = http_client.execute_query("{}", token="tok")
    assert result.error
    assert "Name or service not known" in result.error
    assert result.status == 0
    assert result.response is None
    assert mock_session.post.call_count == 1


@patch("src.issues_dump.http_client.SESSION")
def test_execute_query_writes_capture_to_scratch_dir(mock_session, tmp_path):
    mock_session.post.return_value = _make_resp(200, {"data": {}})
    http_client.execute_query('{"query": "q"}', token="tok", scratch_dir=str(tmp_path))

    captures = list(tmp_path.glob("graphql-*.json"))
    assert len(captures) == 1
    saved = json.loads(captures[0].read_text(encoding="utf-8"))
    assert saved["request"] == '{"query": "q"}'
    assert saved["result"]["status"] == 200
    assert saved["result"]["response"] == {"data": {}}
