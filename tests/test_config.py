"""Tests for src.issues_dump.config covering defaults, env overrides, and CLI parsing.

Run with coverage to validate configuration handling:
    pytest tests/test_config.py --maxfail=1 -v --cov=src.issues_dump.config --cov-report=term-missing
"""

import json
from importlib import reload
from pathlib import Path

import pytest

import src.issues_dump.config as config
from src.issues_dump.errors import ConfigurationError


def test_config_defaults_are_present():
    assert config.PAGE_SIZE == 100
    assert config.ORDER_DIRECTION in config.ORDER_DIRECTIONS
    assert config.LABEL_PREFIX == "type/"
    assert config.REQUEST_TIMEOUT > 0
    assert config.USER_AGENT.startswith("issues-dump")
    assert config.GRAPHQL_URL == "https://api.github.com/graphql"


def test_env_override_for_page_size_and_order(monkeypatch):
    monkeypatch.setenv("ISSUES_DUMP_PAGE_SIZE", "32")
    monkeypatch.setenv("ISSUES_DUMP_ORDER", "asc")
    reloaded = reload(config)
    try:
        assert reloaded.PAGE_SIZE == 32
        assert reloaded.ORDER_DIRECTION == "ASC"
    finally:
        monkeypatch.delenv("ISSUES_DUMP_PAGE_SIZE", raising=False)
        monkeypatch.delenv("ISSUES_DUMP_ORDER", raising=False)
        reload(config)


def test_resolve_settings_default_mode_targets_csv():
    settings = config.resolve_settings(config.parse_args(["out/issues.csv"]))
    assert settings.mode == config.MODE_ALL
    assert settings.path == Path("out/issues.csv")
    assert settings.repo == config.REPO
    assert settings.with_participants is True
    assert settings.max_pages == config.MAX_PAGES


def test_resolve_settings_from_cli():
    args = config.parse_args([
        "convert",
        "dump.jsonl",
        "--output",
        "report.csv",
        "--repo",
        "octo/widgets",
        "--page-size",
        "32",
        "--order",
        "asc",
        "--label-prefix",
        "kind/",
        "--no-participants",
        "--timeout",
        "12.5",
        "--max-pages",
        "7",
        "--keep-scratch",
    ])
    settings = config.resolve_settings(args)
    assert settings.mode == config.MODE_CONVERT
    assert settings.path == Path("dump.jsonl")
    assert settings.output == Path("report.csv")
    assert (settings.owner, settings.name) == ("octo", "widgets")
    assert settings.page_size == 32
    assert settings.order == "ASC"
    assert settings.label_prefix == "kind/"
    assert settings.with_participants is False
    assert settings.timeout == 12.5
    assert settings.max_pages == 7
    assert settings.keep_scratch is True


@pytest.mark.parametrize("argv", [["info"], ["bogus", "file.jsonl"], ["out.csv", "--repo", "no-slash"]])
def test_resolve_settings_rejects_inconsistent_input(argv):
    with pytest.raises(ValueError):
        config.resolve_settings(config.parse_args(argv))


@pytest.mark.parametrize("flag", [["--page-size", "101"], ["--page-size", "0"], ["--order", "sideways"]])
def test_parse_args_rejects_invalid_values(flag):
    with pytest.raises(SystemExit) as excinfo:
        config.parse_args(["out.csv", *flag])
    assert excinfo.value.code == 2


def test_resolve_token_prefers_environment(monkeypatch):
    monkeypatch.setenv(config.TOKEN_ENV_VAR, " secret ")
    assert config.resolve_token() == "secret"


def test_resolve_token_falls_back_to_local_secrets(monkeypatch, tmp_path):
    secrets = tmp_path / "local_secrets.json"
    secrets.write_text(json.dumps({"github_tokens": ["", "from-file"]}))
    monkeypatch.delenv(config.TOKEN_ENV_VAR, raising=False)
    monkeypatch.setenv("LOCAL_SECRETS_FILE", str(secrets))
    assert config.resolve_token() == "from-file"


def test_resolve_token_missing_raises(monkeypatch, tmp_path):
    monkeypatch.delenv(config.TOKEN_ENV_VAR, raising=False)
    monkeypatch.setenv("LOCAL_SECRETS_FILE", str(tmp_path / "absent.json"))
    with pytest.raises(ConfigurationError) as excinfo:
        config.resolve_token()
    assert config.TOKEN_ENV_VAR in str(excinfo.value)


def test_resolve_settings_validates_env_derived_defaults(monkeypatch):
    monkeypatch.setattr(config, "PAGE_SIZE", 500)
    args = config.parse_args(["out.csv"])
    assert args.page_size == 500
    with pytest.raises(ValueError) as excinfo:
        config.resolve_settings(args)
    assert "page size" in str(excinfo.value)


@pytest.mark.parametrize("field, value", [("order", "sideways"), ("timeout", 0), ("timeout", -5.0)])
def test_resolve_settings_rejects_invalid_namespace_values(field, value):
    args = config.parse_args(["out.csv"])
    setattr(args, field, value)
    with pytest.raises(ValueError):
        config.resolve_settings(args)


@pytest.mark.parametrize("timeout", ["0", "-1"])
def test_parse_args_rejects_non_positive_timeout(timeout):
    with pytest.raises(SystemExit) as excinfo:
        config.parse_args(["out.csv", "--timeout", timeout])
    assert excinfo.value.code == 2
