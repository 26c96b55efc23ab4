from __future__ import annotations

import os
from pathlib import Path

import pytest

from logline import config
from logline.emitter import JsonMode
from logline.errors import DEFAULT_STACK_FILTERS


def write_config_yaml(path: Path, *, json_mode: str = "compat") -> None:
    content = f"""
logging:
  output: {path.parent / "logs" / "app.jsonl"}
  json_mode: {json_mode}
  ensure_ascii: true
  stack_filters:
    - zipkin-tracer
    - opentelemetry
  fields:
    service: hyperion
    region: eu-west-1
"""
    path.write_text(content.strip(), encoding="utf-8")


def test_load_settings_parses_yaml(tmp_path: Path) -> None:
    yaml_path = tmp_path / "logline.yaml"
    write_config_yaml(yaml_path)
    settings = config.load_settings(str(yaml_path), env_file=str(tmp_path / ".env"))
    assert settings.output == str(tmp_path / "logs" / "app.jsonl")
    assert settings.json_mode is JsonMode.COMPAT
    assert settings.ensure_ascii is True
    assert settings.stack_filters == ("zipkin-tracer", "opentelemetry")
    assert settings.fields == {"service": "hyperion", "region": "eu-west-1"}
    assert settings.detached is False


def test_defaults_without_config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    settings = config.load_settings()
    assert settings == config.LoggerSettings()
    assert settings.stack_filters == DEFAULT_STACK_FILTERS


def test_env_overrides_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    yaml_path = tmp_path / "logline.yaml"
    write_config_yaml(yaml_path)
    monkeypatch.setenv("LOGLINE_OUTPUT", "none")
    monkeypatch.setenv("LOGLINE_JSON_MODE", "strict")
    monkeypatch.setenv("LOGLINE_ENSURE_ASCII", "no")
    monkeypatch.setenv("LOGLINE_STACK_FILTERS", "ddtrace, sentry_sdk")
    settings = config.load_settings(str(yaml_path), env_file=str(tmp_path / ".env"))
    assert settings.detached is True
    assert settings.json_mode is JsonMode.STRICT
    assert settings.ensure_ascii is False
    assert settings.stack_filters == ("ddtrace", "sentry_sdk")


def test_env_file_is_loaded(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("# comment\nLOGLINE_OUTPUT='stderr'\n", encoding="utf-8")
    settings = config.load_settings()
    assert settings.output == "stderr"


def test_invalid_json_mode_raises(tmp_path: Path) -> None:
    yaml_path = tmp_path / "logline.yaml"
    write_config_yaml(yaml_path, json_mode="object")
    with pytest.raises(ValueError, match="Unsupported JSON mode"):
        config.load_settings(str(yaml_path), env_file=str(tmp_path / ".env"))


def test_missing_logging_section_raises(tmp_path: Path) -> None:
    yaml_path = tmp_path / "logline.yaml"
    yaml_path.write_text("other: {}\n", encoding="utf-8")
    with pytest.raises(ValueError, match="top-level 'logging'"):
        config.load_settings(str(yaml_path), env_file=str(tmp_path / ".env"))


def test_unknown_key_raises(tmp_path: Path) -> None:
    yaml_path = tmp_path / "logline.yaml"
    yaml_path.write_text("logging:\n  rotate: daily\n", encoding="utf-8")
    with pytest.raises(ValueError, match="rotate"):
        config.load_settings(str(yaml_path), env_file=str(tmp_path / ".env"))


def test_bad_boolean_env_raises(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LOGLINE_ENSURE_ASCII", "sometimes")
    with pytest.raises(ValueError, match="LOGLINE_ENSURE_ASCII"):
        config.load_settings()


def test_env_file_only_imports_logline_entries(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("APP_SECRET", raising=False)
    monkeypatch.setenv("LOGLINE_JSON_MODE", "strict")
    (tmp_path / ".env").write_text(
        "APP_SECRET=hunter2\nexport LOGLINE_OUTPUT=none\nLOGLINE_JSON_MODE=compat\nLOGLINE_STACK_FILTERS=\n",
        encoding="utf-8",
    )
    settings = config.load_settings()
    assert "APP_SECRET" not in os.environ
    assert settings.detached is True
    assert settings.json_mode is JsonMode.STRICT
    assert settings.stack_filters == DEFAULT_STACK_FILTERS


def test_default_stack_filters_cover_tracing_libraries() -> None:
    assert {"zipkin-tracer", "opentelemetry", "ddtrace"} <= set(config.LoggerSettings().stack_filters)
