"""
Logger settings loader.

Purpose:
- Centralize how a logger's output, JSON mode and default fields are chosen.
- Keep tracing simple: YAML -> LoggerSettings -> env overrides -> app.build_logger().

Sources:
- logline.yaml (optional): a top-level "logging" mapping.
- environment variables (.env is supported): per-deployment overrides.

Keys (YAML / env):
- output / LOGLINE_OUTPUT: stdout, stderr, none, or a JSONL file path.
- json_mode / LOGLINE_JSON_MODE: strict or compat.
- ensure_ascii / LOGLINE_ENSURE_ASCII: escape non-ASCII characters.
- stack_filters / LOGLINE_STACK_FILTERS: frame substrings dropped from stacks
  (comma-separated in the environment).
- fields (YAML only): Shared fields added to every line.

Errors are raised where a value is first parsed so the caller knows which
source (YAML vs env) is wrong.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any
import os

import yaml

from .emitter import JsonMode
from .errors import DEFAULT_STACK_FILTERS

DEFAULT_CONFIG_PATH = "logline.yaml"
DETACHED_OUTPUTS = {"none", "null", "off", ""}
_ENV_LOADED = False
ENV_PREFIX = "LOGLINE_"


@dataclass(frozen=True)
class LoggerSettings:
    """
    Resolved logger configuration.
    """

    output: str = "stdout"
    json_mode: JsonMode = JsonMode.STRICT
    ensure_ascii: bool = False
    stack_filters: tuple[str, ...] = DEFAULT_STACK_FILTERS
    fields: dict[str, Any] = field(default_factory=dict)

    @property
    def detached(self) -> bool:
        return self.output.strip().lower() in DETACHED_OUTPUTS


def _parse_bool(value: Any, source: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in {"1", "true", "yes", "on"}:
        return True
    if text in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"{source} must be a boolean, got '{value}'.")


def _parse_filters(value: Any, source: str) -> tuple[str, ...]:
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    if isinstance(value, (list, tuple)):
        return tuple(str(part) for part in value if str(part))
    raise ValueError(f"{source} must be a list of strings.")


def _parse_settings(raw: Any) -> LoggerSettings:
    if raw is None:
        return LoggerSettings()
    if not isinstance(raw, dict) or "logging" not in raw:
        raise ValueError("logline.yaml must contain a top-level 'logging' mapping.")

    section = raw["logging"] or {}
    if not isinstance(section, dict):
        raise ValueError("'logging' must be a mapping.")

    unknown = set(section) - {"output", "json_mode", "ensure_ascii", "stack_filters", "fields"}
    if unknown:
        raise ValueError(f"Unknown logging keys: {', '.join(sorted(map(str, unknown)))}")

    settings = LoggerSettings()
    if "output" in section:
        # "output: null" in YAML means a detached logger.
        output = section["output"]
        settings = replace(settings, output="none" if output is None else str(output))
    if "json_mode" in section:
        settings = replace(settings, json_mode=JsonMode.parse(section["json_mode"]))
    if "ensure_ascii" in section:
        settings = replace(
            settings, ensure_ascii=_parse_bool(section["ensure_ascii"], "logging.ensure_ascii")
        )
    if "stack_filters" in section:
        settings = replace(
            settings,
            stack_filters=_parse_filters(section["stack_filters"] or [], "logging.stack_filters"),
        )
    if "fields" in section:
        fields = section["fields"] or {}
        if not isinstance(fields, dict):
            raise ValueError("logging.fields must be a mapping.")
        settings = replace(settings, fields={str(key): value for key, value in fields.items()})
    return settings


def _parse_env_line(raw_line: str) -> tuple[str, str] | None:
    line = raw_line.strip()
    if line.startswith("export "):
        line = line[len("export "):].lstrip()
    name, sep, value = line.partition("=")
    name = name.strip()
    if not sep or not name.startswith(ENV_PREFIX):
        return None
    return name, value.strip().strip("'\"")


def _load_env_file(path: str = ".env") -> None:
    """
    Import LOGLINE_* entries from a .env file, once per process.

    Other entries belong to the application and are left alone. Variables
    already present in the environment win.
    """

    global _ENV_LOADED
    if _ENV_LOADED:
        return
    _ENV_LOADED = True

    env_path = Path(path)
    if not env_path.is_file():
        return
    for raw_line in env_path.read_text(encoding="utf-8").splitlines():
        entry = _parse_env_line(raw_line)
        if entry and entry[1]:
            os.environ.setdefault(*entry)


def _read_env(var_name: str) -> str | None:
    value = os.getenv(var_name)
    if value is None or value == "":
        return None
    return value


def apply_env_overrides(settings: LoggerSettings) -> LoggerSettings:
    """
    Overlay LOGLINE_* environment variables onto ``settings``.
    """

    output = _read_env("LOGLINE_OUTPUT")
    if output is not None:
        settings = replace(settings, output=output)
    json_mode = _read_env("LOGLINE_JSON_MODE")
    if json_mode is not None:
        settings = replace(settings, json_mode=JsonMode.parse(json_mode))
    ensure_ascii = _read_env("LOGLINE_ENSURE_ASCII")
    if ensure_ascii is not None:
        settings = replace(
            settings, ensure_ascii=_parse_bool(ensure_ascii, "LOGLINE_ENSURE_ASCII")
        )
    stack_filters = _read_env("LOGLINE_STACK_FILTERS")
    if stack_filters is not None:
        settings = replace(
            settings, stack_filters=_parse_filters(stack_filters, "LOGLINE_STACK_FILTERS")
        )
    return settings


def load_settings(path: str | None = None, *, env_file: str = ".env") -> LoggerSettings:
    """
    Load logger settings.

    Inputs:
    - path: YAML file. When omitted, logline.yaml is used if it exists.
    - env_file: .env file loaded once before reading LOGLINE_* variables.

    Outputs:
    - LoggerSettings with environment overrides applied.
    """

    _load_env_file(env_file)

    config_path = path or DEFAULT_CONFIG_PATH
    if path is None and not os.path.exists(config_path):
        settings = LoggerSettings()
    else:
        with open(config_path, "r", encoding="utf-8") as handle:
            settings = _parse_settings(yaml.safe_load(handle))
    return apply_env_overrides(settings)
