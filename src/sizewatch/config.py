from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from sizewatch.errors import ConfigError
from sizewatch.models import AppConfig

# Environment variable -> path into the AppConfig payload. Earlier names win.
ENV_FIELDS: dict[str, tuple[str, ...]] = {
    "TARGET_URL": ("url",),
    "ZARA_URL": ("url",),
    "TARGET_NAME": ("name",),
    "TARGET_LABEL": ("target_label",),
    "CHECK_CRON": ("check_cron",),
    "DIGEST_CRON": ("digest_cron",),
    "MAX_CONSECUTIVE_ERRORS": ("max_consecutive_errors",),
    "FETCH_TIMEOUT_SECONDS": ("fetch_timeout_seconds",),
    "DEBUG_HTML_PATH": ("debug_html_path",),
    "TWILIO_ACCOUNT_SID": ("alerts", "twilio", "account_sid"),
    "TWILIO_AUTH_TOKEN": ("alerts", "twilio", "auth_token"),
    "TWILIO_PHONE_NUMBER": ("alerts", "twilio", "from_number"),
    "YOUR_PHONE_NUMBER": ("alerts", "twilio", "to_number"),
    "DISCORD_WEBHOOK": ("alerts", "discord_webhook"),
}


def _set_path(payload: dict[str, Any], path: tuple[str, ...], value: str) -> None:
    node = payload
    for key in path[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    node[path[-1]] = value


def _apply_env(payload: dict[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    applied: set[tuple[str, ...]] = set()
    for name, path in ENV_FIELDS.items():
        value = environ.get(name)
        if not value or path in applied:
            continue
        _set_path(payload, path, value)
        applied.add(path)
    return payload


def _format_validation_error(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "config"
        problems.append(f"{location}: {error['msg']}")
    return "; ".join(problems)


def load_config(
    config_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> AppConfig:
    payload: dict[str, Any] = {}
    if config_path is not None:
        path = Path(config_path)
        try:
            loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise ConfigError(f"cannot read config file {path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML in {path}: {exc}") from exc
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigError(f"config file {path} must contain a mapping")
        payload = loaded or {}

    payload = _apply_env(payload, os.environ if environ is None else environ)
    try:
        return AppConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration: {_format_validation_error(exc)}") from exc
