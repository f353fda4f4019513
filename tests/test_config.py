from __future__ import annotations

from pathlib import Path

import pytest

from conftest import URL
from sizewatch.config import load_config
from sizewatch.errors import ConfigError

TWILIO_ENV = {
    "TWILIO_ACCOUNT_SID": "AC123",
    "TWILIO_AUTH_TOKEN": "secret",
    "TWILIO_PHONE_NUMBER": "+15550001111",
    "YOUR_PHONE_NUMBER": "+15552223333",
}


def test_env_only_config_uses_defaults() -> None:
    config = load_config(environ={"TARGET_URL": URL, **TWILIO_ENV})

    assert str(config.url) == URL
    assert config.target_label == "30"
    assert config.check_cron == "* * * * *"
    assert config.digest_cron == "0 18 * * *"
    assert config.max_consecutive_errors == 5
    assert config.alerts.twilio.to_number == "+15552223333"
    assert config.alerts.twilio.from_number == "+15550001111"


def test_legacy_url_variable_is_accepted() -> None:
    config = load_config(environ={"ZARA_URL": URL})
    assert str(config.url) == URL


def test_target_url_wins_over_legacy_name() -> None:
    other = "https://www.zara.com/us/en/other-p1.html"
    config = load_config(environ={"TARGET_URL": other, "ZARA_URL": URL})
    assert str(config.url) == other


def test_yaml_file_is_overridden_by_env(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        f"url: {URL}\ntarget_label: '32'\ncheck_cron: '*/5 * * * *'\n",
        encoding="utf-8",
    )

    config = load_config(path, environ={"TARGET_LABEL": "34", "MAX_CONSECUTIVE_ERRORS": "3"})

    assert config.target_label == "34"
    assert config.check_cron == "*/5 * * * *"
    assert config.max_consecutive_errors == 3


def test_missing_url_is_fatal() -> None:
    with pytest.raises(ConfigError, match="url"):
        load_config(environ={})


def test_partial_twilio_settings_are_rejected() -> None:
    env = {"TARGET_URL": URL, "TWILIO_ACCOUNT_SID": "AC123"}
    with pytest.raises(ConfigError, match="alerts.twilio.to_number"):
        load_config(environ=env)


def test_env_secret_completes_yaml_twilio_block(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        f"url: {URL}\n"
        "alerts:\n"
        "  twilio:\n"
        "    account_sid: AC123\n"
        "    auth_token: placeholder\n"
        "    from_number: '+15550001111'\n"
        "    to_number: '+15552223333'\n",
        encoding="utf-8",
    )

    config = load_config(path, environ={"TWILIO_AUTH_TOKEN": "from-env"})

    assert config.alerts.twilio.auth_token == "from-env"
    assert config.alerts.twilio.account_sid == "AC123"


def test_invalid_cron_is_rejected() -> None:
    with pytest.raises(ConfigError, match="check_cron"):
        load_config(environ={"TARGET_URL": URL, "CHECK_CRON": "every minute"})


def test_threshold_must_be_positive() -> None:
    with pytest.raises(ConfigError, match="max_consecutive_errors"):
        load_config(environ={"TARGET_URL": URL, "MAX_CONSECUTIVE_ERRORS": "0"})


def test_non_mapping_yaml_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        load_config(path, environ={})


def test_unreadable_file_is_a_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="cannot read"):
        load_config(tmp_path / "missing.yaml", environ={"TARGET_URL": URL})
