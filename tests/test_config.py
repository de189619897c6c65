"""Tests for startup configuration loading."""

import pathlib

import pytest

from minesweeper_bot.config import AppConfig, TemporalConfig, load_config, load_temporal_config
from minesweeper_bot.errors import ConfigurationError


def test_missing_token_is_fatal() -> None:
    with pytest.raises(ConfigurationError):
        load_config({})


def test_blank_token_is_fatal() -> None:
    with pytest.raises(ConfigurationError):
        load_config({"TELEGRAM_BOT_TOKEN": "   "})


def test_defaults() -> None:
    assert load_config({"TELEGRAM_BOT_TOKEN": "abc"}) == AppConfig(bot_token="abc", port=3000, session_backend="memory")


def test_overrides() -> None:
    config = load_config({"TELEGRAM_BOT_TOKEN": "abc", "PORT": "8080", "SESSION_BACKEND": "Temporal"})

    assert config.port == 8080
    assert config.session_backend == "temporal"


@pytest.mark.parametrize("env", [
    {"TELEGRAM_BOT_TOKEN": "abc", "PORT": "eighty"},
    {"TELEGRAM_BOT_TOKEN": "abc", "SESSION_BACKEND": "redis"},
])
def test_invalid_values_are_fatal(env) -> None:
    with pytest.raises(ConfigurationError):
        load_config(env)


def test_reads_process_environment(monkeypatch) -> None:
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "from-env")
    monkeypatch.delenv("SESSION_BACKEND", raising=False)
    monkeypatch.delenv("PORT", raising=False)

    assert load_config().bot_token == "from-env"


def test_temporal_settings() -> None:
    config = load_config({
        "TELEGRAM_BOT_TOKEN": "abc",
        "TEMPORAL_ADDRESS": "temporal:7233",
        "TEMPORAL_NAMESPACE": "games",
        "TEMPORAL_PROFILE": "prod",
        "TEMPORAL_CONFIG_FILE": "/etc/temporal.toml",
    })

    assert config.temporal == TemporalConfig(
        address="temporal:7233",
        namespace="games",
        profile="prod",
        config_file=pathlib.Path("/etc/temporal.toml"),
    )


def test_worker_settings_need_no_bot_token() -> None:
    assert load_temporal_config({}) == TemporalConfig()
