"""Environment-driven configuration for the bot processes."""
import os
import pathlib
from dataclasses import dataclass, field
from typing import Mapping, Optional

from minesweeper_bot.errors import ConfigurationError

BACKENDS = ('memory', 'temporal')


@dataclass(frozen=True)
class TemporalConfig:
    """Where the session workflows live.

    A named ``profile`` is looked up in ``config_file`` (or the platform's
    default temporal.toml) and wins over ``address``/``namespace``.
    """
    address: str = "localhost:7233"
    namespace: str = "default"
    profile: Optional[str] = None
    config_file: Optional[pathlib.Path] = None


@dataclass(frozen=True)
class AppConfig:
    """Settings read once at startup."""
    bot_token: str
    port: int = 3000
    session_backend: str = 'memory'
    temporal: TemporalConfig = field(default_factory=TemporalConfig)


def load_temporal_config(environ: Optional[Mapping[str, str]] = None) -> TemporalConfig:
    """Read the Temporal connection settings; the worker needs only these."""
    env = os.environ if environ is None else environ
    config_file = env.get("TEMPORAL_CONFIG_FILE")
    return TemporalConfig(
        address=env.get("TEMPORAL_ADDRESS", "localhost:7233"),
        namespace=env.get("TEMPORAL_NAMESPACE", "default"),
        profile=env.get("TEMPORAL_PROFILE") or None,
        config_file=pathlib.Path(config_file) if config_file else None,
    )


def load_config(environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Read configuration from the environment.

    Raises ConfigurationError when the bot token is missing, before any
    transport or game state is created.
    """
    env = os.environ if environ is None else environ

    bot_token = env.get("TELEGRAM_BOT_TOKEN", "").strip()
    if not bot_token:
        raise ConfigurationError("TELEGRAM_BOT_TOKEN is not set")

    backend = env.get("SESSION_BACKEND", "memory").strip().lower()
    if backend not in BACKENDS:
        raise ConfigurationError(f"SESSION_BACKEND must be one of {', '.join(BACKENDS)}, got {backend!r}")

    try:
        port = int(env.get("PORT", 3000))
    except ValueError as error:
        raise ConfigurationError(f"PORT must be an integer, got {env.get('PORT')!r}") from error

    return AppConfig(
        bot_token=bot_token,
        port=port,
        session_backend=backend,
        temporal=load_temporal_config(env),
    )
