import logging
import os
import pathlib
import platform
from typing import Any, Dict, Mapping, Optional
from temporalio.client import Client
from temporalio.envconfig import ClientConfig

from minesweeper_bot.config import TemporalConfig

TASK_QUEUE = "minesweeper-task-queue"

logger = logging.getLogger(__name__)


def session_workflow_id(session_id: str) -> str:
    """Workflow id of the session workflow for a conversation."""
    return f"minesweeper-session-{session_id}"


def default_config_file(environ: Optional[Mapping[str, str]] = None, system: Optional[str] = None,
                        home: Optional[pathlib.Path] = None) -> pathlib.Path:
    """Platform location of temporal.toml."""
    env = os.environ if environ is None else environ
    system = system or platform.system()
    home = home or pathlib.Path.home()

    if system == "Windows":
        app_data = env.get("AppData")
        if app_data is None:
            raise RuntimeError("AppData environment variable not set")
        return pathlib.Path(app_data) / "temporalio/temporal.toml"
    if system == "Darwin":
        return home / "Library/Application Support/temporalio/temporal.toml"
    xdg_config_home = env.get("XDG_CONFIG_HOME")
    base = pathlib.Path(xdg_config_home) if xdg_config_home else home / ".config"
    return base / "temporalio/temporal.toml"


def connect_options(config: TemporalConfig) -> Dict[str, Any]:
    """Keyword arguments for Client.connect.

    A configured profile is used only when its file exists; otherwise the
    plain address and namespace apply.
    """
    if config.profile:
        config_file = config.config_file or default_config_file()
        if config_file.is_file():
            return ClientConfig.load_client_connect_config(
                profile=config.profile,
                config_file=str(config_file),
            )
        logger.warning(f"Temporal profile {config.profile!r} requested but {config_file} does not exist")
    return {"target_host": config.address, "namespace": config.namespace}


async def get_temporal_client(config: TemporalConfig) -> Client:
    """Connect to the Temporal service hosting the session workflows."""
    return await Client.connect(**connect_options(config))
