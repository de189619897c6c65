"""Session backends used by the HTTP server."""
import asyncio
import logging
from typing import Optional

from temporalio.client import Client
from temporalio.common import WorkflowIDConflictPolicy

from minesweeper_bot.client_provider import TASK_QUEUE, get_temporal_client, session_workflow_id
from minesweeper_bot.config import TemporalConfig
from minesweeper_bot.controller import GameSessionController
from minesweeper_bot.session_store import SessionStore
from minesweeper_bot.types import ActionRequest, ActionResult
from minesweeper_bot.workflows import MinesweeperSessionWorkflow

logger = logging.getLogger(__name__)


class LocalSessionBackend:
    """Keeps every session in this process's memory."""

    def __init__(self, store: Optional[SessionStore] = None, controller: Optional[GameSessionController] = None):
        self.store = store or SessionStore()
        self.controller = controller or GameSessionController(self.store)

    def apply(self, session_id: str, request: ActionRequest) -> ActionResult:
        return self.controller.dispatch(session_id, request)

    def describe(self, session_id: str) -> ActionResult:
        return self.controller.describe(session_id)

    def close(self) -> None:
        self.store.close()


class TemporalSessionBackend:
    """Runs each session as a MinesweeperSessionWorkflow."""

    def __init__(self, client: Client):
        self.client = client

    @classmethod
    def connect(cls, config: TemporalConfig) -> 'TemporalSessionBackend':
        client = asyncio.run(get_temporal_client(config))
        logger.info("Connected to Temporal server")
        return cls(client)

    async def _session_handle(self, session_id: str):
        # Starts the session workflow on first contact, reuses it afterwards
        return await self.client.start_workflow(
            MinesweeperSessionWorkflow.run,
            session_id,
            id=session_workflow_id(session_id),
            task_queue=TASK_QUEUE,
            id_conflict_policy=WorkflowIDConflictPolicy.USE_EXISTING,
        )

    def apply(self, session_id: str, request: ActionRequest) -> ActionResult:
        async def execute_action():
            handle = await self._session_handle(session_id)
            return await handle.execute_update(MinesweeperSessionWorkflow.apply_action, request)

        return asyncio.run(execute_action())

    def describe(self, session_id: str) -> ActionResult:
        async def query_session():
            handle = await self._session_handle(session_id)
            return await handle.query(MinesweeperSessionWorkflow.describe)

        return asyncio.run(query_session())

    def close(self) -> None:
        # Session workflows outlive the server; they end on their own inactivity timer.
        pass
