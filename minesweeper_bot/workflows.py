"""Temporal workflow hosting one chat session."""
import asyncio
from contextlib import nullcontext
from datetime import timedelta
from temporalio import workflow

with workflow.unsafe.imports_passed_through():
    from minesweeper_bot.controller import GameSessionController
    from minesweeper_bot.session_store import SessionStore
    from minesweeper_bot.types import ActionRequest, ActionResult

INACTIVITY_TIMEOUT = timedelta(hours=24)


@workflow.defn
class MinesweeperSessionWorkflow:
    """Workflow that owns the game state of a single conversation.

    Update handlers are synchronous, so actions on the session are applied
    one at a time. Board randomness comes from ``workflow.random()`` to keep
    replays deterministic.
    """

    @workflow.init
    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        self.store = SessionStore(lock_factory=nullcontext)
        self.store.get_or_create(session_id)
        self.controller = GameSessionController(self.store, rng=workflow.random())
        self.actions_handled = 0
        self.should_close = False

    @workflow.run
    async def run(self, session_id: str) -> None:
        """Keep the session alive until it is closed or goes idle."""
        while not self.should_close:
            seen = self.actions_handled
            try:
                await workflow.wait_condition(
                    lambda: self.should_close or self.actions_handled != seen,
                    timeout=INACTIVITY_TIMEOUT,
                )
            except asyncio.TimeoutError:
                workflow.logger.info(f"Session {session_id} closing after {INACTIVITY_TIMEOUT} of inactivity")
                break

        self.store.close()
        workflow.logger.info(f"Minesweeper session workflow {session_id} completed")

    @workflow.update
    def apply_action(self, request: ActionRequest) -> ActionResult:
        """Apply an inbound action and return the resulting view."""
        self.actions_handled += 1
        return self.controller.dispatch(self.session_id, request)

    @apply_action.validator
    def validate_action(self, request: ActionRequest) -> None:
        if self.should_close:
            raise ValueError(f"Session {self.session_id} is closed")

    @workflow.query
    def describe(self) -> ActionResult:
        """Current view of the session."""
        return self.controller.describe(self.session_id)

    @workflow.signal
    def close_session(self) -> None:
        """Signal to end the session workflow."""
        self.should_close = True
