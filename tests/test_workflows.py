"""Tests for the Temporal session workflow.

These start Temporal's time-skipping test server, which is downloaded on
first use, so they only run when MINESWEEPER_TEMPORAL_TESTS is set.
"""

import asyncio
import os
import uuid

import pytest

from minesweeper_bot.types import ActionRequest, ActionType, GameStatus, Outcome, Screen, Settings

pytestmark = pytest.mark.skipif(
    not os.getenv("MINESWEEPER_TEMPORAL_TESTS"),
    reason="set MINESWEEPER_TEMPORAL_TESTS=1 to run Temporal workflow tests",
)


async def run_session(actions):
    from temporalio.testing import WorkflowEnvironment
    from temporalio.worker import Worker

    from minesweeper_bot.workflows import MinesweeperSessionWorkflow

    task_queue = f"test-{uuid.uuid4()}"
    async with await WorkflowEnvironment.start_time_skipping() as env:
        async with Worker(env.client, task_queue=task_queue, workflows=[MinesweeperSessionWorkflow]):
            handle = await env.client.start_workflow(
                MinesweeperSessionWorkflow.run,
                "chat-1",
                id=f"minesweeper-session-{uuid.uuid4()}",
                task_queue=task_queue,
            )
            results = [
                await handle.execute_update(MinesweeperSessionWorkflow.apply_action, action)
                for action in actions
            ]
            described = await handle.query(MinesweeperSessionWorkflow.describe)
            await handle.signal(MinesweeperSessionWorkflow.close_session)
            await handle.result()
            return results, described


def test_session_workflow_plays_a_game() -> None:
    results, described = asyncio.run(run_session([
        ActionRequest(action=ActionType.REQUEST_CUSTOM_SETTINGS),
        ActionRequest(action=ActionType.SUBMIT_CUSTOM_SETTINGS, text="3,3,1"),
        ActionRequest(action=ActionType.START_NEW_GAME),
    ]))

    assert results[0].screen == Screen.CUSTOM_SETTINGS_PROMPT
    assert results[1].outcome == Outcome.OK
    assert results[1].settings == Settings(3, 3, 1)
    assert results[2].status == GameStatus.IN_PROGRESS
    assert results[2].board.rows == 3
    assert described.screen == Screen.BOARD
    assert described.board.cells == results[2].board.cells


def test_session_workflow_rejects_selection_without_game() -> None:
    results, _ = asyncio.run(run_session([
        ActionRequest(action=ActionType.SELECT_CELL, row=0, col=0),
    ]))

    assert results[0].outcome == Outcome.INACTIVE_GAME
