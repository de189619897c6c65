"""Temporal worker hosting the session workflows."""
import asyncio
import logging
from temporalio.worker import Worker
from minesweeper_bot.client_provider import TASK_QUEUE, get_temporal_client
from minesweeper_bot.config import load_temporal_config
from minesweeper_bot.workflows import MinesweeperSessionWorkflow

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def main():
    """Start the Temporal worker."""
    client = await get_temporal_client(load_temporal_config())

    worker = Worker(
        client,
        task_queue=TASK_QUEUE,
        workflows=[MinesweeperSessionWorkflow],
    )

    logger.info("Worker started, connected to Temporal")
    logger.info(f"Listening on task queue: {TASK_QUEUE}")

    await worker.run()


if __name__ == "__main__":
    asyncio.run(main())
