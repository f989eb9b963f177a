"""Worker process for release workflows."""

import asyncio
import logging
import signal
import sys
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from temporalio.client import Client
from temporalio.worker import Worker

from changeset_release.temporal.activities import ReleaseActivities
from changeset_release.temporal.config import (
    TEMPORAL_TASK_QUEUE,
    get_temporal_client,
    validate_configuration,
)
from changeset_release.temporal.workflows import ReleaseWorkflow

logger = logging.getLogger(__name__)


class ReleaseWorker:
    """Worker hosting the release workflow and its activities."""

    def __init__(self, max_workers: int = 4):
        self.max_workers = max_workers
        self.client: Optional[Client] = None
        self.worker: Optional[Worker] = None
        self.running = False
        self.shutdown_event = asyncio.Event()

    async def start(self) -> None:
        """Start the worker and block until it stops."""
        try:
            validate_configuration()
            self.client = await get_temporal_client()
            logger.info("✅ Connected to Temporal")

            release_activities = ReleaseActivities()

            # Release activities block on git and the completion API
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                self.worker = Worker(
                    self.client,
                    task_queue=TEMPORAL_TASK_QUEUE,
                    workflows=[ReleaseWorkflow],
                    activities=[
                        release_activities.test_connectivity,
                        release_activities.cut_release,
                    ],
                    activity_executor=executor,
                )

                logger.info("🔧 Starting Temporal worker for release workflows...")
                logger.info(f"📋 Task queue: {TEMPORAL_TASK_QUEUE}")
                logger.info(f"💼 Max workers: {self.max_workers}")

                self.running = True

                worker_task = asyncio.create_task(self.worker.run())
                shutdown_task = asyncio.create_task(self.shutdown_event.wait())

                done, pending = await asyncio.wait(
                    [worker_task, shutdown_task],
                    return_when=asyncio.FIRST_COMPLETED,
                )

                for task in pending:
                    task.cancel()
                    try:
                        await task
                    except asyncio.CancelledError:
                        pass

                logger.info("🛑 Worker stopped")

        except Exception as e:
            logger.error(f"❌ Worker failed to start: {e}")
            raise

    async def stop(self) -> None:
        """Gracefully stop the worker."""
        if self.running:
            logger.info("🛑 Stopping worker...")
            self.running = False
            self.shutdown_event.set()


async def main() -> None:
    """Main worker entry point with signal handling."""
    worker = ReleaseWorker()
    loop = asyncio.get_running_loop()

    for signum in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(signum, lambda: asyncio.ensure_future(worker.stop()))

    try:
        await worker.start()
    except Exception as e:
        logger.error(f"Worker error: {e}")
        sys.exit(1)


def run() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(main())


if __name__ == "__main__":
    run()
