"""
Foundry — Worker Settings
==========================

What:  Builds the SAQ Worker configuration and runs the worker process.
How:   worker_settings() returns the keyword arguments for saq.Worker;
       run_worker() constructs the Worker and blocks in Worker.start(),
       which installs its own SIGINT/SIGTERM handlers.
Who:   `foundry worker` (CLI) and `foundry run --with-worker`.
"""

import asyncio
import logging
from typing import Any, Dict

from saq import CronJob, Worker

from foundry.config import settings
from foundry.database import dispose_engine
from foundry.logging_config import setup_logging
from foundry.worker.queue import get_queue
from foundry.worker.tasks import background_worker_task, system_upkeep, user_registered

logger = logging.getLogger(__name__)

TASKS = [user_registered, background_worker_task, system_upkeep]


async def on_startup(ctx: Dict[str, Any]) -> None:
    setup_logging()
    logger.info(
        "Worker started on queue '%s' (concurrency=%d)",
        settings.queue_name,
        settings.worker_concurrency,
    )


async def on_shutdown(ctx: Dict[str, Any]) -> None:
    await dispose_engine()
    logger.info("Worker stopped")


def worker_settings() -> Dict[str, Any]:
    return {
        "queue": get_queue(),
        "functions": TASKS,
        "concurrency": settings.worker_concurrency,
        "cron_jobs": [
            CronJob(system_upkeep, cron=settings.upkeep_cron, unique=True, timeout=60),
        ],
        "startup": on_startup,
        "shutdown": on_shutdown,
    }


def run_worker() -> None:
    """Blocking entry point for the worker process."""
    setup_logging()
    settings.validate_required_for_production()
    worker = Worker(**worker_settings())
    asyncio.run(worker.start())
