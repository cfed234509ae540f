"""
Foundry — Job Queue (Producer Side)
====================================

What:  Lazily-created, process-wide SAQ Queue plus helpers to enqueue jobs
       and inspect the queue.
How:   saq.Queue.from_url() builds a Redis-backed queue; nothing connects
       until the first command. Transport failures are converted into
       QueueError (→ HTTP 503).
Who:   Controllers (signup, system endpoints), the health check and the
       worker settings.
"""

import logging
from typing import Any, Dict, Optional

from redis.exceptions import RedisError
from saq import Job, Queue

from foundry.config import settings
from foundry.exceptions import QueueError

logger = logging.getLogger(__name__)

_queue: Optional[Queue] = None


def get_queue() -> Queue:
    """Return the shared queue, creating it on first use."""
    global _queue
    if _queue is None:
        _queue = Queue.from_url(settings.redis_url, name=settings.queue_name)
    return _queue


async def enqueue(function: str, **kwargs: Any) -> Job:
    """
    Hand a job to the worker.

    Args:
        function: task function name as registered in worker settings
        kwargs:   keyword arguments passed to the task

    Raises:
        QueueError: Redis is unreachable or SAQ refused the job.
    """
    kwargs.setdefault("timeout", settings.worker_job_timeout)
    try:
        job = await get_queue().enqueue(function, **kwargs)
    except (RedisError, OSError) as e:
        logger.error("Could not enqueue %s: %s", function, str(e))
        raise QueueError(context={"function": function, "error_type": type(e).__name__})
    if job is None:
        raise QueueError(
            message=f"Job '{function}' was not accepted by the queue",
            context={"function": function},
        )
    logger.info("Enqueued %s (job=%s)", function, job.key)
    return job


async def queue_info() -> Dict[str, Any]:
    """Counts reported by SAQ for the shared queue."""
    queue = get_queue()
    try:
        info = await queue.info(jobs=False)
    except (RedisError, OSError) as e:
        logger.error("Could not read queue info: %s", str(e))
        raise QueueError(context={"error_type": type(e).__name__})
    return {
        "name": info.get("name", queue.name),
        "workers": len(info.get("workers") or {}),
        "queued": info.get("queued", 0),
        "active": info.get("active", 0),
        "scheduled": info.get("scheduled", 0),
    }


async def close_queue() -> None:
    """Disconnect the shared queue (API/worker shutdown)."""
    global _queue
    if _queue is not None:
        await _queue.disconnect()
        _queue = None
