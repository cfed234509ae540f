"""
Foundry — System Routes (background queue)
===========================================

Superuser-only views onto the SAQ queue, plus an echo job that checks the
API → Redis → worker round trip end to end.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from foundry.auth.guards import requires_superuser
from foundry.schemas.common import ErrorResponse, JobEnqueuedResponse, QueueInfoResponse
from foundry.worker.queue import enqueue, queue_info

router = APIRouter(
    prefix="/api/system",
    tags=["System"],
    dependencies=[Depends(requires_superuser)],
    responses={503: {"description": "Queue unavailable", "model": ErrorResponse}},
)


@router.get("/queue", response_model=QueueInfoResponse, summary="Queue statistics")
async def get_queue_info() -> QueueInfoResponse:
    info: Dict[str, Any] = await queue_info()
    return QueueInfoResponse(**info)


@router.post(
    "/jobs/echo",
    status_code=202,
    response_model=JobEnqueuedResponse,
    summary="Enqueue the echo job",
)
async def enqueue_echo(
    message: str = Body("ping", embed=True, max_length=500),
) -> JobEnqueuedResponse:
    job = await enqueue("background_worker_task", message=message)
    return JobEnqueuedResponse(
        job_key=job.key,
        function=job.function,
        status=str(getattr(job.status, "value", job.status)),
    )
