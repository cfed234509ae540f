"""
Foundry — Shared Response Schemas
==================================

Pagination wrapper, error envelope, health and queue responses shared by
every controller.
"""

from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class OffsetPagination(BaseModel, Generic[T]):
    """
    Paginated list wrapper.

    Clients request a page with ?limit=&offset= and use `total` to render
    "Showing 21-40 of 157". The same total is sent in the X-Total-Count header.
    """

    items: List[T] = Field(description="Items on this page")
    total: int = Field(description="Total number of items matching the filters")
    limit: int = Field(description="Requested page size")
    offset: int = Field(description="Index of the first item on this page")


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "permission_denied",
            "message": "Only team admins can manage members",
            "details": {"team_id": "..."},
            "request_id": "a1b2c3d4"
        }
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    """Returned by GET /health for Docker health checks and load balancers."""

    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    cache: str = Field(description="Redis connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")


class QueueInfoResponse(BaseModel):
    """Snapshot of the background queue as reported by SAQ."""

    name: str = Field(description="Queue name")
    workers: int = Field(default=0, description="Number of workers currently polling")
    queued: int = Field(default=0, description="Jobs waiting to run")
    active: int = Field(default=0, description="Jobs currently running")
    scheduled: int = Field(default=0, description="Jobs scheduled for later")


class JobEnqueuedResponse(BaseModel):
    """Acknowledgement that a job was handed to the queue (HTTP 202)."""

    job_key: str = Field(description="SAQ job key, usable to look the job up")
    function: str = Field(description="Task function name")
    status: str = Field(description="Job status at enqueue time")
