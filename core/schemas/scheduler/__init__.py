"""Scheduler schemas."""

from core.schemas.scheduler.scheduler_run import (
    SchedulerJob,
    SchedulerRunRequest,
    SchedulerRunResponse,
)

__all__ = ["SchedulerJob", "SchedulerRunRequest", "SchedulerRunResponse"]
