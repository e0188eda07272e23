"""Schemas for manually triggering scheduler jobs."""

from enum import Enum
from typing import Any

from core.schemas.base_schema_model import BaseSchemaModel


class SchedulerJob(str, Enum):
    """Jobs an administrator may run on demand."""

    REMINDERS = "reminders"
    CLEANUP = "cleanup"


class SchedulerRunRequest(BaseSchemaModel):
    """Job to run."""

    job: SchedulerJob


class SchedulerRunResponse(BaseSchemaModel):
    """Outcome of a manual job run."""

    job: SchedulerJob
    result: dict[str, Any]
