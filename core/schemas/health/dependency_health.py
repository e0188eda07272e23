"""Health of a single backing dependency."""

from pydantic import Field

from core.enums import HealthStatus
from core.schemas.base_schema_model import BaseSchemaModel


class DependencyHealth(BaseSchemaModel):
    """Outcome of probing the database, the cache or the job queue."""

    healthy: bool
    status: HealthStatus
    message: str
    response_time_ms: float | None = Field(None, ge=0)
