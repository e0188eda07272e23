"""Response bodies of the liveness and readiness probes."""

from datetime import UTC, datetime

from pydantic import Field

from core.schemas.base_schema_model import BaseSchemaModel
from core.schemas.health.dependency_health import DependencyHealth


def _now() -> datetime:
    return datetime.now(UTC)


class LivenessResponse(BaseSchemaModel):
    """Liveness probe body. Never inspects dependencies."""

    status: str = Field(..., description="Always 'alive'")
    checked_at: datetime = Field(default_factory=_now)


class ReadinessResponse(BaseSchemaModel):
    """Readiness probe body with per-dependency detail."""

    ready: bool
    status: str = Field(..., description="'ready' or 'degraded'")
    degraded: bool
    dependencies: dict[str, DependencyHealth]
    checked_at: datetime = Field(default_factory=_now)
