"""Health status of a backing dependency."""

from enum import Enum


class HealthStatus(str, Enum):
    """Result of a dependency probe."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    ERROR = "error"
