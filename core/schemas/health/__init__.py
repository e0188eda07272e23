"""Health check schemas."""

from core.schemas.health.dependency_health import DependencyHealth
from core.schemas.health.probe_response import LivenessResponse, ReadinessResponse

__all__ = ["DependencyHealth", "LivenessResponse", "ReadinessResponse"]
