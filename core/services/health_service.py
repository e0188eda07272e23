"""Liveness and readiness checks for the workspace notification service."""

import time
from collections.abc import Callable

from django.core.cache import cache
from django.db import connection
from django.db.utils import OperationalError

import django_rq
import structlog

from core.constants import DEFAULT_QUEUE_NAME
from core.enums import HealthStatus
from core.schemas.health import (
    DependencyHealth,
    LivenessResponse,
    ReadinessResponse,
)

logger = structlog.get_logger(__name__)

HEALTH_CHECK_CACHE_KEY = "workspace:health-check"


class HealthService:
    """Probe the database, the cache and the job queue.

    Results are memoised per dependency for `cache_ttl_seconds` so that
    frequent probes do not hammer the dependencies.
    """

    def __init__(self, cache_ttl_seconds: float = 5.0) -> None:
        """Initialize the health service.

        Args:
            cache_ttl_seconds: Time to live for cached health check results
        """
        self.cache_ttl_seconds = cache_ttl_seconds
        self._results: dict[str, tuple[float, DependencyHealth]] = {}
        self._checks: dict[str, Callable[[], str]] = {
            "database": self._ping_database,
            "cache": self._ping_cache,
            "queue": self._ping_queue,
        }

    def get_liveness_status(self) -> LivenessResponse:
        """The process answers, so it is alive."""
        return LivenessResponse(status="alive")

    def get_readiness_status(self) -> ReadinessResponse:
        """Check every dependency.

        The service reports `degraded` rather than not ready when a
        dependency is down: reads and writes fail individually while the
        rest of the API keeps serving.
        """
        dependencies = {name: self.check(name) for name in self._checks}
        degraded = not all(health.healthy for health in dependencies.values())
        return ReadinessResponse(
            ready=True,
            status="degraded" if degraded else "ready",
            degraded=degraded,
            dependencies=dependencies,
        )

    def check(self, name: str) -> DependencyHealth:
        """Return the memoised or fresh health of one dependency."""
        now = time.time()
        cached = self._results.get(name)
        if cached is not None and now - cached[0] < self.cache_ttl_seconds:
            return cached[1]

        start_time = time.perf_counter()
        try:
            message = self._checks[name]()
            health = DependencyHealth(
                healthy=True, status=HealthStatus.HEALTHY, message=message
            )
        except OperationalError as e:
            health = DependencyHealth(
                healthy=False,
                status=HealthStatus.UNHEALTHY,
                message=f"{name.capitalize()} connection failed: {e!s}",
            )
        except Exception as e:
            health = DependencyHealth(
                healthy=False,
                status=HealthStatus.ERROR,
                message=f"Unexpected error checking {name}: {e!s}",
            )
        health.response_time_ms = (time.perf_counter() - start_time) * 1000

        if not health.healthy:
            logger.warning(
                "dependency_unhealthy", dependency=name, message=health.message
            )
        self._results[name] = (now, health)
        return health

    def _ping_database(self) -> str:
        connection.ensure_connection()
        return "Database connection successful"

    def _ping_cache(self) -> str:
        cache.set(HEALTH_CHECK_CACHE_KEY, "ok", timeout=1)
        if cache.get(HEALTH_CHECK_CACHE_KEY) != "ok":
            raise OperationalError("unexpected cache read-back")
        return "Cache connection successful"

    def _ping_queue(self) -> str:
        django_rq.get_connection(DEFAULT_QUEUE_NAME).ping()
        return "Queue connection successful"


health_service = HealthService()
