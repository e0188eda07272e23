"""Middleware components for the workspace notification service."""

from core.middleware.request_context import RequestContextMiddleware

__all__ = ["RequestContextMiddleware"]
