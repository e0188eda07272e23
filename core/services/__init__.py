"""Services for the core app."""

from core.services.email_service import EmailService
from core.services.health_service import HealthService, health_service

# Services that import models are not exported here to avoid circular
# imports during Django app initialization. Import directly from the module.

__all__ = [
    "EmailService",
    "HealthService",
    "health_service",
]
