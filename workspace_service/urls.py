"""Root URL configuration for the workspace notification service."""

from django.urls import include, path

urlpatterns = [
    path("api/v1/workspace/", include("core.urls")),
]
