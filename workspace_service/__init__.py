"""Django project package for the workspace notification service."""
