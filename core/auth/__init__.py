"""Authentication and authorization for the workspace notification service."""
