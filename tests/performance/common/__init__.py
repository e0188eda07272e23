"""Shared locust users for the performance suite."""

import os
import random
import uuid
from datetime import UTC, datetime, timedelta

import jwt
from locust import HttpUser, between

API_PREFIX = "/api/v1/workspace"


def mint_token(user_id: str, scopes: list[str]) -> str:
    """Sign an access token with the secret the target server verifies."""
    payload = {
        "sub": user_id,
        "user_id": user_id,
        "client_id": "locust",
        "scopes": scopes,
        "type": "access_token",
        "exp": datetime.now(UTC) + timedelta(hours=2),
    }
    return jwt.encode(payload, os.environ["JWT_SECRET"], algorithm="HS256")


class BasePerformanceUser(HttpUser):
    """Authenticated user acting on its own notifications.

    `LOCUST_OWNER_IDS` lists existing users (comma separated); each
    simulated user picks one so foreign keys resolve.
    """

    abstract = True
    wait_time = between(1, 3)
    scopes: tuple[str, ...] = ("notification:user",)

    def on_start(self):
        owner_ids = [
            owner_id
            for owner_id in os.environ.get("LOCUST_OWNER_IDS", "").split(",")
            if owner_id
        ]
        self.owner_id = random.choice(owner_ids) if owner_ids else str(uuid.uuid4())
        token = mint_token(self.owner_id, list(self.scopes))
        self.client.headers["Authorization"] = f"Bearer {token}"
