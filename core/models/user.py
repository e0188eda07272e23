"""Read-only view of the identity service's users table."""

import uuid

from django.db import models


class User(models.Model):
    """Owner of notifications, reminders, preferences and subscriptions.

    Rows are written by the identity service; this service only resolves
    the address the email channel sends to.
    """

    user_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    username = models.CharField(max_length=50, unique=True)
    email = models.EmailField(max_length=255, unique=True)
    full_name = models.CharField(max_length=255, default="", blank=True)

    class Meta:
        db_table = "users"
        managed = False

    def __str__(self) -> str:
        return self.full_name or self.username
