"""Test data builders backed by Faker.

Each helper persists one row with realistic defaults; keyword arguments
override any field.
"""

from datetime import UTC, datetime, timedelta

from django.conf import settings
from django.utils import timezone

import jwt
from faker import Faker

from core.constants import SCOPE_USER
from core.enums import NotificationType
from core.models import (
    Notification,
    NotificationPreference,
    PushSubscription,
    Reminder,
    User,
)
from core.models.push_subscription import hash_endpoint

fake = Faker()


def create_user(**kwargs) -> User:
    """Persist a user with a unique username and e-mail."""
    defaults = {
        "username": fake.unique.user_name()[:50],
        "email": fake.unique.email(),
        "full_name": fake.name(),
    }
    defaults.update(kwargs)
    return User.objects.create(**defaults)


def create_notification(user: User, **kwargs) -> Notification:
    """Persist an unread notification for `user`."""
    defaults = {
        "type": NotificationType.CUSTOM.value,
        "tag": f"custom:{fake.uuid4()}",
        "title": fake.sentence(nb_words=4),
        "body": fake.sentence(),
    }
    defaults.update(kwargs)
    return Notification.objects.create(user=user, **defaults)


def create_reminder(user: User, **kwargs) -> Reminder:
    """Persist a pending reminder due in one hour."""
    defaults = {
        "title": fake.sentence(nb_words=3),
        "description": fake.sentence(),
        "remind_at": timezone.now() + timedelta(hours=1),
    }
    defaults.update(kwargs)
    return Reminder.objects.create(user=user, **defaults)


def create_preference(user: User, **kwargs) -> NotificationPreference:
    """Persist a preference record for `user`."""
    return NotificationPreference.objects.create(user=user, **kwargs)


def create_push_subscription(user: User, **kwargs) -> PushSubscription:
    """Persist an active push subscription for `user`."""
    endpoint = kwargs.pop(
        "endpoint", f"https://fcm.googleapis.com/fcm/send/{fake.uuid4()}"
    )
    defaults = {
        "endpoint": endpoint,
        "endpoint_hash": hash_endpoint(endpoint),
        "p256dh": fake.sha256(),
        "auth": fake.md5(),
        "device_name": "Laptop",
    }
    defaults.update(kwargs)
    return PushSubscription.objects.create(user=user, **defaults)


def make_access_token(
    user_id,
    /,
    scopes: list[str] | str | None = None,
    expires_in: timedelta = timedelta(hours=1),
    **claims,
) -> str:
    """Sign an access token the way the auth service issues them."""
    payload = {
        "sub": str(user_id),
        "user_id": str(user_id),
        "client_id": "workspace-web",
        "scopes": scopes if scopes is not None else [SCOPE_USER],
        "type": "access_token",
        "exp": datetime.now(UTC) + expires_in,
    }
    payload.update(claims)
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")
