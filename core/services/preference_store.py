"""Keyed read/write store for per-user notification preferences."""

from typing import Any

from django.db import transaction

import structlog

from core.models import NotificationPreference
from core.schemas.preference import PreferenceUpdateRequest

logger = structlog.get_logger(__name__)

# Stored as JSON maps and merged key-wise on update
_MERGED_FIELDS = ("categories", "category_channels")


class PreferenceStore:
    """Read and write NotificationPreference rows.

    No gating logic lives here. The notification service interprets the
    record; this store only loads and persists it.
    """

    def get(self, owner_id) -> NotificationPreference:
        """Return the owner's preferences, creating the default row on first access.

        Args:
            owner_id: ID of the owning user.

        Returns:
            Persisted NotificationPreference instance.
        """
        preference, created = NotificationPreference.objects.get_or_create(
            user_id=owner_id
        )
        if created:
            logger.info("notification_preferences_created", owner_id=str(owner_id))
        return preference

    def get_or_default(self, owner_id) -> NotificationPreference:
        """Return stored preferences, or unsaved defaults when none exist.

        Used on the notify path, which only reads preferences.

        Args:
            owner_id: ID of the owning user.

        Returns:
            NotificationPreference instance, possibly unsaved.
        """
        preference = NotificationPreference.objects.filter(user_id=owner_id).first()
        if preference is None:
            preference = NotificationPreference(user_id=owner_id)
        return preference

    def set(
        self, owner_id, partial: PreferenceUpdateRequest | dict[str, Any]
    ) -> NotificationPreference:
        """Apply a partial update to the owner's preferences.

        Scalar fields are replaced. The `categories` and `category_channels`
        maps are merged into the stored maps so that toggling one category
        leaves the others alone. Explicit nulls are ignored.

        Args:
            owner_id: ID of the owning user.
            partial: Validated update, or a raw dict validated here.

        Returns:
            The updated NotificationPreference.

        Raises:
            pydantic.ValidationError: If a raw dict contains unknown keys or
                invalid values.
        """
        if not isinstance(partial, PreferenceUpdateRequest):
            partial = PreferenceUpdateRequest.model_validate(partial)
        changes = {
            key: value for key, value in partial.changes().items() if value is not None
        }

        with transaction.atomic():
            self.get(owner_id)
            preference = NotificationPreference.objects.select_for_update().get(
                user_id=owner_id
            )
            for field, value in changes.items():
                if field == "category_channels":
                    merged = dict(preference.category_channels)
                    for category, channels in value.items():
                        merged[category] = {**merged.get(category, {}), **channels}
                    value = merged
                elif field in _MERGED_FIELDS:
                    value = {**getattr(preference, field), **value}
                setattr(preference, field, value)
            if changes:
                preference.save()

        logger.info(
            "notification_preferences_updated",
            owner_id=str(owner_id),
            fields=sorted(changes),
        )
        return preference


preference_store = PreferenceStore()
