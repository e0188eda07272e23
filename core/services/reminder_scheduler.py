"""Reminder lifecycle and the periodic due-reminder scan.

A tick selects reminders with an unfired due occurrence, claims each one
with a conditional UPDATE inside its own transaction, and emits one
notification per claimed reminder. Repeating reminders move to their next
occurrence; non-repeating ones stay overdue until their owner completes
them. Ticks never overlap: a cache lock guards the scan, and the claim
keeps two scheduler processes from firing the same occurrence.
"""

import calendar
import threading
import uuid
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta
from typing import Any

from django.conf import settings
from django.core.cache import cache
from django.db import close_old_connections, transaction
from django.utils import timezone

import structlog

from core.constants import REMINDER_SCHEDULER_LOCK_KEY
from core.enums import NotificationType, ReminderStatusFilter, RepeatType
from core.exceptions import (
    ConflictError,
    InvalidReminderOperationError,
    ReminderNotFoundError,
)
from core.models import Reminder
from core.schemas.reminder import ReminderCreateRequest, ReminderUpdateRequest
from core.services.notification_service import (
    NotificationService,
    notification_service,
)

logger = structlog.get_logger(__name__)


def add_months(moment: datetime, months: int = 1) -> datetime:
    """Add calendar months, clamping the day to the target month's length.

    2024-01-31 plus one month is 2024-02-29.
    """
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


NEXT_OCCURRENCE: dict[RepeatType, Callable[[datetime], datetime]] = {
    RepeatType.DAILY: lambda moment: moment + timedelta(days=1),
    RepeatType.WEEKLY: lambda moment: moment + timedelta(days=7),
    RepeatType.MONTHLY: add_months,
}


@dataclass
class TickResult:
    """Counters of one scheduler tick."""

    started_at: datetime
    due: int = 0
    fired: int = 0
    skipped: int = 0
    failed: int = 0
    fired_ids: list[int] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        """JSON-friendly representation."""
        result = asdict(self)
        result["started_at"] = self.started_at.isoformat()
        return result


def reminder_tag(reminder_id: int, occurrence: datetime) -> str:
    """Dedupe tag of one occurrence: "reminder:{id}:{epoch seconds}"."""
    return f"reminder:{reminder_id}:{int(occurrence.timestamp())}"


class ReminderScheduler:
    """Owns reminder CRUD, completion, snooze and due detection."""

    def __init__(
        self,
        notifications: NotificationService | None = None,
        interval_seconds: int | None = None,
        batch_size: int | None = None,
        lock_ttl: int | None = None,
    ) -> None:
        """Initialize the scheduler.

        Unset tuning values fall back to the REMINDER_SCHEDULER_* settings,
        read at use time.

        Args:
            notifications: Service the scheduler emits notifications through.
            interval_seconds: Pause between ticks of the background loop.
            batch_size: Maximum reminders fired per tick.
            lock_ttl: Expiry of the single-flight lock in seconds.
        """
        self.notifications = notifications or notification_service
        self._interval_seconds = interval_seconds
        self._batch_size = batch_size
        self._lock_ttl = lock_ttl
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def interval_seconds(self) -> int:
        return self._interval_seconds or settings.REMINDER_SCHEDULER_INTERVAL_SECONDS

    @property
    def batch_size(self) -> int:
        return self._batch_size or settings.REMINDER_SCHEDULER_BATCH_SIZE

    @property
    def lock_ttl(self) -> int:
        return self._lock_ttl or settings.REMINDER_SCHEDULER_LOCK_TTL

    # Due detection

    def tick(self, now: datetime | None = None) -> TickResult | None:
        """Run one scan unless another tick currently holds the lock.

        Args:
            now: Reference time, the current time by default.

        Returns:
            Tick counters, or None when the tick was skipped.
        """
        token = uuid.uuid4().hex
        if not cache.add(REMINDER_SCHEDULER_LOCK_KEY, token, timeout=self.lock_ttl):
            logger.info("reminder_tick_skipped", reason="tick_in_progress")
            return None
        try:
            return self._scan(now or timezone.now())
        finally:
            if cache.get(REMINDER_SCHEDULER_LOCK_KEY) == token:
                cache.delete(REMINDER_SCHEDULER_LOCK_KEY)

    def _scan(self, now: datetime) -> TickResult:
        result = TickResult(started_at=now)
        due_ids = list(
            Reminder.objects.filter(Reminder.due_filter(now))
            .order_by("remind_at", "pk")
            .values_list("pk", flat=True)[: self.batch_size]
        )
        result.due = len(due_ids)

        for reminder_id in due_ids:
            try:
                fired = self._fire(reminder_id, now)
            except Exception as e:
                result.failed += 1
                logger.error(
                    "reminder_fire_failed",
                    reminder_id=reminder_id,
                    error=str(e),
                    error_type=type(e).__name__,
                    exc_info=True,
                )
                continue
            if fired:
                result.fired += 1
                result.fired_ids.append(reminder_id)
            else:
                result.skipped += 1

        logger.info(
            "reminder_tick_completed",
            due=result.due,
            fired=result.fired,
            skipped=result.skipped,
            failed=result.failed,
        )
        return result

    def _fire(self, reminder_id: int, now: datetime) -> bool:
        """Claim and fire one reminder in its own transaction.

        Returns:
            False when the reminder stopped being due or another scheduler
            claimed it first.
        """
        with transaction.atomic():
            reminder = (
                Reminder.objects.filter(pk=reminder_id)
                .filter(Reminder.due_filter(now))
                .first()
            )
            if reminder is None:
                return False

            fired_at = reminder.remind_at
            repeat_type = RepeatType(reminder.repeat_type)
            updates: dict[str, Any] = {
                "last_fired_at": reminder.current_occurrence(),
                "updated_at": now,
            }
            if repeat_type is not RepeatType.NONE:
                updates.update(
                    remind_at=NEXT_OCCURRENCE[repeat_type](fired_at),
                    last_fired_at=fired_at,
                    is_completed=False,
                    is_snoozed=False,
                    snoozed_until=None,
                )

            claimed = (
                Reminder.objects.filter(pk=reminder_id, remind_at=fired_at)
                .filter(Reminder.due_filter(now))
                .update(**updates)
            )
            if not claimed:
                logger.info("reminder_claim_lost", reminder_id=reminder_id)
                return False

            self.notifications.notify(
                reminder.user_id,
                NotificationType.REMINDER,
                reminder_tag(reminder.pk, fired_at),
                reminder.title,
                reminder.description or f"Due {fired_at.isoformat()}",
                action_url=self._action_url(reminder),
                data={
                    "reminderId": reminder.pk,
                    "clientId": reminder.client_id,
                    "remindAt": fired_at.isoformat(),
                },
                channels=reminder.notify_via,
            )

        next_remind_at = updates.get("remind_at")
        logger.info(
            "reminder_fired",
            reminder_id=reminder_id,
            owner_id=str(reminder.user_id),
            remind_at=fired_at.isoformat(),
            repeat_type=repeat_type.value,
            next_remind_at=next_remind_at.isoformat() if next_remind_at else None,
        )
        return True

    @staticmethod
    def _action_url(reminder: Reminder) -> str:
        if reminder.client_id:
            return f"/crm/clients/{reminder.client_id}"
        return "/crm/reminders"

    # Lifecycle

    def create(
        self, owner_id, request: ReminderCreateRequest | dict[str, Any]
    ) -> Reminder:
        """Create a reminder for the owner."""
        if not isinstance(request, ReminderCreateRequest):
            request = ReminderCreateRequest.model_validate(request)
        reminder = Reminder.objects.create(user_id=owner_id, **request.model_dump())
        logger.info(
            "reminder_created",
            reminder_id=reminder.pk,
            owner_id=str(owner_id),
            remind_at=reminder.remind_at.isoformat(),
            repeat_type=reminder.repeat_type,
        )
        return reminder

    def get(self, reminder_id: int, owner_id) -> Reminder:
        """Return one of the owner's reminders.

        Raises:
            ReminderNotFoundError: Missing or owned by another user.
        """
        try:
            return Reminder.objects.get(pk=reminder_id, user_id=owner_id)
        except Reminder.DoesNotExist as e:
            raise ReminderNotFoundError(reminder_id) from e

    def list_reminders(
        self,
        owner_id,
        status: ReminderStatusFilter | str = ReminderStatusFilter.ALL,
    ) -> list[Reminder]:
        """Owner's reminders ordered by remind_at, filtered by completion."""
        status = ReminderStatusFilter(status)
        queryset = Reminder.objects.filter(user_id=owner_id)
        if status is ReminderStatusFilter.PENDING:
            queryset = queryset.filter(is_completed=False)
        elif status is ReminderStatusFilter.COMPLETED:
            queryset = queryset.filter(is_completed=True)
        return list(queryset.order_by("remind_at", "pk"))

    def update(
        self,
        reminder_id: int,
        owner_id,
        request: ReminderUpdateRequest | dict[str, Any],
    ) -> Reminder:
        """Apply a partial update.

        Moving `remind_at` reschedules the reminder: any snooze is dropped
        and the new time fires even if the old one already did.
        Making an already fired reminder repeat moves `remind_at` to the
        occurrence after the fired one.
        """
        if not isinstance(request, ReminderUpdateRequest):
            request = ReminderUpdateRequest.model_validate(request)
        changes = {
            key: value for key, value in request.changes().items() if value is not None
        }

        with transaction.atomic():
            reminder = self._get_for_update(reminder_id, owner_id)
            if "remind_at" in changes and changes["remind_at"] != reminder.remind_at:
                changes.update(last_fired_at=None, is_snoozed=False, snoozed_until=None)
            elif self._starts_repeating(reminder, changes.get("repeat_type")):
                # The fired occurrence stays fired; the series resumes after it
                step = NEXT_OCCURRENCE[RepeatType(changes["repeat_type"])]
                next_at = step(reminder.remind_at)
                while next_at <= reminder.last_fired_at:
                    next_at = step(next_at)
                changes.update(remind_at=next_at, is_snoozed=False, snoozed_until=None)
            for field_name, value in changes.items():
                setattr(reminder, field_name, value)
            if changes:
                reminder.save()

        logger.info(
            "reminder_updated",
            reminder_id=reminder.pk,
            owner_id=str(owner_id),
            fields=sorted(changes),
        )
        return reminder

    @staticmethod
    def _starts_repeating(reminder: Reminder, repeat_type: str | None) -> bool:
        if repeat_type is None or RepeatType(repeat_type) is RepeatType.NONE:
            return False
        if repeat_type == reminder.repeat_type:
            return False
        return (
            reminder.last_fired_at is not None
            and reminder.last_fired_at >= reminder.remind_at
        )

    def complete(self, reminder_id: int, owner_id) -> Reminder:
        """Mark a reminder completed. Completing twice keeps the first completed_at."""
        with transaction.atomic():
            reminder = self._get_for_update(reminder_id, owner_id)
            if reminder.is_completed:
                return reminder
            reminder.is_completed = True
            reminder.completed_at = timezone.now()
            reminder.save(update_fields=["is_completed", "completed_at", "updated_at"])

        logger.info(
            "reminder_completed", reminder_id=reminder.pk, owner_id=str(owner_id)
        )
        return reminder

    def reopen(self, reminder_id: int, owner_id) -> Reminder:
        """Undo completion so the current occurrence can fire again."""
        with transaction.atomic():
            reminder = self._get_for_update(reminder_id, owner_id)
            reminder.is_completed = False
            reminder.completed_at = None
            reminder.is_snoozed = False
            reminder.snoozed_until = None
            reminder.last_fired_at = None
            reminder.save()

        logger.info(
            "reminder_reopened", reminder_id=reminder.pk, owner_id=str(owner_id)
        )
        return reminder

    def snooze(
        self,
        reminder_id: int,
        owner_id,
        until: datetime,
        now: datetime | None = None,
    ) -> Reminder:
        """Hide a reminder from due detection until `until`.

        Once `until` passes the reminder is due again without further action.

        Raises:
            InvalidReminderOperationError: `until` is not in the future.
            ConflictError: The reminder is completed.
        """
        now = now or timezone.now()
        if until <= now:
            raise InvalidReminderOperationError("Snooze time must be in the future")

        with transaction.atomic():
            reminder = self._get_for_update(reminder_id, owner_id)
            if reminder.is_completed:
                raise ConflictError(
                    "Completed reminders cannot be snoozed",
                    detail="Reopen the reminder first",
                )
            reminder.is_snoozed = True
            reminder.snoozed_until = until
            reminder.save(update_fields=["is_snoozed", "snoozed_until", "updated_at"])

        logger.info(
            "reminder_snoozed",
            reminder_id=reminder.pk,
            owner_id=str(owner_id),
            snoozed_until=until.isoformat(),
        )
        return reminder

    def snooze_for(
        self, reminder_id: int, owner_id, duration: timedelta
    ) -> Reminder:
        """Snooze for a duration measured from now."""
        now = timezone.now()
        return self.snooze(reminder_id, owner_id, now + duration, now=now)

    def delete(self, reminder_id: int, owner_id) -> None:
        """Delete a reminder. Notifications it already produced remain."""
        deleted, _ = Reminder.objects.filter(pk=reminder_id, user_id=owner_id).delete()
        if not deleted:
            raise ReminderNotFoundError(reminder_id)
        logger.info("reminder_deleted", reminder_id=reminder_id, owner_id=str(owner_id))

    def _get_for_update(self, reminder_id: int, owner_id) -> Reminder:
        try:
            return Reminder.objects.select_for_update().get(
                pk=reminder_id, user_id=owner_id
            )
        except Reminder.DoesNotExist as e:
            raise ReminderNotFoundError(reminder_id) from e

    # Background loop

    def start(self) -> None:
        """Start the tick loop in a daemon thread if not already running."""
        if self._thread is not None and self._thread.is_alive():
            logger.debug("reminder_scheduler_already_running")
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.run_forever,
            name="ReminderScheduler",
            daemon=True,
        )
        self._thread.start()
        logger.info(
            "reminder_scheduler_started", interval_seconds=self.interval_seconds
        )

    def stop(self, timeout: float = 5.0) -> None:
        """Signal the loop to stop and wait for the current tick to end."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None
        logger.info("reminder_scheduler_stopped")

    def run_forever(self) -> None:
        """Tick every interval until stop() is called.

        A failed tick is logged and the next interval runs regardless.
        """
        while not self._stop_event.is_set():
            try:
                self.tick()
            except Exception as e:
                logger.error("reminder_tick_failed", error=str(e), exc_info=True)
            finally:
                close_old_connections()
            self._stop_event.wait(timeout=self.interval_seconds)


reminder_scheduler = ReminderScheduler()
