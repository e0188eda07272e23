"""Tests for the email background job."""

import smtplib
from unittest.mock import patch
from uuid import uuid4

from django.test import TestCase

from core.enums import DeliveryStatus
from core.jobs.email_jobs import send_email_notification
from core.models import NotificationDelivery
from tests.factories import create_notification, create_user


class TestSendEmailNotification(TestCase):
    """Test suite for send_email_notification."""

    def setUp(self):
        """Set up test fixtures."""
        self.user = create_user(email="owner@example.com")
        self.notification = create_notification(self.user, title="Invoice due")
        self.notification_id = str(self.notification.notification_id)

    def _delivery(self):
        return NotificationDelivery.objects.get(
            notification=self.notification, channel="email"
        )

    def test_sends_to_owner_address(self):
        """Test successful delivery marks the email delivery SENT."""
        with patch("core.jobs.email_jobs.EmailService") as mock_email_service:
            send_email_notification(self.notification_id)

        mock_email_service.return_value.send_notification.assert_called_once_with(
            self.notification, "owner@example.com"
        )
        delivery = self._delivery()
        self.assertEqual(delivery.status, DeliveryStatus.SENT.value)
        self.assertIsNotNone(delivery.sent_at)

    def test_missing_notification_is_ignored(self):
        """Test a notification deleted while queued is skipped."""
        with patch("core.jobs.email_jobs.EmailService") as mock_email_service:
            send_email_notification(str(uuid4()))

        mock_email_service.assert_not_called()

    def test_already_sent_is_skipped(self):
        """Test a SENT delivery is not sent twice."""
        NotificationDelivery.objects.create(
            notification=self.notification,
            channel="email",
            status=DeliveryStatus.SENT.value,
        )

        with patch("core.jobs.email_jobs.EmailService") as mock_email_service:
            send_email_notification(self.notification_id)

        mock_email_service.return_value.send_notification.assert_not_called()

    def test_smtp_failure_marks_failed_without_retry(self):
        """Test SMTP errors are recorded and not re-raised."""
        with patch("core.jobs.email_jobs.EmailService") as mock_email_service:
            mock_email_service.return_value.send_notification.side_effect = (
                smtplib.SMTPException("SMTP error")
            )
            send_email_notification(self.notification_id)

        delivery = self._delivery()
        self.assertEqual(delivery.status, DeliveryStatus.FAILED.value)
        self.assertEqual(delivery.error_message, "SMTP error")
        self.assertIsNone(delivery.queued_at)

    def test_missing_recipient_marks_failed(self):
        """Test an owner without e-mail address fails the delivery."""
        type(self.user).objects.filter(pk=self.user.pk).update(email="")

        with patch("core.jobs.email_jobs.EmailService") as mock_email_service:
            send_email_notification(self.notification_id)

        mock_email_service.return_value.send_notification.assert_not_called()
        self.assertEqual(self._delivery().error_message, "No recipient email address")
