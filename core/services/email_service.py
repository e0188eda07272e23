"""SMTP transport for the email notification channel."""

import html
import re
import smtplib
from email.message import EmailMessage
from urllib.parse import urljoin

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.template.loader import render_to_string
from django.utils.html import strip_tags

import structlog

from core.models import Notification

logger = structlog.get_logger(__name__)

NOTIFICATION_TEMPLATE = "emails/notification.html"


class EmailService:
    """Render notifications as e-mail and send them over SMTP.

    SMTP settings are read when the service is created, so a job picks up
    the configuration of the worker it runs in.
    """

    def __init__(self) -> None:
        self.host = settings.EMAIL_HOST
        self.port = settings.EMAIL_PORT
        self.credentials = (settings.EMAIL_HOST_USER, settings.EMAIL_HOST_PASSWORD)
        self.use_tls = settings.EMAIL_USE_TLS
        self.sender = settings.DEFAULT_FROM_EMAIL

    def send_notification(self, notification: Notification, to_email: str) -> None:
        """Send a persisted notification, linking back into the app.

        Raises:
            ValueError: If the address is invalid.
            smtplib.SMTPException: If the SMTP exchange fails.
        """
        context = {
            "title": notification.title,
            "body": notification.body,
            "priority": notification.priority,
            "action_url": (
                urljoin(settings.WORKSPACE_APP_URL, notification.action_url)
                if notification.action_url
                else None
            ),
        }
        self.send_email(
            to_email,
            notification.title,
            render_to_string(NOTIFICATION_TEMPLATE, context),
        )

    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        from_email: str | None = None,
    ) -> None:
        """Send an HTML e-mail with a plain text alternative.

        Raises:
            ValueError: If the address is invalid.
            smtplib.SMTPException: If the SMTP exchange fails.
        """
        message = self.build_message(to_email, subject, html_content, from_email)
        try:
            with smtplib.SMTP(self.host, self.port) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if all(self.credentials):
                    smtp.login(*self.credentials)
                smtp.send_message(message)
        except smtplib.SMTPException as e:
            logger.error("email_send_failed", to_email=to_email, error=str(e))
            raise
        logger.info("email_sent", to_email=to_email, subject=subject)

    def build_message(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        from_email: str | None = None,
    ) -> EmailMessage:
        if not self.is_valid_email(to_email):
            raise ValueError(f"Invalid email address: {to_email}")

        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = from_email or self.sender
        message["To"] = to_email
        message.set_content(self.html_to_plain(html_content))
        message.add_alternative(html_content, subtype="html")
        return message

    @staticmethod
    def is_valid_email(email: str) -> bool:
        try:
            validate_email(email)
        except ValidationError:
            return False
        return True

    @staticmethod
    def html_to_plain(content: str) -> str:
        """Text alternative: tags stripped, entities decoded, blank runs folded."""
        text = html.unescape(strip_tags(content)).replace("\xa0", " ")
        text = re.sub(r"[ \t]+\n", "\n", text)
        return re.sub(r"\n\s*\n", "\n\n", text).strip()
