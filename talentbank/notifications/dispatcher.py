"""Notification dispatcher for new suggestions.

Sends the in-app notification and, when requested, one email. Each channel
gets exactly one attempt; failures are logged and reported as flags in the
DeliveryOutcome, never raised. The suggestion itself is never touched here.
"""

import logging
from email.message import EmailMessage
from typing import Callable, Optional

from talentbank.config.environment import EnvironmentConfig
from talentbank.config.models import EmailConfig
from talentbank.domain.exceptions import DeliveryError
from talentbank.domain.models import (
    Candidate,
    InAppNotification,
    JobRequisition,
    NotificationType,
    Suggestion,
)
from talentbank.logging import get_logger
from talentbank.logging.context import log_context
from talentbank.persistence import NotificationRepository, PersistenceError, get_session
from talentbank.utils.timestamps import utc_now

from .models import (
    EMAIL_CHANNEL,
    IN_APP_CHANNEL,
    DeliveryOutcome,
    EmailNotConfiguredError,
    InAppDeliveryError,
    NotificationError,
)
from .payloads import build_in_app_message, build_suggestion_context
from .smtp_client import SMTPClient, build_sender_address, parse_recipients
from .templates import TemplateRenderer

logger = get_logger(__name__, component="notification")


class InAppNotifier:
    """Writes the in-app notification in its own unit of work."""

    def __init__(
        self,
        title: str = "New job suggestion",
        session_factory: Callable = get_session,
    ):
        self.title = title
        self.session_factory = session_factory

    def notify(
        self, suggestion: Suggestion, candidate: Candidate, job: JobRequisition
    ) -> InAppNotification:
        """Persist a notification addressed to the candidate.

        Raises:
            InAppDeliveryError: If the notification cannot be written
        """
        context = build_suggestion_context(suggestion, candidate, job)
        notification = InAppNotification(
            candidate_id=candidate.id,
            title=self.title,
            message=build_in_app_message(context),
            type=NotificationType.APPLICATION,
            created_at=utc_now(),
        )

        try:
            with self.session_factory() as session:
                return NotificationRepository(session).add(notification)
        except PersistenceError as e:
            raise InAppDeliveryError(f"Failed to write in-app notification: {e}") from e


class EmailNotifier:
    """Renders and sends the suggestion email (single attempt)."""

    def __init__(
        self,
        env_config: EnvironmentConfig,
        email_config: Optional[EmailConfig] = None,
        template_renderer: Optional[TemplateRenderer] = None,
        smtp_client: Optional[SMTPClient] = None,
    ):
        self.env_config = env_config
        self.email_config = email_config or EmailConfig()
        self.template_renderer = template_renderer or TemplateRenderer()
        self.smtp_client = smtp_client or SMTPClient()

    def build_message(
        self, suggestion: Suggestion, candidate: Candidate, job: JobRequisition
    ) -> EmailMessage:
        """Render the templates into a multipart EmailMessage.

        Raises:
            NotificationTemplateError: If rendering fails
            NotificationError: If the candidate address is invalid
        """
        rendered = self.template_renderer.render(
            build_suggestion_context(suggestion, candidate, job)
        )

        try:
            recipients = parse_recipients(candidate.email)
        except ValueError as e:
            raise NotificationError(f"Failed to build email message: {e}") from e

        message = EmailMessage()
        message["Subject"] = rendered["subject"]
        message["From"] = build_sender_address(self.env_config)
        message["To"] = ", ".join(recipients)
        message.set_content(rendered["text_body"])
        message.add_alternative(rendered["html_body"], subtype="html")
        return message

    def send(self, suggestion: Suggestion, candidate: Candidate, job: JobRequisition) -> None:
        """Build and send the email.

        Raises:
            NotificationError: On any configuration, template, address or SMTP failure
        """
        if not self.env_config.smtp_configured:
            raise EmailNotConfiguredError("Email requested but SMTP is not configured")

        message = self.build_message(suggestion, candidate, job)
        self.smtp_client.send(message, self.env_config, self.email_config.use_tls)


class NotificationDispatcher:
    """Coordinates the in-app and email channels for one suggestion."""

    def __init__(
        self,
        in_app_notifier: Optional[InAppNotifier] = None,
        email_notifier: Optional[EmailNotifier] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize dispatcher.

        Args:
            in_app_notifier: In-app channel (default writes to the notifications table)
            email_notifier: Email channel; None means email is unavailable and
                every requested email is reported as not sent
            logger_instance: Logger instance (uses module logger if None)
        """
        self.in_app_notifier = in_app_notifier or InAppNotifier()
        self.email_notifier = email_notifier
        self.logger = logger_instance or logger

    def dispatch(
        self,
        suggestion: Suggestion,
        candidate: Candidate,
        job: JobRequisition,
        send_email: bool,
    ) -> DeliveryOutcome:
        """Deliver the notifications of a new suggestion.

        Both channels are attempted independently; partial success is a
        valid outcome. Nothing is raised for delivery failures.
        """
        outcome = DeliveryOutcome()

        with log_context(
            suggestion_id=suggestion.id, candidate_id=candidate.id, job_id=job.id
        ):
            outcome.notification_sent = self._attempt(
                IN_APP_CHANNEL,
                lambda: self.in_app_notifier.notify(suggestion, candidate, job),
                outcome,
            )

            if send_email:
                if self.email_notifier is None:
                    self._record_failure(
                        outcome,
                        EmailNotConfiguredError("Email requested but no email channel is configured"),
                    )
                else:
                    outcome.email_sent = self._attempt(
                        EMAIL_CHANNEL,
                        lambda: self.email_notifier.send(suggestion, candidate, job),
                        outcome,
                    )

            self.logger.info(
                f"Dispatched suggestion {suggestion.id}: "
                f"in_app={'sent' if outcome.notification_sent else 'failed'}, "
                f"email={'sent' if outcome.email_sent else ('failed' if send_email else 'skipped')}",
                extra={
                    "event": "notification.dispatched",
                    "notification_sent": outcome.notification_sent,
                    "email_requested": send_email,
                    "email_sent": outcome.email_sent,
                    "fully_delivered": outcome.fully_delivered,
                },
            )

        return outcome

    def _attempt(self, channel: str, action: Callable, outcome: DeliveryOutcome) -> bool:
        try:
            action()
        except DeliveryError as e:
            self._record_failure(outcome, e)
            return False
        except Exception as e:
            # Any unexpected failure in a channel is still only a delivery failure
            self._record_failure(outcome, DeliveryError(channel, f"Unexpected error: {e}"), exc_info=True)
            return False

        self.logger.info(
            f"Delivered {channel} notification",
            extra={"event": "notification.send.success", "channel": channel},
        )
        return True

    def _record_failure(
        self, outcome: DeliveryOutcome, error: DeliveryError, exc_info: bool = False
    ) -> None:
        outcome.errors[error.channel] = str(error)
        self.logger.warning(
            f"Failed to deliver {error.channel} notification: {error}",
            exc_info=exc_info,
            extra={
                "event": "notification.send.failure",
                "channel": error.channel,
                "error_type": type(error).__name__,
            },
        )
