"""Result type and exceptions of the notification dispatcher.

Every exception here is a DeliveryError: it is caught by the dispatcher and
turned into a delivery flag, never propagated to the caller.
"""

from dataclasses import dataclass, field
from typing import Dict

from talentbank.domain.exceptions import DeliveryError

IN_APP_CHANNEL = "in_app"
EMAIL_CHANNEL = "email"


class NotificationError(DeliveryError):
    """Base exception for email delivery errors."""

    def __init__(self, message: str, channel: str = EMAIL_CHANNEL) -> None:
        super().__init__(channel, message)


class NotificationTemplateError(NotificationError):
    """Raised when template rendering fails due to configuration or missing variables."""

    pass


class SMTPDeliveryError(NotificationError):
    """Raised when the SMTP server rejects or cannot receive the message."""

    pass


class EmailNotConfiguredError(NotificationError):
    """Raised when an email is requested but no SMTP server is configured."""

    pass


class InAppDeliveryError(NotificationError):
    """Raised when the in-app notification record cannot be written."""

    def __init__(self, message: str) -> None:
        super().__init__(message, channel=IN_APP_CHANNEL)


@dataclass
class DeliveryOutcome:
    """Per-channel result of one dispatch.

    Partial success is a valid outcome. ``errors`` maps a channel name to
    the error message of its failed attempt.

    Attributes:
        notification_sent: In-app notification was written
        email_sent: Email was accepted by the SMTP server
        errors: Failure messages keyed by channel ("in_app", "email")
    """

    notification_sent: bool = False
    email_sent: bool = False
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def fully_delivered(self) -> bool:
        return not self.errors
