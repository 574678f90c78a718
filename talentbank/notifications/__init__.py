"""Notification delivery for new suggestions.

- NotificationDispatcher: in-app notification plus optional email, one attempt each
- DeliveryOutcome: per-channel result
- InAppNotifier / EmailNotifier: the two channels
- TemplateRenderer: Jinja2-based email template rendering
- SMTPClient: SMTP wrapper with TLS/SSL support
"""

from .dispatcher import EmailNotifier, InAppNotifier, NotificationDispatcher
from .models import (
    EMAIL_CHANNEL,
    IN_APP_CHANNEL,
    DeliveryOutcome,
    EmailNotConfiguredError,
    InAppDeliveryError,
    NotificationError,
    NotificationTemplateError,
    SMTPDeliveryError,
)
from .payloads import build_in_app_message, build_suggestion_context
from .smtp_client import SMTPClient, build_sender_address, parse_recipients
from .templates import TemplateRenderer

__all__ = [
    # Dispatcher
    "NotificationDispatcher",
    "InAppNotifier",
    "EmailNotifier",
    "DeliveryOutcome",
    "IN_APP_CHANNEL",
    "EMAIL_CHANNEL",
    # Exceptions
    "NotificationError",
    "NotificationTemplateError",
    "SMTPDeliveryError",
    "EmailNotConfiguredError",
    "InAppDeliveryError",
    # Components
    "TemplateRenderer",
    "SMTPClient",
    # Utilities
    "build_suggestion_context",
    "build_in_app_message",
    "build_sender_address",
    "parse_recipients",
]
