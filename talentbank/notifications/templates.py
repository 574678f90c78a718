"""Template rendering for suggestion emails using Jinja2."""

import logging
from typing import Dict

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError

from .models import NotificationTemplateError

logger = logging.getLogger(__name__)


class TemplateRenderer:
    """Renders the subject line and HTML/plain-text bodies of an email.

    Templates live in the talentbank.notifications.email_templates package
    and are cached by the Jinja2 environment.
    """

    def __init__(
        self,
        template_dir: str = "email_templates",
        subject_template: str = "suggestion_subject.j2",
        html_template: str = "suggestion_body.html.j2",
        text_template: str = "suggestion_body.txt.j2",
    ):
        self.subject_template_name = subject_template
        self.html_template_name = html_template
        self.text_template_name = text_template

        self.env = Environment(
            loader=PackageLoader("talentbank.notifications", template_dir),
            autoescape=True,
            undefined=StrictUndefined,
        )

        logger.debug(f"Initialized TemplateRenderer with templates from {template_dir}")

    def render(self, context: Dict) -> Dict[str, str]:
        """Render all email templates with the provided context.

        Returns:
            Dictionary with ``subject`` (single line), ``html_body`` and ``text_body``

        Raises:
            NotificationTemplateError: If template rendering fails
        """
        try:
            subject_template = self.env.get_template(self.subject_template_name)
            html_template = self.env.get_template(self.html_template_name)
            text_template = self.env.get_template(self.text_template_name)

            subject = " ".join(subject_template.render(context).split())
            html_body = html_template.render(context)
            text_body = text_template.render(context)

            logger.debug(
                f"Rendered templates for suggestion: {context.get('suggestion_id', 'unknown')}"
            )

            return {
                "subject": subject,
                "html_body": html_body,
                "text_body": text_body,
            }

        except TemplateError as e:
            error_msg = f"Template rendering failed: {e}"
            logger.error(error_msg, exc_info=True)
            raise NotificationTemplateError(error_msg) from e
