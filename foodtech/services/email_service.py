"""Email service: transactional invite and password-reset messages over SMTP.

When ``SMTP_HOST`` is not configured the message is only logged (dev/test
mode). A relay failure raises ``UpstreamError`` so handlers answer 502.
"""

import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any, Dict, Optional

from foodtech.core.config import settings
from foodtech.core.exceptions import UpstreamError

logger = logging.getLogger("foodtech")


_TEMPLATES: Dict[str, Dict[str, str]] = {
    "invite": {
        "subject": "Invitation to FoodTech R&D",
        "html": (
            "<h2>Welcome, {name}!</h2>"
            "<p>You have been invited to the FoodTech R&amp;D system.</p>"
            '<p><a href="{action_link}">Set your password</a></p>'
        ),
    },
    "password_reset": {
        "subject": "FoodTech R&D password reset",
        "html": (
            "<p>Follow the link to set a new password:</p>"
            '<p><a href="{action_link}">Set password</a></p>'
        ),
    },
}


class EmailService:

    @staticmethod
    def is_configured() -> bool:
        return bool(settings.SMTP_HOST)

    def send(self, *, to_email: str, subject: str, html_body: str) -> None:
        if not self.is_configured():
            logger.info("Email (dev mode): to=%s subject='%s'", to_email, subject)
            return

        try:
            self._send_smtp(to_email=to_email, subject=subject, html_body=html_body)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Email failed: to=%s error=%s", to_email, exc)
            raise UpstreamError(f"Failed to send email to {to_email}")
        logger.info("Email sent: to=%s subject='%s'", to_email, subject)

    def send_from_template(self, *, to_email: str, template_name: str, context: Dict[str, Any]) -> None:
        template = _TEMPLATES[template_name]
        escaped = {key: html.escape(str(value), quote=True) for key, value in context.items()}
        self.send(
            to_email=to_email,
            subject=template["subject"],
            html_body=template["html"].format(**escaped),
        )

    def send_invite(self, to_email: str, name: Optional[str], action_link: str) -> None:
        self.send_from_template(
            to_email=to_email,
            template_name="invite",
            context={"name": name or to_email, "action_link": action_link},
        )

    def send_password_reset(self, to_email: str, action_link: str) -> None:
        self.send_from_template(
            to_email=to_email,
            template_name="password_reset",
            context={"action_link": action_link},
        )

    @staticmethod
    def _send_smtp(*, to_email: str, subject: str, html_body: str) -> None:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = settings.MAIL_FROM
        msg["To"] = to_email
        msg.attach(MIMEText(html_body, "html"))

        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30) as smtp:
            if settings.SMTP_USE_TLS:
                smtp.starttls()
            if settings.SMTP_USERNAME and settings.SMTP_PASSWORD:
                smtp.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
            smtp.send_message(msg)


email_service = EmailService()
