"""Outgoing mail - verification links"""

import logging
import smtplib
from email.message import EmailMessage

from jeeforces.config import Settings
from jeeforces.core.exceptions import EmailDeliveryError

logger = logging.getLogger(__name__)


class Mailer:
    """Sends account mail over SMTP; only logs when SMTP_HOST is unset"""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def _send(self, to: str, subject: str, html: str) -> None:
        message = EmailMessage()
        message["From"] = self.settings.EMAIL_FROM
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML capable mail client.")
        message.add_alternative(html, subtype="html")

        try:
            with smtplib.SMTP(self.settings.SMTP_HOST, self.settings.SMTP_PORT, timeout=10) as smtp:
                if self.settings.SMTP_USE_TLS:
                    smtp.starttls()
                if self.settings.SMTP_USERNAME:
                    smtp.login(self.settings.SMTP_USERNAME, self.settings.SMTP_PASSWORD)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send '{subject}' to {to}: {e}")
            raise EmailDeliveryError() from e

        logger.info(f"Sent '{subject}' to {to}")

    def send_verification(self, *, to: str, username: str, token: str, resend: bool = False) -> None:
        verify_url = self.settings.verification_url(token)
        minutes = self.settings.VERIFY_TOKEN_EXPIRE_MINUTES

        if not self.settings.SMTP_HOST:
            logger.info(f"SMTP not configured; verification link for {username}: {verify_url}")
            return

        if resend:
            subject = "Resend: Verify your JEEForces account"
            body = (
                f"<p>Hi {username},</p>"
                f"<p>You requested a new verification link. Click <a href=\"{verify_url}\">here</a> "
                f"to verify (expires in {minutes} minutes).</p>"
            )
        else:
            subject = "Verify your JEEForces account"
            body = (
                f"<p>Hi {username},</p>"
                f"<p>Click <a href=\"{verify_url}\">this link</a> to verify (expires in {minutes} minutes).</p>"
            )
        self._send(to, subject, body)
