"""Outbound email delivery."""

import logging
import smtplib
import ssl
from email.message import EmailMessage
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from authgate.config import Settings, get_settings
from authgate.errors import EmailSendFailed

logger = logging.getLogger("authgate")

_templates = Environment(
    loader=FileSystemLoader(Path(__file__).resolve().parent.parent / "templates" / "email"),
    autoescape=select_autoescape(["html"]),
)


class Mailer:
    """Sends OTP, password reset and welcome emails.

    With no ``EMAIL_HOST`` configured, messages are written to the log
    instead of being sent, which keeps local development usable.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    @property
    def log_only(self) -> bool:
        return not self.settings.EMAIL_HOST

    def send(self, to: str, subject: str, html: str) -> None:
        """Deliver one message. Raises EmailSendFailed on any transport error."""
        if self.log_only:
            logger.info("EMAIL (not sent) to=%s subject=%r", to, subject)
            return

        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self.settings.EMAIL_FROM
        msg["To"] = to
        msg.set_content("This message requires an HTML capable mail client.")
        msg.add_alternative(html, subtype="html")

        try:
            with smtplib.SMTP(self.settings.EMAIL_HOST, self.settings.EMAIL_PORT, timeout=10) as s:
                if self.settings.EMAIL_USE_TLS:
                    s.starttls(context=ssl.create_default_context())
                if self.settings.EMAIL_USER and self.settings.EMAIL_PASSWORD:
                    s.login(self.settings.EMAIL_USER, self.settings.EMAIL_PASSWORD)
                s.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Error sending email to %s: %r", to, e)
            raise EmailSendFailed() from e

        logger.info("Email sent to %s", to)

    def send_otp_email(self, to: str, otp: str, expires_minutes: int) -> None:
        if self.log_only:
            logger.info("OTP for %s: %s", to, otp)
        html = _templates.get_template("otp.html").render(otp=otp, expires_minutes=expires_minutes)
        self.send(to, "Your Verification Code", html)

    def send_password_reset_email(self, to: str, token: str) -> None:
        reset_url = f"{self.settings.CORS_ORIGIN.rstrip('/')}/reset-password?token={token}"
        if self.log_only:
            logger.info("PASSWORD RESET for %s: %s", to, reset_url)
        html = _templates.get_template("password_reset.html").render(
            reset_url=reset_url,
            expires_minutes=self.settings.RESET_TOKEN_EXPIRES_MINUTES,
        )
        self.send(to, "Password Reset Request", html)

    def send_welcome_email(self, to: str, name: str) -> None:
        html = _templates.get_template("welcome.html").render(name=name)
        self.send(to, "Welcome to authgate", html)
