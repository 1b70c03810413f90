"""Outbound invite email — best effort, reported rather than retried.

``get_email_sender`` picks a sender from settings: Resend's HTTP API when an API
key is set, SMTP when a host is set, otherwise a sender that reports the email
as undeliverable. Every sender raises ``DeliveryFailure`` on failure.
"""
import logging
import smtplib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any, Optional

import httpx

from gamenight.config import settings
from gamenight.errors import DeliveryFailure
from gamenight.services.email_templates import render

logger = logging.getLogger(__name__)

RESEND_URL = "https://api.resend.com/emails"


@dataclass
class DeliveryResult:
    delivered: bool
    error: Optional[str] = None


class EmailSender(ABC):
    @abstractmethod
    def _deliver(self, to_address: str, subject: str, html_body: str, text_body: str) -> None:
        """Hand one rendered message to the provider; raise DeliveryFailure on error."""

    def send(self, to_address: str, subject: str, template: str, context: dict[str, Any]) -> DeliveryResult:
        """Render ``template`` with ``context`` and deliver it.

        Never raises: a failed delivery comes back as ``delivered=False``.
        """
        html_body, text_body = render(template, context)
        try:
            self._deliver(to_address, subject, html_body, text_body)
        except DeliveryFailure as exc:
            logger.warning("Email '%s' to %s not delivered: %s", template, to_address, exc)
            return DeliveryResult(delivered=False, error=str(exc))
        logger.info("Email '%s' delivered to %s", template, to_address)
        return DeliveryResult(delivered=True)


class ResendEmailSender(EmailSender):
    def __init__(self, api_key: str, from_address: str):
        self.api_key = api_key
        self.from_address = from_address

    def _deliver(self, to_address, subject, html_body, text_body):
        try:
            response = httpx.post(
                RESEND_URL,
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={
                    "from": self.from_address,
                    "to": [to_address],
                    "subject": subject,
                    "html": html_body,
                    "text": text_body,
                },
                timeout=10.0,
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise DeliveryFailure(str(exc)) from exc


class SmtpEmailSender(EmailSender):
    def __init__(self, host: str, port: int, username: str, password: str, from_address: str):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_address = from_address

    def _deliver(self, to_address, subject, html_body, text_body):
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_address
        msg["To"] = to_address
        msg.attach(MIMEText(text_body, "plain"))
        msg.attach(MIMEText(html_body, "html"))

        try:
            with smtplib.SMTP(self.host, self.port, timeout=10) as server:
                if self.username and self.password:
                    server.starttls()
                    server.login(self.username, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise DeliveryFailure(str(exc)) from exc


class UnconfiguredEmailSender(EmailSender):
    def _deliver(self, to_address, subject, html_body, text_body):
        raise DeliveryFailure("Email is not configured")


def get_email_sender() -> EmailSender:
    """FastAPI dependency; tests override it with a fake sender."""
    if settings.RESEND_API_KEY:
        return ResendEmailSender(settings.RESEND_API_KEY, settings.EMAILS_FROM)
    if settings.SMTP_HOST:
        return SmtpEmailSender(
            settings.SMTP_HOST,
            settings.SMTP_PORT,
            settings.SMTP_USER,
            settings.SMTP_PASSWORD,
            settings.EMAILS_FROM,
        )
    return UnconfiguredEmailSender()
