"""Delivery of password recovery emails."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

import httpx
from jinja2 import Environment, FileSystemLoader, select_autoescape

from zinema.config import get_settings
from zinema.exceptions import ConfigurationError, NotificationError
from zinema.services.tokens import RESET_TOKEN_TTL_TEXT

logger = logging.getLogger("zinema")

APP_NAME = "Zinema"
RECOVERY_SUBJECT = f"Password recovery - {APP_NAME}"

_templates = Environment(
    loader=FileSystemLoader(Path(__file__).resolve().parent.parent / "templates"),
    autoescape=select_autoescape(["html"]),
)


def render_recovery_email(reset_link: str, expires_in: str = RESET_TOKEN_TTL_TEXT) -> str:
    """Render the HTML body of the password recovery email."""
    template = _templates.get_template("password_reset.html")
    return template.render(app_name=APP_NAME, reset_link=reset_link, expires_in=expires_in)


class Notifier(ABC):
    """Sends messages to account holders."""

    @abstractmethod
    def send(self, recipient: str, subject: str, html_body: str) -> None:
        """Deliver a message. Raises NotificationError on failure."""

    def send_recovery_email(self, recipient: str, reset_link: str) -> None:
        self.send(recipient, RECOVERY_SUBJECT, render_recovery_email(reset_link))


class ResendNotifier(Notifier):
    """Sends email through the Resend HTTP API."""

    def __init__(
        self,
        api_key: str,
        sender: str,
        api_url: str = "https://api.resend.com/emails",
        client: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        if not api_key:
            raise ConfigurationError("RESEND_API_KEY is not configured")
        self.api_key = api_key
        self.sender = sender
        self.api_url = api_url
        self._client = client or httpx.Client(timeout=timeout)

    def send(self, recipient: str, subject: str, html_body: str) -> None:
        logger.info("Sending email to %s", recipient)
        try:
            response = self._client.post(
                self.api_url,
                json={"from": self.sender, "to": [recipient], "subject": subject, "html": html_body},
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NotificationError(
                f"Resend rejected email to {recipient}: {e.response.status_code} {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise NotificationError(f"Could not reach Resend for {recipient}: {e}") from e
        logger.info("Email sent to %s", recipient)


class ConsoleNotifier(Notifier):
    """Development notifier: logs recovery links instead of sending email."""

    def send(self, recipient: str, subject: str, html_body: str) -> None:
        logger.info("EMAIL to %s: %s (%d bytes, not sent)", recipient, subject, len(html_body))

    def send_recovery_email(self, recipient: str, reset_link: str) -> None:
        logger.info("PASSWORD RESET for %s: %s", recipient, reset_link)


_notifier: Notifier | None = None


def get_notifier() -> Notifier:
    """Get singleton notifier instance.

    Without a Resend API key the console notifier is used, except in
    production where the missing key is a configuration error.
    """
    global _notifier
    if _notifier is None:
        settings = get_settings()
        if settings.RESEND_API_KEY:
            _notifier = ResendNotifier(
                api_key=settings.RESEND_API_KEY,
                sender=settings.RESEND_FROM,
                api_url=settings.RESEND_API_URL,
            )
        elif settings.is_production:
            raise ConfigurationError("RESEND_API_KEY is not configured")
        else:
            _notifier = ConsoleNotifier()
    return _notifier
