"""Login OTP email delivery."""

from dataclasses import dataclass
from datetime import datetime

import httpx
import logfire

from warden.domain.service.otp_sender import OtpDeliveryError, OtpSender

SUBJECT = "Your login code"


def render_body(full_name: str, code: str, expires_at: datetime) -> str:
    """Plain-text body of the login code email."""
    return (
        f"Hello {full_name},\n\n"
        f"Your login code is {code}.\n"
        f"It expires at {expires_at.strftime('%Y-%m-%d %H:%M UTC')} and can be used once.\n\n"
        "If you did not request this code, you can ignore this email."
    )


class OtpMailer(OtpSender):
    """Base class for OTP mailers.

    Provides type distinction for dependency injection.
    """

    pass


class RealOtpMailer(OtpMailer):
    """Sends login codes through an HTTP email API."""

    def __init__(
        self,
        api_url: str,
        api_key: str,
        sender: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize mailer.

        Args:
            api_url: Email API endpoint (empty = not configured)
            api_key: Email API key
            sender: From address
            timeout_seconds: Upper bound for the API call
            transport: Custom httpx transport (tests)
        """
        self.api_url = api_url
        self.api_key = api_key
        self.sender = sender
        self.timeout = httpx.Timeout(timeout_seconds)
        self._transport = transport

    async def send_login_otp(
        self, email: str, full_name: str, code: str, expires_at: datetime
    ) -> None:
        if not self.api_url or not self.api_key:
            raise OtpDeliveryError("Email provider not configured")

        payload = {
            "from": {"email": self.sender},
            "personalizations": [{"to": [{"email": email}], "subject": SUBJECT}],
            "content": [
                {"type": "text/plain", "value": render_body(full_name, code, expires_at)}
            ],
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        with logfire.span("otp_mailer.send_login_otp", email=email):
            try:
                async with httpx.AsyncClient(
                    timeout=self.timeout, transport=self._transport
                ) as client:
                    response = await client.post(
                        self.api_url, json=payload, headers=headers
                    )
            except httpx.HTTPError as e:
                logfire.error("Email API HTTP error", error=str(e))
                raise OtpDeliveryError(f"HTTP error sending email: {e}") from e

            if not 200 <= response.status_code < 300:
                logfire.error(
                    "Email API rejected message",
                    status_code=response.status_code,
                    error=response.text[:200],
                )
                raise OtpDeliveryError(f"Email send failed: {response.status_code}")

            logfire.info("Login OTP email sent", email=email)


@dataclass
class SentOtp:
    """A login code captured by the mock mailer."""

    email: str
    full_name: str
    code: str
    expires_at: datetime


class MockOtpMailer(OtpMailer):
    """Mock mailer for testing.

    Records every message instead of sending it.
    """

    def __init__(self) -> None:
        self.sent: list[SentOtp] = []
        self.fail = False

    async def send_login_otp(
        self, email: str, full_name: str, code: str, expires_at: datetime
    ) -> None:
        if self.fail:
            raise OtpDeliveryError("Mock delivery failure")
        self.sent.append(SentOtp(email, full_name, code, expires_at))

    def last_code(self, email: str) -> str | None:
        """Most recent code sent to an email."""
        for message in reversed(self.sent):
            if message.email == email:
                return message.code
        return None
