"""Mail infrastructure providers."""

from dishka import Scope, provide

from warden.adapter.mail import RealOtpMailer
from warden.config import Settings
from warden.domain.service import OtpSender
from warden.util.di.base import ProviderBase


class MailProvider(ProviderBase):
    """Mail component base."""

    __mock_component__ = "mail"


class ProdMailProvider(MailProvider):
    """Production mail provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_otp_sender(self, settings: Settings) -> OtpSender:
        """Provide the HTTP email API mailer."""
        return RealOtpMailer(
            api_url=settings.mail.api_url,
            api_key=settings.mail.api_key,
            sender=settings.mail.sender,
            timeout_seconds=settings.mail.timeout_seconds,
        )
