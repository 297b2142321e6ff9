"""Mock mail providers for testing."""

from dishka import Scope, provide

from warden.adapter.mail import MockOtpMailer
from warden.domain.service import OtpSender
from warden.util.di.infrastructure.mail import MailProvider


class MockMailProvider(MailProvider):
    """Mock mail provider recording sent codes."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_otp_sender(self) -> OtpSender:
        """Provide mock OTP mailer."""
        return MockOtpMailer()
