"""Send login OTP use case."""

from datetime import datetime

import logfire
from pydantic import BaseModel, EmailStr

from warden.application.usecase.base import BaseUseCase
from warden.config import Settings
from warden.domain.service import (
    AccountService,
    OtpDeliveryError,
    OtpSender,
    OtpService,
)
from warden.util.credential import normalize_email


class SendLoginOtpRequest(BaseModel):
    """Send login OTP request."""

    email: EmailStr


class SendLoginOtpResponse(BaseModel):
    """Send login OTP response. Never carries the code."""

    message: str
    email: str
    expires_at: datetime


class SendLoginOtpUseCase(BaseUseCase):
    """Use case for issuing and delivering a login code."""

    def __init__(
        self,
        account_service: AccountService,
        otp_service: OtpService,
        otp_sender: OtpSender,
        settings: Settings,
    ) -> None:
        """Initialize send login OTP use case.

        Args:
            account_service: Account domain service
            otp_service: Login OTP domain service
            otp_sender: Out-of-band code delivery
            settings: Application settings
        """
        self.account_service = account_service
        self.otp_service = otp_service
        self.otp_sender = otp_sender
        self.settings = settings

    async def execute(self, request: SendLoginOtpRequest) -> SendLoginOtpResponse:
        """Execute send login OTP.

        Delivery failure does not fail the call. Outside production the code
        is written to the log instead, so it can still be used.

        Args:
            request: Send login OTP request

        Returns:
            Message, email and expiry of the issued code

        Raises:
            NotFoundError: If no active account exists for the email
        """
        email = normalize_email(request.email)

        with logfire.span("send_login_otp", email=email):
            account = await self.account_service.get_active_by_email(email)
            record = await self.otp_service.issue(email)

            try:
                await self.otp_sender.send_login_otp(
                    email, account.full_name, record.code.root, record.expires_at
                )
            except OtpDeliveryError as e:
                if self.settings.is_production:
                    logfire.warn("Login OTP delivery failed", email=email, error=str(e))
                else:
                    logfire.warn(
                        "Login OTP delivery failed, code logged instead",
                        email=email,
                        error=str(e),
                        code=record.code.root,
                    )

            return SendLoginOtpResponse(
                message="Authentication OTP generated successfully",
                email=email,
                expires_at=record.expires_at,
            )
