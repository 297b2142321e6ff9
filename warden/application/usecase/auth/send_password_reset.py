"""Send password reset use case."""

import logfire
from pydantic import BaseModel, EmailStr

from warden.application.usecase.base import BaseUseCase
from warden.domain.error import RateLimitedError, ValidationError
from warden.domain.service import (
    AccountService,
    IdentityProvider,
    IdentityProviderError,
    map_provider_error,
)
from warden.domain.value import ProviderErrorKind
from warden.util.credential import normalize_email

RESET_SEND_ERRORS = {
    ProviderErrorKind.INVALID_PARAMETER: ValidationError(
        "Invalid email address. Please provide a valid email."
    ),
    ProviderErrorKind.RATE_LIMITED: RateLimitedError(
        "Too many password reset attempts. Please wait a few minutes before trying again."
    ),
}


class SendPasswordResetRequest(BaseModel):
    """Send password reset request."""

    email: EmailStr


class SendPasswordResetResponse(BaseModel):
    """Send password reset response."""

    message: str
    email: str


class SendPasswordResetUseCase(BaseUseCase):
    """Use case for starting the provider-owned password reset flow."""

    def __init__(
        self,
        account_service: AccountService,
        identity_provider: IdentityProvider,
    ) -> None:
        self.account_service = account_service
        self.identity_provider = identity_provider

    async def execute(
        self, request: SendPasswordResetRequest
    ) -> SendPasswordResetResponse:
        """Ask the provider to send a reset code to an active account.

        Raises:
            NotFoundError: If no active account exists for the email
        """
        email = normalize_email(request.email)

        with logfire.span("send_password_reset", email=email):
            await self.account_service.get_active_by_email(email)

            try:
                await self.identity_provider.send_reset_challenge(email)
            except IdentityProviderError as e:
                raise map_provider_error(
                    e,
                    RESET_SEND_ERRORS,
                    fallback="Failed to send password reset OTP. Please try again.",
                ) from e

            logfire.info("Password reset challenge sent", email=email)
            return SendPasswordResetResponse(
                message="Password reset OTP sent successfully", email=email
            )
