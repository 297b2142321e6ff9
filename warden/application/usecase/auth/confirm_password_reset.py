"""Confirm password reset use case."""

from datetime import datetime, timezone

import logfire
from pydantic import BaseModel, EmailStr, Field

from warden.domain.error import AuthenticationError, RateLimitedError
from warden.domain.service import (
    AccountService,
    CredentialService,
    IdentityProvider,
    IdentityProviderError,
    map_provider_error,
)
from warden.domain.service import lifecycle
from warden.domain.value import ProviderErrorKind
from warden.util.credential import normalize_email

RESET_CONFIRM_ERRORS = {
    ProviderErrorKind.EXPIRED_CODE: AuthenticationError(
        "Confirmation code has expired. Please request a new password reset.",
        status_code=400,
    ),
    ProviderErrorKind.NOT_AUTHORIZED: AuthenticationError(
        "Invalid or expired confirmation code. Please request a new password reset.",
        status_code=400,
    ),
    ProviderErrorKind.RATE_LIMITED: RateLimitedError(
        "Too many password reset attempts. Please wait a few minutes before trying again."
    ),
}


class ConfirmPasswordResetRequest(BaseModel):
    """Confirm password reset request."""

    email: EmailStr
    code: str = Field(min_length=1, max_length=16)
    new_password: str = Field(min_length=8, max_length=128)


class ConfirmPasswordResetResponse(BaseModel):
    """Confirm password reset response."""

    message: str
    email: str


class ConfirmPasswordResetUseCase:
    """Use case for finishing a password reset.

    The provider holds the user's new password only until it is reset back
    to the derived credential; OTP login always authenticates with the
    derived credential, the local hash serves password signin.
    """

    def __init__(
        self,
        account_service: AccountService,
        credential_service: CredentialService,
        identity_provider: IdentityProvider,
    ) -> None:
        """Initialize confirm password reset use case.

        Args:
            account_service: Account domain service
            credential_service: Credential domain service
            identity_provider: External identity provider
        """
        self.account_service = account_service
        self.credential_service = credential_service
        self.identity_provider = identity_provider

    async def execute(
        self, request: ConfirmPasswordResetRequest
    ) -> ConfirmPasswordResetResponse:
        """Execute password reset confirmation.

        Args:
            request: Confirm password reset request

        Returns:
            Message and email

        Raises:
            NotFoundError: If no active account exists for the email
            AuthenticationError: If the reset code is wrong or expired (400)
        """
        email = normalize_email(request.email)

        with logfire.span("confirm_password_reset", email=email):
            account = await self.account_service.get_active_by_email(email)

            try:
                await self.identity_provider.confirm_reset(
                    email, request.code, request.new_password
                )
            except IdentityProviderError as e:
                logfire.warn("Password reset rejected", email=email, kind=e.kind.value)
                raise map_provider_error(
                    e,
                    RESET_CONFIRM_ERRORS,
                    fallback="Invalid OTP or password reset failed. Please try again.",
                ) from e

            account = await self.account_service.save(
                lifecycle.change_password_hash(
                    account,
                    self.credential_service.hash_password(request.new_password),
                    datetime.now(timezone.utc),
                )
            )
            logfire.info("Local password updated", account_id=str(account.id))

            try:
                await self.identity_provider.set_durable_credential(
                    email, self.credential_service.derived_credential(email)
                )
            except IdentityProviderError as e:
                # The reset itself succeeded; OTP login repairs the credential
                logfire.error(
                    "Failed to restore derived credential after reset",
                    email=email,
                    error=e.message,
                )

            return ConfirmPasswordResetResponse(
                message="Password reset successfully", email=email
            )
