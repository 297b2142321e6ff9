"""Resend verification use case."""

from datetime import datetime, timezone

import logfire
from pydantic import BaseModel, EmailStr

from warden.domain.error import RateLimitedError, ValidationError
from warden.domain.service import (
    AccountService,
    CredentialService,
    IdentityProvider,
    IdentityProviderError,
    map_provider_error,
)
from warden.domain.service import lifecycle
from warden.domain.value import AccountStatus, ProviderErrorKind
from warden.util.credential import normalize_email

from .verify_email import get_pending_account

RESEND_ERRORS = {
    ProviderErrorKind.RATE_LIMITED: RateLimitedError(
        "Too many resend attempts. Please wait a few minutes before trying again."
    ),
    ProviderErrorKind.INVALID_PARAMETER: ValidationError(
        "Invalid email address. Please provide a valid email."
    ),
}


class ResendVerificationRequest(BaseModel):
    """Resend verification request."""

    email: EmailStr


class ResendVerificationResponse(BaseModel):
    """Resend verification response."""

    message: str
    email: str
    status: AccountStatus


class ResendVerificationUseCase:
    """Use case for re-sending the provider's confirmation code.

    Falls back to administrative confirmation when the provider refuses the
    resend because of the identity's state.
    """

    def __init__(
        self,
        account_service: AccountService,
        credential_service: CredentialService,
        identity_provider: IdentityProvider,
    ) -> None:
        """Initialize resend verification use case.

        Args:
            account_service: Account domain service
            credential_service: Credential domain service
            identity_provider: External identity provider
        """
        self.account_service = account_service
        self.credential_service = credential_service
        self.identity_provider = identity_provider

    async def execute(
        self, request: ResendVerificationRequest
    ) -> ResendVerificationResponse:
        """Execute resend verification.

        Args:
            request: Resend verification request

        Returns:
            Message, email and resulting account status

        Raises:
            ValidationError: If no pending, linked account exists
            NotFoundError: If the provider does not know the identity
            RateLimitedError: If the provider throttles the resend
        """
        email = normalize_email(request.email)

        with logfire.span("resend_verification", email=email):
            account = await get_pending_account(self.account_service, email)

            try:
                await self.identity_provider.resend_code(email)
                logfire.info("Confirmation code re-sent", email=email)
                return ResendVerificationResponse(
                    message="Verification email resent successfully. Please check your email.",
                    email=email,
                    status=account.status,
                )
            except IdentityProviderError as e:
                if e.kind != ProviderErrorKind.NOT_AUTHORIZED:
                    raise map_provider_error(
                        e,
                        RESEND_ERRORS,
                        fallback="Failed to resend verification email. Please contact support.",
                    ) from e
                logfire.warn(
                    "Resend refused for identity state, force-confirming",
                    email=email,
                    error=e.message,
                )

            try:
                await self.identity_provider.force_confirm(email)
            except IdentityProviderError as e:
                raise map_provider_error(
                    e,
                    RESEND_ERRORS,
                    fallback="Failed to resend verification email. Please contact support.",
                ) from e

            try:
                await self.identity_provider.set_durable_credential(
                    email, self.credential_service.derived_credential(email)
                )
            except IdentityProviderError as e:
                # OTP login re-installs it when token issuance is refused
                logfire.warn(
                    "Derived credential not installed after force-confirm",
                    email=email,
                    error=e.message,
                )

            account = await self.account_service.save(
                lifecycle.activate(
                    account, datetime.now(timezone.utc), record_login=False
                )
            )
            logfire.info("Account activated by force-confirm", account_id=str(account.id))

            return ResendVerificationResponse(
                message="Email verification completed automatically. You can now log in.",
                email=email,
                status=account.status,
            )
