"""Verify email use case."""

from datetime import datetime, timezone

import logfire
from pydantic import BaseModel, EmailStr, Field

from warden.domain.error import (
    AuthenticationError,
    DependencyError,
    RateLimitedError,
    ValidationError,
)
from warden.domain.model import Account
from warden.domain.service import (
    AccountService,
    CredentialService,
    IdentityProvider,
    IdentityProviderError,
    map_provider_error,
)
from warden.domain.service import lifecycle
from warden.domain.value import AccountStatus, ProviderErrorKind, TokenBundle
from warden.util.credential import normalize_email

from .common import AccountInfo, describe_account

VERIFY_ERRORS = {
    ProviderErrorKind.EXPIRED_CODE: AuthenticationError(
        "Confirmation code has expired. Please request a new verification email.",
        status_code=400,
    ),
    ProviderErrorKind.NOT_AUTHORIZED: AuthenticationError(
        "Invalid or expired confirmation code. Please request a new verification email.",
        status_code=400,
    ),
    ProviderErrorKind.RATE_LIMITED: RateLimitedError(
        "Too many verification attempts. Please wait a few minutes before trying again."
    ),
}


async def get_pending_account(account_service: AccountService, email: str) -> Account:
    """Get the pending, linked account verification operates on.

    Raises:
        ValidationError: If no pending account exists or it has no linkage
    """
    account = await account_service.get_by_email(email)
    if account is None or account.status != AccountStatus.PENDING_VERIFICATION:
        raise ValidationError("User not found or already verified")
    if not account.is_linked:
        raise ValidationError(
            "User not properly configured for identity provider authentication"
        )
    return account


class VerifyEmailRequest(BaseModel):
    """Verify email request."""

    email: EmailStr
    code: str = Field(min_length=1, max_length=16)


class VerifyEmailResponse(BaseModel):
    """Verify email response."""

    message: str
    account: AccountInfo
    tokens: TokenBundle


class VerifyEmailUseCase:
    """Use case for confirming an email with the provider's code and logging in."""

    def __init__(
        self,
        account_service: AccountService,
        credential_service: CredentialService,
        identity_provider: IdentityProvider,
    ) -> None:
        """Initialize verify email use case.

        Args:
            account_service: Account domain service
            credential_service: Credential domain service
            identity_provider: External identity provider
        """
        self.account_service = account_service
        self.credential_service = credential_service
        self.identity_provider = identity_provider

    async def execute(self, request: VerifyEmailRequest) -> VerifyEmailResponse:
        """Execute email verification.

        Steps:
        1. Confirm the code with the provider (account untouched on failure)
        2. Install the derived credential provider-side
        3. Activate the account
        4. Issue tokens with the derived credential and store them

        Activation is kept when token issuance fails; tokens can be obtained
        later through any login path.

        Args:
            request: Verify email request

        Returns:
            Formatted account and token bundle

        Raises:
            ValidationError: If no pending, linked account exists
            AuthenticationError: If the code is wrong or expired (400)
            DependencyError: If the provider fails after confirmation
        """
        email = normalize_email(request.email)

        with logfire.span("verify_email", email=email):
            account = await get_pending_account(self.account_service, email)

            try:
                await self.identity_provider.confirm_code(email, request.code)
            except IdentityProviderError as e:
                logfire.warn("Email confirmation rejected", email=email, kind=e.kind.value)
                raise map_provider_error(
                    e, VERIFY_ERRORS, fallback="Email verification failed"
                ) from e

            credential = self.credential_service.derived_credential(email)
            try:
                await self.identity_provider.set_durable_credential(email, credential)
            except IdentityProviderError as e:
                raise map_provider_error(
                    e, fallback="Failed to set up authentication. Please contact support."
                ) from e

            now = datetime.now(timezone.utc)
            account = await self.account_service.save(lifecycle.activate(account, now))
            logfire.info("Account activated", account_id=str(account.id))

            try:
                tokens = await self.identity_provider.issue_tokens(email, credential)
            except IdentityProviderError as e:
                logfire.error(
                    "Token issuance failed after activation",
                    account_id=str(account.id),
                    kind=e.kind.value,
                    error=e.message,
                )
                raise DependencyError("Failed to generate authentication tokens") from e

            account = await self.account_service.save(
                lifecycle.store_tokens(account, tokens, now)
            )

            return VerifyEmailResponse(
                message="Email verified and logged in successfully",
                account=await describe_account(self.account_service, account),
                tokens=tokens,
            )
