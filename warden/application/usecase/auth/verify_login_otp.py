"""Verify login OTP use case."""

from datetime import datetime, timezone

import logfire
from pydantic import BaseModel, EmailStr, Field

from warden.domain.error import (
    AuthenticationError,
    ConflictError,
    DependencyError,
    NotFoundError,
    RateLimitedError,
    ValidationError,
)
from warden.domain.model import Account
from warden.domain.service import (
    AccountService,
    CredentialService,
    IdentityProvider,
    IdentityProviderError,
    OtpService,
    map_provider_error,
)
from warden.domain.service import lifecycle
from warden.domain.service.lifecycle import LinkagePlan
from warden.domain.value import ProviderErrorKind, TokenBundle
from warden.util.credential import normalize_email

from .common import AccountInfo, describe_account

LINK_ERRORS = {
    ProviderErrorKind.DUPLICATE: ConflictError(
        "User account already exists. Please contact support to resolve authentication issues."
    ),
    ProviderErrorKind.INVALID_PARAMETER: ValidationError(
        "Invalid user information. Please contact support."
    ),
    ProviderErrorKind.RATE_LIMITED: RateLimitedError(
        "Too many authentication attempts. Please wait a few minutes before trying again."
    ),
}

TOKEN_ERRORS = {
    ProviderErrorKind.NOT_AUTHORIZED: AuthenticationError(
        "Authentication failed. Please check your credentials and try again."
    ),
    ProviderErrorKind.RATE_LIMITED: RateLimitedError(
        "Too many login attempts. Please wait a moment and try again."
    ),
}


class VerifyLoginOtpRequest(BaseModel):
    """Verify login OTP request."""

    email: EmailStr
    code: str = Field(pattern=r"^\d{6}$")


class VerifyLoginOtpResponse(BaseModel):
    """Verify login OTP response."""

    message: str
    account: AccountInfo
    tokens: TokenBundle


class VerifyLoginOtpUseCase:
    """Use case for logging in with a login code."""

    def __init__(
        self,
        account_service: AccountService,
        credential_service: CredentialService,
        otp_service: OtpService,
        identity_provider: IdentityProvider,
    ) -> None:
        """Initialize verify login OTP use case.

        Args:
            account_service: Account domain service
            credential_service: Credential domain service
            otp_service: Login OTP domain service
            identity_provider: External identity provider
        """
        self.account_service = account_service
        self.credential_service = credential_service
        self.otp_service = otp_service
        self.identity_provider = identity_provider

    async def execute(self, request: VerifyLoginOtpRequest) -> VerifyLoginOtpResponse:
        """Execute login OTP verification.

        Steps:
        1. Check the code against the usable record (nothing else happens
           on a wrong code, and the record stays usable)
        2. Link an unlinked account to an existing or new external identity
        3. Consume the record and stamp the login
        4. Issue tokens with the derived credential and store them

        Args:
            request: Verify login OTP request

        Returns:
            Formatted account and token bundle

        Raises:
            NotFoundError: If no active account or no usable code exists
            AuthenticationError: If the code does not match
        """
        email = normalize_email(request.email)

        with logfire.span("verify_login_otp", email=email):
            account = await self.account_service.get_active_by_email(email)

            record = await self.otp_service.find_usable(email)
            if record is None:
                raise NotFoundError("No valid OTP found. Please request a new OTP.")
            if not record.matches(request.code):
                logfire.warn("Login OTP mismatch", email=email, otp_id=str(record.id))
                raise AuthenticationError(
                    "Invalid OTP. Please try again.", status_code=400
                )

            credential = self.credential_service.derived_credential(email)
            if not account.is_linked:
                account = await self._link(account, credential)

            now = datetime.now(timezone.utc)
            await self.otp_service.consume(record, now)
            account = await self.account_service.save(
                lifecycle.record_login(account, now)
            )

            tokens = await self._issue_tokens(email, credential)
            account = await self.account_service.save(
                lifecycle.store_tokens(account, tokens, now)
            )
            logfire.info("Login OTP verified", account_id=str(account.id))

            return VerifyLoginOtpResponse(
                message="Login successful",
                account=await describe_account(self.account_service, account),
                tokens=tokens,
            )

    async def _link(self, account: Account, credential: str) -> Account:
        """Give an unlinked account an external identity.

        Installing the derived credential is best effort; token issuance
        repairs it when it is missing.
        """
        with logfire.span("verify_login_otp.link", account_id=str(account.id)):
            try:
                lookup = await self.identity_provider.check_exists(account.email)
                plan = lifecycle.plan_linkage(account, lookup)
                if plan == LinkagePlan.PROVISION:
                    result = await self.identity_provider.provision_administrative(
                        account.email, account.full_name, account.phone_number
                    )
                    external_id = result.external_id
                    external_username = result.external_username
                else:
                    external_id = lookup.external_id or lookup.external_username
                    external_username = lookup.external_username
            except IdentityProviderError as e:
                raise map_provider_error(
                    e,
                    LINK_ERRORS,
                    fallback="Failed to set up authentication. Please contact support.",
                ) from e

            if not external_id:
                raise DependencyError(
                    "Failed to create identity provider account during login"
                )

            account = await self.account_service.save(
                lifecycle.link_external(
                    account, external_id, external_username, datetime.now(timezone.utc)
                )
            )
            logfire.info(
                "Account linked during login",
                account_id=str(account.id),
                plan=plan.value,
            )

            await self._install_credential(account.email, credential)
            return account

    async def _install_credential(self, email: str, credential: str) -> bool:
        try:
            await self.identity_provider.set_durable_credential(email, credential)
            return True
        except IdentityProviderError as e:
            logfire.warn(
                "Failed to install derived credential", email=email, error=e.message
            )
            return False

    async def _issue_tokens(self, email: str, credential: str) -> TokenBundle:
        """Issue tokens, re-installing the derived credential once if refused."""
        try:
            return await self.identity_provider.issue_tokens(email, credential)
        except IdentityProviderError as e:
            refused = e.kind == ProviderErrorKind.NOT_AUTHORIZED
            if not refused or not await self._install_credential(email, credential):
                raise map_provider_error(
                    e,
                    TOKEN_ERRORS,
                    fallback="Failed to generate authentication tokens. Please try again.",
                ) from e
            logfire.info("Derived credential re-installed, retrying", email=email)

        try:
            return await self.identity_provider.issue_tokens(email, credential)
        except IdentityProviderError as e:
            raise map_provider_error(
                e,
                TOKEN_ERRORS,
                fallback="Failed to generate authentication tokens. Please try again.",
            ) from e
