"""Password signin use case."""

from datetime import datetime, timezone

import logfire
from pydantic import BaseModel, EmailStr, Field

from warden.domain.error import AuthenticationError
from warden.domain.service import (
    AccountService,
    CredentialService,
    IdentityProvider,
    IdentityProviderError,
)
from warden.domain.service import lifecycle
from warden.domain.value import TokenBundle
from warden.util.credential import normalize_email

from .common import AccountInfo, describe_account

INVALID_CREDENTIALS = "Invalid email or password"


class SigninPasswordRequest(BaseModel):
    """Password signin request."""

    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class SigninPasswordResponse(BaseModel):
    """Password signin response.

    ``tokens`` is None when the identity provider could not issue any.
    """

    message: str
    account: AccountInfo
    tokens: TokenBundle | None = None


class SigninPasswordUseCase:
    """Use case for logging in with the locally stored password."""

    def __init__(
        self,
        account_service: AccountService,
        credential_service: CredentialService,
        identity_provider: IdentityProvider,
    ) -> None:
        """Initialize password signin use case.

        Args:
            account_service: Account domain service
            credential_service: Credential domain service
            identity_provider: External identity provider
        """
        self.account_service = account_service
        self.credential_service = credential_service
        self.identity_provider = identity_provider

    async def execute(self, request: SigninPasswordRequest) -> SigninPasswordResponse:
        """Execute password signin.

        Unknown email, inactive account, missing password and wrong password
        all fail the same way.

        Args:
            request: Password signin request

        Returns:
            Formatted account, with tokens when the provider issued them

        Raises:
            AuthenticationError: If the credentials are not valid
        """
        email = normalize_email(request.email)

        with logfire.span("signin_password", email=email):
            account = await self.account_service.get_by_email(email)
            if (
                account is None
                or not account.is_active
                or not self.credential_service.verify_password(
                    request.password, account.password_hash
                )
            ):
                logfire.warn("Password signin rejected", email=email)
                raise AuthenticationError(INVALID_CREDENTIALS)

            now = datetime.now(timezone.utc)
            account = lifecycle.record_login(account, now)

            tokens = None
            if account.is_linked:
                try:
                    tokens = await self.identity_provider.issue_tokens(
                        email, self.credential_service.derived_credential(email)
                    )
                    account = lifecycle.store_tokens(account, tokens, now)
                except IdentityProviderError as e:
                    # The local password already authenticated the caller
                    logfire.warn(
                        "Token issuance failed during password signin",
                        account_id=str(account.id),
                        kind=e.kind.value,
                        error=e.message,
                    )

            account = await self.account_service.save(account)
            logfire.info(
                "Password signin succeeded",
                account_id=str(account.id),
                has_tokens=tokens is not None,
            )

            return SigninPasswordResponse(
                message="Login successful",
                account=await describe_account(self.account_service, account),
                tokens=tokens,
            )
