"""Signup use case."""

from datetime import datetime, timezone

import logfire
from pydantic import BaseModel, EmailStr, Field

from warden.config import Settings
from warden.domain.error import ConflictError, DomainError, RateLimitedError
from warden.domain.model import Account
from warden.domain.service import (
    AccountService,
    CredentialService,
    IdentityProvider,
    IdentityProviderError,
    map_provider_error,
)
from warden.domain.service import lifecycle
from warden.domain.service.lifecycle import SignupDecision
from warden.domain.value import (
    AccountId,
    AccountStatus,
    ExternalIdentityLookup,
    ExternalIdentityResult,
    ExternalIdentityStatus,
    ProviderErrorKind,
    ProvisioningMode,
    RoleId,
)
from warden.util.credential import normalize_email

SIGNUP_ERRORS = {
    ProviderErrorKind.RATE_LIMITED: RateLimitedError(
        "Too many registration attempts. Please wait a few minutes before trying again."
    ),
}

VERIFIED_DUPLICATE = "User with this email already exists and is verified"


class SignupRequest(BaseModel):
    """Signup request."""

    email: EmailStr
    full_name: str = Field(min_length=1, max_length=255)
    phone_number: str | None = Field(default=None, max_length=32)
    password: str = Field(min_length=8, max_length=128)


class SignupResponse(BaseModel):
    """Signup response."""

    message: str
    email: str
    account_id: AccountId
    status: AccountStatus


class SignupUseCase:
    """Use case for creating a pending account and its external identity.

    Runs as a saga: the local row is created first and deleted again if the
    identity provider step fails.
    """

    def __init__(
        self,
        account_service: AccountService,
        credential_service: CredentialService,
        identity_provider: IdentityProvider,
        settings: Settings,
    ) -> None:
        """Initialize signup use case.

        Args:
            account_service: Account domain service
            credential_service: Credential domain service
            identity_provider: External identity provider
            settings: Application settings
        """
        self.account_service = account_service
        self.credential_service = credential_service
        self.identity_provider = identity_provider
        self.settings = settings

    async def execute(self, request: SignupRequest) -> SignupResponse:
        """Execute signup.

        Steps:
        1. Reject taken email or phone (a pending account may be resumed)
        2. Create the local account, pending and unlinked
        3. Look up the external identity and decide provision/resume/reject
        4. Provision (self-service, then administrative) or reuse the identity
        5. Link the account, or delete it again on failure

        Args:
            request: Signup request

        Returns:
            Signup response with the pending account's ID

        Raises:
            ConflictError: If the email or phone is taken, or the external
                identity is already verified
            DomainError: Mapped identity provider failure
        """
        email = normalize_email(request.email)

        with logfire.span("signup", email=email):
            existing = await self.account_service.get_by_email(email)
            if existing is not None:
                if existing.is_active or not self.settings.auth.allow_resumable_signup:
                    raise ConflictError("User with this email already exists")
                return await self._resume_pending(existing)

            await self.account_service.ensure_available(email, request.phone_number)

            account = lifecycle.new_pending_account(
                email=email,
                full_name=request.full_name,
                phone_number=request.phone_number,
                password_hash=self.credential_service.hash_password(request.password),
                role_id=RoleId(self.settings.auth.default_role_id),
                now=datetime.now(timezone.utc),
            )
            # Unique violation here means a concurrent signup won; nothing
            # exists at the provider yet, so there is nothing to clean up.
            account = await self.account_service.create(account)

            try:
                account = await self._attach_identity(account)
            except IdentityProviderError as e:
                await self._compensate(account, e)
                raise map_provider_error(
                    e, SIGNUP_ERRORS, fallback=f"Registration failed: {e.message}"
                ) from e
            except DomainError as e:
                await self._compensate(account, e)
                raise

            logfire.info(
                "Signup completed",
                account_id=str(account.id),
                external_id=account.external_id,
            )
            return SignupResponse(
                message="Registration successful. Please check your email for verification code.",
                email=email,
                account_id=account.id,
                status=account.status,
            )

    async def _attach_identity(self, account: Account) -> Account:
        """Give a freshly created account its external identity."""
        lookup = await self.identity_provider.check_exists(account.email)
        decision = lifecycle.decide_signup(
            lookup, self.settings.auth.allow_resumable_signup
        )
        logfire.info(
            "Signup decision",
            email=account.email,
            decision=decision.value,
            external_status=lookup.status.value,
        )

        if decision == SignupDecision.REJECT:
            raise ConflictError(
                VERIFIED_DUPLICATE
                if lookup.status == ExternalIdentityStatus.CONFIRMED
                else "User with this email already exists"
            )

        if decision == SignupDecision.RESUME:
            await self._resend_for_resume(account.email)
            return await self._link(account, self._lookup_result(lookup))

        result = await self._provision(account)
        return await self._link(account, result)

    async def _resume_pending(self, account: Account) -> SignupResponse:
        """Resume signup for an account that never finished verification.

        The stored profile and password are kept as they are; only the
        confirmation code is re-sent, to whoever owns the mailbox.
        """
        lookup = await self._lookup(account.email)
        decision = lifecycle.decide_signup(lookup, allow_resumable=True)
        logfire.info(
            "Resuming pending signup",
            account_id=str(account.id),
            decision=decision.value,
        )

        if decision == SignupDecision.REJECT:
            raise ConflictError(VERIFIED_DUPLICATE)

        try:
            if decision == SignupDecision.RESUME:
                await self._resend_for_resume(account.email)
                result = self._lookup_result(lookup)
            else:
                # Identity vanished provider-side; provision it again
                result = await self._provision(account)
            account = await self._link(account, result)
        except IdentityProviderError as e:
            raise map_provider_error(
                e, SIGNUP_ERRORS, fallback=f"Registration failed: {e.message}"
            ) from e

        return SignupResponse(
            message="Registration successful. Please check your email for verification code.",
            email=account.email,
            account_id=account.id,
            status=account.status,
        )

    async def _lookup(self, email: str) -> ExternalIdentityLookup:
        try:
            return await self.identity_provider.check_exists(email)
        except IdentityProviderError as e:
            raise map_provider_error(
                e, SIGNUP_ERRORS, fallback=f"Registration failed: {e.message}"
            ) from e

    async def _resend_for_resume(self, email: str) -> None:
        """Re-send the confirmation code of an existing unconfirmed identity.

        A provider refusing the resend for the identity's state is not fatal:
        resend-verification falls back to force-confirmation later.
        """
        try:
            await self.identity_provider.resend_code(email)
        except IdentityProviderError as e:
            if e.kind != ProviderErrorKind.NOT_AUTHORIZED:
                raise
            logfire.warn(
                "Confirmation code resend refused during resumed signup",
                email=email,
                error=e.message,
            )

    async def _provision(self, account: Account) -> ExternalIdentityResult:
        """Provision self-service first, administratively on any failure."""
        mode = ProvisioningMode.SELF_SERVICE
        try:
            result = await self.identity_provider.provision_self_service(
                account.email,
                account.full_name,
                account.phone_number,
                self.credential_service.derived_credential(account.email),
            )
        except IdentityProviderError as e:
            # Throttling is surfaced, never retried through another mode
            if e.kind == ProviderErrorKind.RATE_LIMITED:
                raise
            logfire.warn(
                "Self-service provisioning failed, trying administrative",
                email=account.email,
                kind=e.kind.value,
                error=e.message,
            )
            mode = ProvisioningMode.ADMINISTRATIVE
            result = await self.identity_provider.provision_administrative(
                account.email, account.full_name, account.phone_number
            )
        logfire.info("Identity provisioned", email=account.email, mode=mode.value)
        return result

    @staticmethod
    def _lookup_result(lookup: ExternalIdentityLookup) -> ExternalIdentityResult:
        return ExternalIdentityResult(
            success=True,
            external_id=lookup.external_id or lookup.external_username,
            external_username=lookup.external_username,
        )

    async def _link(self, account: Account, result: ExternalIdentityResult) -> Account:
        if not result.success or not result.external_id:
            raise IdentityProviderError(
                ProviderErrorKind.UNKNOWN, "Provider returned no identity"
            )
        linked = lifecycle.link_external(
            account,
            result.external_id,
            result.external_username,
            datetime.now(timezone.utc),
        )
        return await self.account_service.save(lifecycle.check_invariants(linked))

    async def _compensate(self, account: Account, error: Exception) -> None:
        """Delete the account created by this signup, best effort."""
        logfire.warn(
            "Signup failed, removing local account",
            account_id=str(account.id),
            error=str(error),
        )
        try:
            await self.account_service.delete(account.id)
        except Exception as e:
            # Left for out-of-band cleanup; the original error still surfaces
            logfire.error(
                "Signup compensation failed",
                account_id=str(account.id),
                error=str(e),
            )
