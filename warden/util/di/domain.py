"""Domain layer DI providers."""

from dishka import Scope, provide

from warden.config import AuthSettings
from warden.domain.repository import (
    AccountRepository,
    OtpRepository,
    RoleRepository,
)
from warden.domain.service import AccountService, CredentialService, OtpService
from warden.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    """

    scope = Scope.REQUEST

    @provide
    def get_account_service(
        self,
        account_repository: AccountRepository,
        role_repository: RoleRepository,
    ) -> AccountService:
        """Provide account domain service."""
        return AccountService(
            account_repository=account_repository, role_repository=role_repository
        )

    @provide(scope=Scope.APP)
    def get_credential_service(self, auth_settings: AuthSettings) -> CredentialService:
        """Provide credential domain service."""
        return CredentialService(auth_settings=auth_settings)

    @provide
    def get_otp_service(
        self, otp_repository: OtpRepository, auth_settings: AuthSettings
    ) -> OtpService:
        """Provide login OTP domain service."""
        return OtpService(
            otp_repository=otp_repository, ttl_minutes=auth_settings.otp_ttl_minutes
        )
