"""Mock persistence providers for testing."""

from dishka import Scope, provide

from warden.domain.repository import (
    AccountRepository,
    OtpRepository,
    RoleRepository,
)
from warden.persistence.repository.inmemory import (
    InMemoryAccountRepository,
    InMemoryOtpRepository,
    InMemoryRoleRepository,
)
from warden.util.di.infrastructure.persistence import PersistenceProvider


class MockPersistenceProvider(PersistenceProvider):
    """Mock persistence provider using in-memory repositories.

    Uses APP scope so state outlives a single request: API tests drive a
    signup, a verification and a login through separate requests against
    one container. Each test builds its own container, which keeps tests
    isolated.
    """

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_account_repository(self) -> AccountRepository:
        """Provide in-memory account repository."""
        return InMemoryAccountRepository()

    @provide(scope=Scope.APP)
    def get_otp_repository(self) -> OtpRepository:
        """Provide in-memory login OTP repository."""
        return InMemoryOtpRepository()

    @provide(scope=Scope.APP)
    def get_role_repository(self) -> RoleRepository:
        """Provide in-memory role repository with the default roles."""
        return InMemoryRoleRepository()
