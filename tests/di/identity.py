"""Mock identity provider providers for testing."""

from dishka import Scope, provide

from warden.adapter.identity import MockIdentityProviderClient
from warden.domain.service import IdentityProvider
from warden.util.di.infrastructure.identity import IdentityComponentProvider


class MockIdentityComponentProvider(IdentityComponentProvider):
    """Mock identity component using the in-memory provider."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_identity_provider(self) -> IdentityProvider:
        """Provide mock identity provider client."""
        return MockIdentityProviderClient()
