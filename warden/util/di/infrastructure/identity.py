"""Identity provider infrastructure providers."""

from dishka import Scope, provide
import logfire

from warden.adapter.identity import RealIdentityProviderClient
from warden.config import Settings
from warden.domain.service import IdentityProvider
from warden.util.di.base import ProviderBase


class IdentityComponentProvider(ProviderBase):
    """Identity provider component base."""

    __mock_component__ = "identity"


class ProdIdentityComponentProvider(IdentityComponentProvider):
    """Production identity provider component."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_identity_provider(self, settings: Settings) -> IdentityProvider:
        """Provide the HTTP identity provider client.

        An unconfigured client is still provided; each of its calls then
        fails as misconfigured.
        """
        config = settings.identity_provider
        if not config.is_configured:
            logfire.warn("Identity provider is not configured")
        return RealIdentityProviderClient(
            endpoint=config.endpoint,
            client_id=config.client_id,
            client_secret=config.client_secret,
            admin_token=config.admin_token,
            timeout_seconds=config.timeout_seconds,
        )
