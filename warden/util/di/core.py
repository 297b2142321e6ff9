"""Configuration providers."""

from dishka import Scope, provide

from warden.config import AuthSettings, Settings
from warden.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Settings read once per process; the service secret never changes after."""

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        return Settings()

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Auth section, for services that need only the secret and OTP policy."""
        return settings.auth
