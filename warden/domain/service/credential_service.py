"""Credential domain service."""

import logfire

from warden.config import AuthSettings
from warden.util.credential import derive_credential
from warden.util.password import hash_password, verify_password

from .base import Service


class CredentialService(Service):
    """Domain service for local password hashes and the derived provider credential."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize credential service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def derived_credential(self, email: str) -> str:
        """Provider-side password for an account, recomputed on every call.

        Args:
            email: Account email

        Returns:
            Derived credential
        """
        return derive_credential(self.auth_settings.service_secret, email)

    def hash_password(self, password: str) -> str:
        """Hash a user-chosen password for local storage."""
        with logfire.span("credential_service.hash_password"):
            return hash_password(password)

    def verify_password(self, password: str, password_hash: str | None) -> bool:
        """Check a user-chosen password against the stored hash."""
        with logfire.span("credential_service.verify_password"):
            return verify_password(password, password_hash)
