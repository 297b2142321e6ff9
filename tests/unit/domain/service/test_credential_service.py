"""Unit tests for the derived credential and CredentialService."""

import pytest

from warden.config import AuthSettings
from warden.domain.service import CredentialService
from warden.util.credential import derive_credential, normalize_email
from warden.util.error import ConfigurationError


class TestDeriveCredential:
    """Tests for derive_credential function."""

    def test_derivation_is_deterministic(self):
        """The same secret and email always give the same credential."""
        assert derive_credential("secret", "ada@example.com") == derive_credential(
            "secret", "ada@example.com"
        )

    def test_derivation_ignores_case_and_whitespace(self):
        """Email normalization happens before derivation."""
        assert derive_credential("secret", " Ada@Example.COM") == derive_credential(
            "secret", "ada@example.com"
        )

    def test_derivation_depends_on_email_and_secret(self):
        """Different emails or secrets give different credentials."""
        base = derive_credential("secret", "ada@example.com")

        assert derive_credential("secret", "grace@example.com") != base
        assert derive_credential("other-secret", "ada@example.com") != base

    def test_credential_satisfies_character_classes(self):
        """The credential carries upper, lower, digit and symbol characters."""
        credential = derive_credential("secret", "ada@example.com")

        assert any(c.isupper() for c in credential)
        assert any(c.islower() for c in credential)
        assert any(c.isdigit() for c in credential)
        assert any(not c.isalnum() for c in credential)
        assert len(credential) >= 12

    def test_empty_secret_is_a_configuration_error(self):
        """Derivation refuses to run without a service secret."""
        with pytest.raises(ConfigurationError):
            derive_credential("", "ada@example.com")

    def test_normalize_email(self):
        assert normalize_email("  Ada@Example.com ") == "ada@example.com"


class TestCredentialService:
    """Tests for CredentialService."""

    def test_derived_credential_uses_configured_secret(self):
        """The service derives with the process-wide secret."""
        service = CredentialService(AuthSettings(service_secret="from-settings"))

        assert service.derived_credential("ada@example.com") == derive_credential(
            "from-settings", "ada@example.com"
        )

    def test_password_round_trip(self):
        """A hashed password verifies; a different one does not."""
        service = CredentialService(AuthSettings())

        hashed = service.hash_password("correct horse battery")

        assert hashed != "correct horse battery"
        assert service.verify_password("correct horse battery", hashed)
        assert not service.verify_password("wrong horse battery", hashed)

    def test_missing_or_garbage_hash_never_verifies(self):
        """OTP-only accounts have no hash and must fail password checks."""
        service = CredentialService(AuthSettings())

        assert not service.verify_password("anything", None)
        assert not service.verify_password("anything", "not-a-hash")
