"""Unit tests for identity provider error mapping."""

from warden.domain.error import (
    AuthenticationError,
    ConflictError,
    DependencyError,
    RateLimitedError,
)
from warden.domain.service import IdentityProviderError, map_provider_error
from warden.domain.value import ProviderErrorKind


class TestMapProviderError:
    """Tests for map_provider_error function."""

    def test_default_mapping(self):
        """Kinds without override use their default domain error."""
        error = map_provider_error(
            IdentityProviderError(ProviderErrorKind.DUPLICATE, "exists")
        )

        assert isinstance(error, ConflictError)
        assert error.status_code == 400

    def test_override_wins_over_default(self):
        """Operation-specific overrides replace the default message."""
        overrides = {
            ProviderErrorKind.RATE_LIMITED: RateLimitedError("Slow down, signup")
        }

        error = map_provider_error(
            IdentityProviderError(ProviderErrorKind.RATE_LIMITED, "throttled"),
            overrides,
        )

        assert isinstance(error, RateLimitedError)
        assert error.message == "Slow down, signup"
        assert error.status_code == 429

    def test_code_errors_are_client_errors(self):
        """Wrong and expired codes are 400, not 401."""
        for kind in (ProviderErrorKind.INVALID_CODE, ProviderErrorKind.EXPIRED_CODE):
            error = map_provider_error(IdentityProviderError(kind, "bad code"))

            assert isinstance(error, AuthenticationError)
            assert error.status_code == 400

    def test_unknown_kind_uses_fallback(self):
        """Unmapped failures become a dependency error with the fallback."""
        error = map_provider_error(
            IdentityProviderError(ProviderErrorKind.UNKNOWN, "boom"),
            fallback="Registration failed: boom",
        )

        assert isinstance(error, DependencyError)
        assert error.status_code == 500
        assert error.message == "Registration failed: boom"

    def test_misconfiguration_and_timeout_are_dependency_errors(self):
        for kind in (ProviderErrorKind.MISCONFIGURED, ProviderErrorKind.TIMEOUT):
            assert isinstance(
                map_provider_error(IdentityProviderError(kind, "")), DependencyError
            )

    def test_returns_fresh_instances(self):
        """Mapped errors are never shared between calls."""
        source = IdentityProviderError(ProviderErrorKind.NOT_FOUND, "missing")

        assert map_provider_error(source) is not map_provider_error(source)
