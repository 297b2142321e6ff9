"""Translation of identity provider failures into domain errors."""

from collections.abc import Mapping

from warden.domain.error import (
    AuthenticationError,
    ConflictError,
    DependencyError,
    DomainError,
    NotFoundError,
    RateLimitedError,
    ValidationError,
)
from warden.domain.service.identity_provider import IdentityProviderError
from warden.domain.value import ProviderErrorKind

_DEFAULTS: dict[ProviderErrorKind, DomainError] = {
    ProviderErrorKind.DUPLICATE: ConflictError(
        "User with this email already exists. Please try logging in or use a different email."
    ),
    ProviderErrorKind.NOT_FOUND: NotFoundError(
        "User not found. Please check your email address."
    ),
    ProviderErrorKind.INVALID_CODE: AuthenticationError(
        "Invalid confirmation code. Please check your email and enter the correct code.",
        status_code=400,
    ),
    ProviderErrorKind.EXPIRED_CODE: AuthenticationError(
        "Confirmation code has expired. Please request a new code.",
        status_code=400,
    ),
    ProviderErrorKind.RATE_LIMITED: RateLimitedError(
        "Too many requests. Please wait a few minutes before trying again."
    ),
    ProviderErrorKind.NOT_AUTHORIZED: AuthenticationError(
        "Authentication failed. Please check your credentials."
    ),
    ProviderErrorKind.NOT_CONFIRMED: ValidationError(
        "Email not verified. Please verify your email before logging in."
    ),
    ProviderErrorKind.INVALID_PARAMETER: ValidationError(
        "Invalid input parameters. Please check your information and try again."
    ),
    ProviderErrorKind.INVALID_PASSWORD: ValidationError(
        "Password does not meet requirements. Please use a stronger password."
    ),
    ProviderErrorKind.MISCONFIGURED: DependencyError(
        "Identity provider is not properly configured"
    ),
    ProviderErrorKind.TIMEOUT: DependencyError(
        "Identity provider did not respond in time. Please try again."
    ),
}


def map_provider_error(
    error: IdentityProviderError,
    overrides: Mapping[ProviderErrorKind, DomainError] | None = None,
    fallback: str = "Identity provider request failed",
) -> DomainError:
    """Map a provider failure to the domain error the caller should raise.

    A fresh exception is returned each time so tracebacks never leak
    between requests.

    Args:
        error: Categorized provider failure
        overrides: Operation-specific errors per kind
        fallback: Message for kinds with neither override nor default

    Returns:
        Domain error to raise
    """
    template = None
    if overrides:
        template = overrides.get(error.kind)
    if template is None:
        template = _DEFAULTS.get(error.kind)
    if template is None:
        return DependencyError(fallback)
    return type(template)(template.message, status_code=template.status_code)
