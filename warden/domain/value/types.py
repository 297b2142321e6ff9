"""Domain value objects for Warden.

Value objects are immutable and defined by their values, not identity.
"""

import re
from enum import Enum

from pydantic import field_validator

from warden.domain.value.common import RootValueObject, ValueObject


class AccountStatus(str, Enum):
    """Lifecycle status of a local account.

    Accounts start pending and become active exactly once.
    """

    PENDING_VERIFICATION = "pending_verification"
    ACTIVE = "active"


class ExternalIdentityStatus(str, Enum):
    """Status of an identity as reported by the identity provider."""

    CONFIRMED = "confirmed"
    UNCONFIRMED = "unconfirmed"
    FORCE_CHANGE_PASSWORD = "force_change_password"
    UNKNOWN = "unknown"


class ProvisioningMode(str, Enum):
    """How an external identity gets created."""

    SELF_SERVICE = "self_service"
    ADMINISTRATIVE = "administrative"


class ProviderErrorKind(str, Enum):
    """Closed set of failure categories an identity provider can report."""

    DUPLICATE = "duplicate"
    NOT_FOUND = "not_found"
    INVALID_CODE = "invalid_code"
    EXPIRED_CODE = "expired_code"
    RATE_LIMITED = "rate_limited"
    NOT_AUTHORIZED = "not_authorized"
    NOT_CONFIRMED = "not_confirmed"
    INVALID_PARAMETER = "invalid_parameter"
    INVALID_PASSWORD = "invalid_password"
    MISCONFIGURED = "misconfigured"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


class OtpCode(RootValueObject[str]):
    """Six-digit numeric login code."""

    @field_validator("root")
    @classmethod
    def validate_code(cls, v: str) -> str:
        """Validate the code is exactly six digits."""
        if not re.fullmatch(r"\d{6}", v):
            raise ValueError("OTP code must be exactly 6 digits")
        return v


class TokenBundle(ValueObject):
    """Tokens issued by the identity provider for an account."""

    access_token: str
    id_token: str | None = None
    refresh_token: str | None = None
    token_type: str = "Bearer"
    expires_in: int


class ExternalIdentityResult(ValueObject):
    """Outcome of provisioning an identity at the provider."""

    success: bool
    external_id: str | None = None
    external_username: str | None = None
    tokens: TokenBundle | None = None


class ExternalIdentityLookup(ValueObject):
    """Whether the provider already holds an identity for an email."""

    exists: bool
    status: ExternalIdentityStatus = ExternalIdentityStatus.UNKNOWN
    external_id: str | None = None
    external_username: str | None = None
