"""Domain value objects for Warden."""

from warden.domain.value.identifiers import (
    AccountId,
    OtpRecordId,
    PermissionId,
    RoleId,
)
from warden.domain.value.types import (
    AccountStatus,
    ExternalIdentityLookup,
    ExternalIdentityResult,
    ExternalIdentityStatus,
    OtpCode,
    ProviderErrorKind,
    ProvisioningMode,
    TokenBundle,
)

__all__ = [
    # Identifiers
    "AccountId",
    "OtpRecordId",
    "PermissionId",
    "RoleId",
    # Types
    "AccountStatus",
    "ExternalIdentityLookup",
    "ExternalIdentityResult",
    "ExternalIdentityStatus",
    "OtpCode",
    "ProviderErrorKind",
    "ProvisioningMode",
    "TokenBundle",
]
