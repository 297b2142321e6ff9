"""Identity provider adapter."""

from .client import (
    IdentityProviderClient,
    MockIdentityProviderClient,
    RealIdentityProviderClient,
)

__all__ = [
    "IdentityProviderClient",
    "MockIdentityProviderClient",
    "RealIdentityProviderClient",
]
