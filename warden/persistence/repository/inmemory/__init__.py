"""In-memory repository implementations for testing."""

from .account import InMemoryAccountRepository
from .otp import InMemoryOtpRepository
from .role import DEFAULT_ROLES, InMemoryRoleRepository

__all__ = [
    "DEFAULT_ROLES",
    "InMemoryAccountRepository",
    "InMemoryOtpRepository",
    "InMemoryRoleRepository",
]
