"""Repository interfaces for Warden domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from warden.domain.repository.account import AccountRepository
from warden.domain.repository.otp import OtpRepository
from warden.domain.repository.role import RoleRepository

__all__ = [
    "AccountRepository",
    "OtpRepository",
    "RoleRepository",
]
