"""PostgreSQL repository implementations."""

from warden.persistence.repository.account import PostgresAccountRepository
from warden.persistence.repository.otp import PostgresOtpRepository
from warden.persistence.repository.role import PostgresRoleRepository

__all__ = [
    "PostgresAccountRepository",
    "PostgresOtpRepository",
    "PostgresRoleRepository",
]
