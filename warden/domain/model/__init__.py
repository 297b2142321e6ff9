"""Domain model entities for Warden."""

from warden.domain.model.account import Account
from warden.domain.model.otp import OtpRecord
from warden.domain.model.role import Permission, Role

__all__ = [
    "Account",
    "OtpRecord",
    "Permission",
    "Role",
]
