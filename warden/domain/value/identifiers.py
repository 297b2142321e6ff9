"""Strongly typed identifiers for Warden domain entities."""

from typing import NewType
from uuid import UUID

AccountId = NewType("AccountId", UUID)
OtpRecordId = NewType("OtpRecordId", UUID)
RoleId = NewType("RoleId", UUID)
PermissionId = NewType("PermissionId", UUID)
