"""Role and permission entities.

Read-only from the point of view of the credential lifecycle: roles are
assigned to accounts and projected into responses, never mutated here.
"""

from typing import Optional

from pydantic import Field

from warden.domain.model.common import DomainModel
from warden.domain.value import PermissionId, RoleId


class Permission(DomainModel):
    """A single resource/action grant."""

    id: PermissionId
    resource: str
    action: str


class Role(DomainModel):
    """Named set of permissions."""

    id: RoleId
    name: str
    type: str  # e.g. "super_admin", "kyc_reviewer", "user"
    description: Optional[str] = None
    is_active: bool = True
    permissions: list[Permission] = Field(default_factory=list)
