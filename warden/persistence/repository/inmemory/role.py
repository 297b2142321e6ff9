"""In-memory role repository for testing."""

from typing import Iterable, Optional
from uuid import UUID

from warden.domain.model.role import Permission, Role
from warden.domain.repository.role import RoleRepository
from warden.domain.value import PermissionId, RoleId

# Mirrors the seeded roles of a fresh database
DEFAULT_ROLES = [
    Role(
        id=RoleId(UUID("00000000-0000-0000-0000-000000000001")),
        name="Super Admin",
        type="super_admin",
        description="Full access",
        permissions=[
            Permission(
                id=PermissionId(UUID("00000000-0000-0000-0001-000000000001")),
                resource="users",
                action="manage",
            ),
        ],
    ),
    Role(
        id=RoleId(UUID("00000000-0000-0000-0000-000000000002")),
        name="KYC Reviewer",
        type="kyc_reviewer",
        description="Reviews identity verification submissions",
        permissions=[
            Permission(
                id=PermissionId(UUID("00000000-0000-0000-0001-000000000002")),
                resource="kyc",
                action="review",
            ),
        ],
    ),
    Role(
        id=RoleId(UUID("00000000-0000-0000-0000-000000000003")),
        name="User",
        type="user",
        description="Regular user",
        permissions=[
            Permission(
                id=PermissionId(UUID("00000000-0000-0000-0001-000000000003")),
                resource="profile",
                action="read",
            ),
            Permission(
                id=PermissionId(UUID("00000000-0000-0000-0001-000000000004")),
                resource="profile",
                action="update",
            ),
        ],
    ),
]


class InMemoryRoleRepository(RoleRepository):
    """In-memory implementation of RoleRepository for testing."""

    def __init__(self, roles: Iterable[Role] | None = None) -> None:
        self._roles: dict[RoleId, Role] = {
            role.id: role for role in (DEFAULT_ROLES if roles is None else roles)
        }

    async def find_by_id(self, role_id: RoleId) -> Optional[Role]:
        """Find a role by ID."""
        return self._roles.get(role_id)
