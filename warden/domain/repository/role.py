"""Role repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from warden.domain.model.role import Role
from warden.domain.value import RoleId


class RoleRepository(ABC):
    """Read-only repository for roles and their permissions."""

    @abstractmethod
    async def find_by_id(self, role_id: RoleId) -> Optional[Role]:
        """Find a role by ID, permissions included.

        Args:
            role_id: The role's unique identifier

        Returns:
            The role if found, None otherwise
        """
        pass
