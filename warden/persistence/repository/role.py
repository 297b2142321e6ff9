"""PostgreSQL implementation of Role repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from warden.domain.model import Role
from warden.domain.repository import RoleRepository
from warden.domain.value import RoleId
from warden.persistence.mappers import row_to_role
from warden.persistence.tables import (
    permissions_table,
    role_permissions_table,
    roles_table,
)


class PostgresRoleRepository(RoleRepository):
    """PostgreSQL implementation of RoleRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, role_id: RoleId) -> Optional[Role]:
        """Find a role by ID with its permissions.

        Args:
            role_id: Role ID to look up

        Returns:
            Role if found, None otherwise
        """
        stmt = select(roles_table).where(roles_table.c.id == role_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        if not row:
            return None

        permissions_stmt = (
            select(permissions_table)
            .select_from(
                permissions_table.join(
                    role_permissions_table,
                    permissions_table.c.id == role_permissions_table.c.permission_id,
                )
            )
            .where(role_permissions_table.c.role_id == role_id)
            .order_by(permissions_table.c.resource, permissions_table.c.action)
        )
        permission_rows = (await self.session.execute(permissions_stmt)).mappings()
        return row_to_role(dict(row), [dict(p) for p in permission_rows])
