"""PostgreSQL implementation of Account repository."""

from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from warden.domain.error import ConflictError
from warden.domain.model import Account
from warden.domain.repository import AccountRepository
from warden.domain.value import AccountId
from warden.persistence.mappers import account_to_dict, row_to_account
from warden.persistence.tables import accounts_table


class PostgresAccountRepository(AccountRepository):
    """PostgreSQL implementation of AccountRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Find an account by ID.

        Args:
            account_id: Account ID to look up

        Returns:
            Account if found, None otherwise
        """
        stmt = select(accounts_table).where(accounts_table.c.id == account_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_account(dict(row)) if row else None

    async def find_by_email(self, email: str) -> Optional[Account]:
        """Find an account by email.

        Args:
            email: Normalized email to search for

        Returns:
            Account if found, None otherwise
        """
        stmt = select(accounts_table).where(accounts_table.c.email == email)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_account(dict(row)) if row else None

    async def find_by_phone(self, phone_number: str) -> Optional[Account]:
        """Find an account by phone number.

        Args:
            phone_number: Phone number to search for

        Returns:
            Account if found, None otherwise
        """
        stmt = select(accounts_table).where(
            accounts_table.c.phone_number == phone_number
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_account(dict(row)) if row else None

    async def add(self, account: Account) -> Account:
        """Insert a new account.

        The insert runs in a savepoint so a unique violation leaves the
        request's session usable.

        Args:
            account: Account to insert

        Returns:
            Inserted account

        Raises:
            ConflictError: If email or phone is already taken
        """
        stmt = accounts_table.insert().values(**account_to_dict(account))
        try:
            async with self.session.begin_nested():
                await self.session.execute(stmt)
        except IntegrityError as e:
            raise ConflictError(
                "User with this email or phone number already exists"
            ) from e
        return account

    async def save(self, account: Account) -> Account:
        """Update an existing account.

        Args:
            account: Account with updated fields

        Returns:
            Saved account
        """
        stmt = (
            accounts_table.update()
            .where(accounts_table.c.id == account.id)
            .values(**account_to_dict(account))
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return account

    async def delete(self, account_id: AccountId) -> None:
        """Delete an account.

        Args:
            account_id: Account ID to delete
        """
        stmt = delete(accounts_table).where(accounts_table.c.id == account_id)
        await self.session.execute(stmt)
        await self.session.flush()
