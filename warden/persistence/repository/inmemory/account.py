"""In-memory account repository for testing."""

from typing import Optional

from warden.domain.error import ConflictError
from warden.domain.model.account import Account
from warden.domain.repository.account import AccountRepository
from warden.domain.value import AccountId


class InMemoryAccountRepository(AccountRepository):
    """In-memory implementation of AccountRepository for testing."""

    def __init__(self) -> None:
        self._accounts: dict[AccountId, Account] = {}

    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Find an account by ID."""
        return self._accounts.get(account_id)

    async def find_by_email(self, email: str) -> Optional[Account]:
        """Find an account by email."""
        for account in self._accounts.values():
            if account.email == email:
                return account
        return None

    async def find_by_phone(self, phone_number: str) -> Optional[Account]:
        """Find an account by phone number."""
        for account in self._accounts.values():
            if account.phone_number == phone_number:
                return account
        return None

    async def add(self, account: Account) -> Account:
        """Insert an account, enforcing email and phone uniqueness."""
        for existing in self._accounts.values():
            if existing.email == account.email or (
                account.phone_number
                and existing.phone_number == account.phone_number
            ):
                raise ConflictError(
                    "User with this email or phone number already exists"
                )
        self._accounts[account.id] = account
        return account

    async def save(self, account: Account) -> Account:
        """Update an account."""
        self._accounts[account.id] = account
        return account

    async def delete(self, account_id: AccountId) -> None:
        """Delete an account."""
        self._accounts.pop(account_id, None)
