"""Account repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from warden.domain.model.account import Account
from warden.domain.value import AccountId


class AccountRepository(ABC):
    """Repository for Account aggregate.

    Defines the contract for account persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Find an account by ID.

        Args:
            account_id: The account's unique identifier

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[Account]:
        """Find an account by email.

        Args:
            email: Normalized email address

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_phone(self, phone_number: str) -> Optional[Account]:
        """Find an account by phone number.

        Args:
            phone_number: Phone number as stored

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    async def add(self, account: Account) -> Account:
        """Insert a new account.

        Uniqueness of email and phone is enforced here; this is the final
        arbiter when concurrent signups race past the existence checks.

        Args:
            account: The account to insert

        Returns:
            The inserted account

        Raises:
            ConflictError: If email or phone is already taken
        """
        pass

    @abstractmethod
    async def save(self, account: Account) -> Account:
        """Update an existing account.

        Args:
            account: The account with updated fields

        Returns:
            The saved account
        """
        pass

    @abstractmethod
    async def delete(self, account_id: AccountId) -> None:
        """Delete an account.

        Args:
            account_id: The account's unique identifier
        """
        pass
