"""Account domain service."""

import logfire

from warden.domain.error import ConflictError, NotFoundError
from warden.domain.model import Account, Role
from warden.domain.repository import AccountRepository, RoleRepository
from warden.domain.value import AccountId, RoleId
from warden.util.credential import normalize_email

from .base import Service


class AccountService(Service):
    """Domain service for local account operations."""

    def __init__(
        self,
        account_repository: AccountRepository,
        role_repository: RoleRepository,
    ) -> None:
        """Initialize account service.

        Args:
            account_repository: Account repository
            role_repository: Role repository
        """
        self.account_repository = account_repository
        self.role_repository = role_repository

    async def get_by_email(self, email: str) -> Account | None:
        """Get account by email.

        Args:
            email: Account email (normalized here)

        Returns:
            Account if found, None otherwise
        """
        email = normalize_email(email)
        with logfire.span("account_service.get_by_email", email=email):
            account = await self.account_repository.find_by_email(email)
            if account:
                logfire.info("Account found", email=email, account_id=str(account.id))
            else:
                logfire.warn("Account not found", email=email)
            return account

    async def get_active_by_email(self, email: str) -> Account:
        """Get an active account by email.

        Args:
            email: Account email

        Returns:
            Active account

        Raises:
            NotFoundError: If no account exists or it is not active yet
        """
        account = await self.get_by_email(email)
        if account is None or not account.is_active:
            raise NotFoundError("User not found or account not active")
        return account

    async def ensure_available(self, email: str, phone_number: str | None) -> None:
        """Reject an email or phone number that is already taken.

        Args:
            email: Candidate email
            phone_number: Candidate phone number

        Raises:
            ConflictError: If either is already taken
        """
        email = normalize_email(email)
        with logfire.span("account_service.ensure_available", email=email):
            if await self.account_repository.find_by_email(email):
                logfire.warn("Email already registered", email=email)
                raise ConflictError("User with this email already exists")
            if phone_number and await self.account_repository.find_by_phone(
                phone_number
            ):
                logfire.warn("Phone number already registered", email=email)
                raise ConflictError("User with this phone number already exists")

    async def create(self, account: Account) -> Account:
        """Insert a new account.

        Raises:
            ConflictError: If email or phone is already taken
        """
        with logfire.span(
            "account_service.create", account_id=str(account.id), email=account.email
        ):
            created = await self.account_repository.add(account)
            logfire.info("Account created", account_id=str(created.id))
            return created

    async def save(self, account: Account) -> Account:
        """Save an updated account.

        Args:
            account: Account to save

        Returns:
            Saved account
        """
        with logfire.span(
            "account_service.save",
            account_id=str(account.id),
            status=account.status.value,
        ):
            saved = await self.account_repository.save(account)
            logfire.info(
                "Account saved", account_id=str(saved.id), status=saved.status.value
            )
            return saved

    async def delete(self, account_id: AccountId) -> None:
        """Delete an account."""
        with logfire.span("account_service.delete", account_id=str(account_id)):
            await self.account_repository.delete(account_id)
            logfire.info("Account deleted", account_id=str(account_id))

    async def get_role(self, role_id: RoleId) -> Role | None:
        """Get a role with its permissions.

        A missing role is not an error; responses then carry no role.
        """
        with logfire.span("account_service.get_role", role_id=str(role_id)):
            role = await self.role_repository.find_by_id(role_id)
            if role is None:
                logfire.warn("Role not found", role_id=str(role_id))
            return role
