"""Shared response shapes and the role/permission formatter."""

from datetime import datetime

from pydantic import BaseModel, Field

from warden.domain.model import Account, Role
from warden.domain.service import AccountService
from warden.domain.value import AccountId, AccountStatus, PermissionId, RoleId


class PermissionInfo(BaseModel):
    """Permission as exposed to callers."""

    id: PermissionId
    resource: str
    action: str


class RoleInfo(BaseModel):
    """Role as exposed to callers, without its permissions."""

    id: RoleId
    name: str
    type: str
    description: str | None = None
    is_active: bool


class AccountInfo(BaseModel):
    """Account as exposed to callers.

    Credential material (password hash, tokens) is never part of it.
    """

    id: AccountId
    email: str
    full_name: str
    phone_number: str | None = None
    is_kyc_verified: bool
    status: AccountStatus
    email_verified_at: datetime | None = None
    last_login_at: datetime | None = None
    role_id: RoleId
    external_id: str | None = None
    external_username: str | None = None
    created_at: datetime
    updated_at: datetime
    role: RoleInfo | None = None
    permissions: list[PermissionInfo] = Field(default_factory=list)


def format_account(account: Account, role: Role | None) -> AccountInfo:
    """Project an account and its role into the response shape.

    Args:
        account: Account to format
        role: The account's role, None if it no longer exists

    Returns:
        Formatted account with role and flattened permissions
    """
    return AccountInfo(
        id=account.id,
        email=account.email,
        full_name=account.full_name,
        phone_number=account.phone_number,
        is_kyc_verified=account.is_kyc_verified,
        status=account.status,
        email_verified_at=account.email_verified_at,
        last_login_at=account.last_login_at,
        role_id=account.role_id,
        external_id=account.external_id,
        external_username=account.external_username,
        created_at=account.created_at,
        updated_at=account.updated_at,
        role=(
            RoleInfo(
                id=role.id,
                name=role.name,
                type=role.type,
                description=role.description,
                is_active=role.is_active,
            )
            if role
            else None
        ),
        permissions=[
            PermissionInfo(id=p.id, resource=p.resource, action=p.action)
            for p in (role.permissions if role else [])
        ],
    )


async def describe_account(
    account_service: AccountService, account: Account
) -> AccountInfo:
    """Load the account's role and format both."""
    role = await account_service.get_role(account.role_id)
    return format_account(account, role)
