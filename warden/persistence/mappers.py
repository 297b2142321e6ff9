"""Mappers for converting between database rows and domain models.

Domain models are immutable pydantic models, so rows are mapped by hand
instead of through SQLAlchemy's imperative mapping.
"""

from typing import Any, Dict, Iterable
from uuid import UUID

from warden.domain.model import Account, OtpRecord, Permission, Role
from warden.domain.value import (
    AccountId,
    AccountStatus,
    OtpCode,
    OtpRecordId,
    PermissionId,
    RoleId,
    TokenBundle,
)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_account(row: Dict[str, Any]) -> Account:
    """Convert database row to Account domain model.

    Args:
        row: Database row as dict

    Returns:
        Account domain model
    """
    tokens = None
    if row.get("access_token"):
        tokens = TokenBundle(
            access_token=row["access_token"],
            id_token=row.get("id_token"),
            refresh_token=row.get("refresh_token"),
            token_type=row.get("token_type") or "Bearer",
            expires_in=row.get("token_expires_in") or 0,
        )

    return Account(
        id=AccountId(_uuid(row["id"])),
        email=row["email"],
        full_name=row["full_name"],
        phone_number=row.get("phone_number"),
        role_id=RoleId(_uuid(row["role_id"])),
        password_hash=row.get("password_hash"),
        external_id=row.get("external_id"),
        external_username=row.get("external_username"),
        status=AccountStatus(row["status"]),
        is_kyc_verified=row.get("is_kyc_verified", False),
        email_verified_at=row.get("email_verified_at"),
        last_login_at=row.get("last_login_at"),
        tokens=tokens,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def account_to_dict(account: Account) -> Dict[str, Any]:
    """Convert Account domain model to database dict.

    The token bundle is flattened into its own columns.

    Args:
        account: Account domain model

    Returns:
        Dict suitable for database insertion/update
    """
    data = account.model_dump(exclude={"tokens"})
    data["status"] = account.status.value
    tokens = account.tokens
    data["access_token"] = tokens.access_token if tokens else None
    data["id_token"] = tokens.id_token if tokens else None
    data["refresh_token"] = tokens.refresh_token if tokens else None
    data["token_type"] = tokens.token_type if tokens else None
    data["token_expires_in"] = tokens.expires_in if tokens else None
    return data


def row_to_otp_record(row: Dict[str, Any]) -> OtpRecord:
    """Convert database row to OtpRecord domain model."""
    return OtpRecord(
        id=OtpRecordId(_uuid(row["id"])),
        email=row["email"],
        code=OtpCode(row["code"]),
        expires_at=row["expires_at"],
        consumed_at=row.get("consumed_at"),
        created_at=row["created_at"],
    )


def otp_record_to_dict(record: OtpRecord) -> Dict[str, Any]:
    """Convert OtpRecord domain model to database dict."""
    data = record.model_dump(exclude={"code"})
    data["code"] = record.code.root
    return data


def row_to_role(
    row: Dict[str, Any], permission_rows: Iterable[Dict[str, Any]]
) -> Role:
    """Convert a role row and its permission rows to a Role domain model.

    Args:
        row: Role row as dict
        permission_rows: Rows of the permissions granted to the role

    Returns:
        Role domain model
    """
    return Role(
        id=RoleId(_uuid(row["id"])),
        name=row["name"],
        type=row["type"],
        description=row.get("description"),
        is_active=row["is_active"],
        permissions=[
            Permission(
                id=PermissionId(_uuid(p["id"])),
                resource=p["resource"],
                action=p["action"],
            )
            for p in permission_rows
        ],
    )
