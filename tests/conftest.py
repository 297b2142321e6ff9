"""Test configuration and fixtures."""

from datetime import datetime, timezone
from uuid import UUID, uuid4

import logfire

from warden.domain.model import Account
from warden.domain.value import AccountId, AccountStatus, RoleId
from warden.util.password import hash_password

# Spans and logs stay local during tests
logfire.configure(send_to_logfire=False, console=False)

USER_ROLE_ID = RoleId(UUID("00000000-0000-0000-0000-000000000003"))


def make_account(
    email: str = "ada@example.com",
    status: AccountStatus = AccountStatus.ACTIVE,
    password: str | None = None,
    external_id: str | None = None,
    phone_number: str | None = None,
    full_name: str = "Ada Lovelace",
) -> Account:
    """Helper function to build accounts for tests.

    Args:
        email: Account email, already normalized
        status: Lifecycle status
        password: Plaintext password to hash, None for an OTP-only account
        external_id: Provider subject, None for an unlinked account
        phone_number: Optional phone number
        full_name: Display name

    Returns:
        Account domain model
    """
    now = datetime.now(timezone.utc)
    return Account(
        id=AccountId(uuid4()),
        email=email,
        full_name=full_name,
        phone_number=phone_number,
        role_id=USER_ROLE_ID,
        password_hash=hash_password(password) if password else None,
        external_id=external_id,
        external_username=email if external_id else None,
        status=status,
        email_verified_at=now if status == AccountStatus.ACTIVE else None,
        created_at=now,
        updated_at=now,
    )
