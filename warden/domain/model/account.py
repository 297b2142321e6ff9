"""Account aggregate root.

The local, authoritative record of one end user. Identity verification and
token issuance happen at the external identity provider; the account keeps
the linkage to that identity and the last token bundle it issued.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from warden.domain.model.common import DomainModel
from warden.domain.value import AccountId, AccountStatus, RoleId, TokenBundle


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Account(DomainModel):
    """Account aggregate root.

    Business rules:
    - A pending account always has an external linkage
    - An active account can authenticate by password hash or external linkage
    - Status moves from pending to active exactly once and never back
    """

    id: AccountId
    email: str
    full_name: str
    phone_number: Optional[str] = None
    role_id: RoleId

    # Credential state
    password_hash: Optional[str] = None  # Absent for OTP-only accounts
    external_id: Optional[str] = None  # Provider subject, null until linked
    external_username: Optional[str] = None

    status: AccountStatus = AccountStatus.PENDING_VERIFICATION
    is_kyc_verified: bool = False
    email_verified_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None

    # Last bundle issued by the provider
    tokens: Optional[TokenBundle] = None

    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)

    @property
    def is_linked(self) -> bool:
        """Whether the account has an external identity."""
        return self.external_id is not None

    @property
    def is_active(self) -> bool:
        """Whether the account finished verification."""
        return self.status == AccountStatus.ACTIVE
