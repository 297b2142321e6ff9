"""Login OTP record."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from warden.domain.model.common import DomainModel
from warden.domain.value import OtpCode, OtpRecordId


class OtpRecord(DomainModel):
    """Short-lived, single-use login challenge tied to an email.

    Business rules:
    - At most one usable (unexpired, unconsumed) record per email
    - Consumption is terminal
    - Expiry is passive; expired records stay stored but are unusable
    """

    id: OtpRecordId
    email: str
    code: OtpCode
    expires_at: datetime
    consumed_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def is_usable(self, now: datetime) -> bool:
        """Whether the record can still be used to log in at ``now``."""
        return self.consumed_at is None and self.expires_at > now

    def matches(self, code: str) -> bool:
        """Whether ``code`` equals this record's code."""
        return self.code.root == code
