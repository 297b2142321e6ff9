"""In-memory login OTP repository for testing."""

from datetime import datetime

from warden.domain.model.otp import OtpRecord
from warden.domain.repository.otp import OtpRepository
from warden.domain.value import OtpRecordId


class InMemoryOtpRepository(OtpRepository):
    """In-memory implementation of OtpRepository for testing."""

    def __init__(self) -> None:
        self._records: dict[OtpRecordId, OtpRecord] = {}

    async def replace_for_email(self, record: OtpRecord) -> OtpRecord:
        """Drop all records for the email and store the new one."""
        self._records = {
            k: v for k, v in self._records.items() if v.email != record.email
        }
        self._records[record.id] = record
        return record

    async def find_usable(self, email: str, now: datetime) -> OtpRecord | None:
        """Find the newest usable record for an email."""
        usable = [
            r for r in self._records.values() if r.email == email and r.is_usable(now)
        ]
        if not usable:
            return None
        return max(usable, key=lambda r: r.created_at)

    async def save(self, record: OtpRecord) -> OtpRecord:
        """Update a record."""
        self._records[record.id] = record
        return record

    async def delete_for_email(self, email: str) -> int:
        """Delete every record for an email."""
        doomed = [k for k, v in self._records.items() if v.email == email]
        for key in doomed:
            del self._records[key]
        return len(doomed)
