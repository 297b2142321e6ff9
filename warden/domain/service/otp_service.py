"""Login OTP domain service."""

import secrets
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import logfire

from warden.domain.model.otp import OtpRecord
from warden.domain.repository import OtpRepository
from warden.domain.value import OtpCode, OtpRecordId
from warden.util.credential import normalize_email

from .base import Service


def generate_code() -> str:
    """Generate a six-digit numeric code from a CSPRNG."""
    return f"{secrets.randbelow(900000) + 100000:06d}"


class OtpService(Service):
    """Domain service owning the OtpRecord lifecycle.

    Only the last issued record for an email is ever usable.
    """

    def __init__(self, otp_repository: OtpRepository, ttl_minutes: int = 30) -> None:
        """Initialize OTP service.

        Args:
            otp_repository: OTP repository
            ttl_minutes: Lifetime of an issued code
        """
        self.otp_repository = otp_repository
        self.ttl = timedelta(minutes=ttl_minutes)

    async def issue(self, email: str, now: datetime | None = None) -> OtpRecord:
        """Invalidate prior codes for an email and issue a new one.

        Args:
            email: Account email
            now: Issue time (defaults to current UTC time)

        Returns:
            The stored record, code included
        """
        email = normalize_email(email)
        now = now or datetime.now(timezone.utc)
        with logfire.span("otp_service.issue", email=email):
            record = OtpRecord(
                id=OtpRecordId(uuid4()),
                email=email,
                code=OtpCode(generate_code()),
                expires_at=now + self.ttl,
                created_at=now,
            )
            saved = await self.otp_repository.replace_for_email(record)
            logfire.info(
                "Login OTP issued",
                email=email,
                otp_id=str(saved.id),
                expires_at=saved.expires_at.isoformat(),
            )
            return saved

    async def find_usable(
        self, email: str, now: datetime | None = None
    ) -> OtpRecord | None:
        """Find the usable record for an email.

        Args:
            email: Account email
            now: Reference time (defaults to current UTC time)

        Returns:
            The usable record, or None if none is unexpired and unconsumed
        """
        email = normalize_email(email)
        now = now or datetime.now(timezone.utc)
        with logfire.span("otp_service.find_usable", email=email):
            record = await self.otp_repository.find_usable(email, now)
            if record is None:
                logfire.warn("No usable login OTP", email=email)
            return record

    async def consume(
        self, record: OtpRecord, now: datetime | None = None
    ) -> OtpRecord:
        """Mark a record consumed. Consumption is terminal.

        Args:
            record: The record to consume
            now: Consumption time (defaults to current UTC time)

        Returns:
            The consumed record
        """
        now = now or datetime.now(timezone.utc)
        with logfire.span("otp_service.consume", otp_id=str(record.id)):
            consumed = record.model_copy(update={"consumed_at": now})
            saved = await self.otp_repository.save(consumed)
            logfire.info("Login OTP consumed", email=record.email, otp_id=str(record.id))
            return saved

    async def invalidate_all(self, email: str) -> int:
        """Remove every record for an email.

        Args:
            email: Account email

        Returns:
            Number of records removed
        """
        email = normalize_email(email)
        with logfire.span("otp_service.invalidate_all", email=email):
            count = await self.otp_repository.delete_for_email(email)
            logfire.info("Login OTPs invalidated", email=email, count=count)
            return count
