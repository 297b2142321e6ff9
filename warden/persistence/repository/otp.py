"""PostgreSQL implementation of login OTP repository."""

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from warden.domain.model import OtpRecord
from warden.domain.repository import OtpRepository
from warden.persistence.mappers import otp_record_to_dict, row_to_otp_record
from warden.persistence.tables import login_otps_table


class PostgresOtpRepository(OtpRepository):
    """PostgreSQL implementation of OtpRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def replace_for_email(self, record: OtpRecord) -> OtpRecord:
        """Delete every record for the email, then insert the new one.

        Both statements run in one savepoint, so a concurrent reader never
        sees two usable records for the same email.

        Args:
            record: New record

        Returns:
            Inserted record
        """
        async with self.session.begin_nested():
            await self.session.execute(
                delete(login_otps_table).where(login_otps_table.c.email == record.email)
            )
            await self.session.execute(
                login_otps_table.insert().values(**otp_record_to_dict(record))
            )
        return record

    async def find_usable(self, email: str, now: datetime) -> OtpRecord | None:
        """Find the newest unconsumed, unexpired record for an email.

        Args:
            email: Normalized email
            now: Reference time for the expiry check

        Returns:
            Record if found, None otherwise
        """
        stmt = (
            select(login_otps_table)
            .where(login_otps_table.c.email == email)
            .where(login_otps_table.c.consumed_at.is_(None))
            .where(login_otps_table.c.expires_at > now)
            .order_by(login_otps_table.c.created_at.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_otp_record(dict(row)) if row else None

    async def save(self, record: OtpRecord) -> OtpRecord:
        """Update an existing record.

        Args:
            record: Record with updated fields

        Returns:
            Saved record
        """
        stmt = (
            login_otps_table.update()
            .where(login_otps_table.c.id == record.id)
            .values(consumed_at=record.consumed_at)
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return record

    async def delete_for_email(self, email: str) -> int:
        """Delete every record for an email.

        Args:
            email: Normalized email

        Returns:
            Number of records deleted
        """
        stmt = delete(login_otps_table).where(login_otps_table.c.email == email)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount or 0
