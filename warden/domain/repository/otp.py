"""Login OTP repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime

from warden.domain.model.otp import OtpRecord


class OtpRepository(ABC):
    """Repository for OtpRecord entities.

    Defines the contract for OTP persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def replace_for_email(self, record: OtpRecord) -> OtpRecord:
        """Delete every record for the record's email, then insert it.

        Both steps happen as one logical write so that the inserted record
        is the only usable one for that email afterwards.

        Args:
            record: The new record

        Returns:
            The inserted record
        """
        pass

    @abstractmethod
    async def find_usable(self, email: str, now: datetime) -> OtpRecord | None:
        """Find the usable record for an email.

        Usable means unconsumed and expiring after ``now``.

        Args:
            email: Normalized email address
            now: Reference time for the expiry check

        Returns:
            The newest usable record if any, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, record: OtpRecord) -> OtpRecord:
        """Update an existing record (used to mark it consumed).

        Args:
            record: The record with updated fields

        Returns:
            The saved record
        """
        pass

    @abstractmethod
    async def delete_for_email(self, email: str) -> int:
        """Delete every record for an email.

        Args:
            email: Normalized email address

        Returns:
            Number of records deleted
        """
        pass
