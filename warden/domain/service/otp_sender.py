"""Out-of-band delivery interface for login OTP codes."""

from datetime import datetime


class OtpDeliveryError(Exception):
    """Login OTP could not be delivered."""

    pass


class OtpSender:
    """Generic OTP delivery interface."""

    async def send_login_otp(
        self, email: str, full_name: str, code: str, expires_at: datetime
    ) -> None:
        """Deliver a login code to the account owner.

        Args:
            email: Recipient address
            full_name: Recipient display name
            code: Six-digit login code
            expires_at: When the code stops being usable

        Raises:
            OtpDeliveryError: If delivery fails
        """
        raise NotImplementedError
