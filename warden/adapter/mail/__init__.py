"""Login OTP mail adapter."""

from .sender import MockOtpMailer, OtpMailer, RealOtpMailer, SentOtp

__all__ = ["MockOtpMailer", "OtpMailer", "RealOtpMailer", "SentOtp"]
