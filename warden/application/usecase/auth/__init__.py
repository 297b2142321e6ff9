"""Authentication use cases."""

from .confirm_password_reset import ConfirmPasswordResetUseCase
from .resend_verification import ResendVerificationUseCase
from .send_login_otp import SendLoginOtpUseCase
from .send_password_reset import SendPasswordResetUseCase
from .signin_password import SigninPasswordUseCase
from .signup import SignupUseCase
from .verify_email import VerifyEmailUseCase
from .verify_login_otp import VerifyLoginOtpUseCase

__all__ = [
    "ConfirmPasswordResetUseCase",
    "ResendVerificationUseCase",
    "SendLoginOtpUseCase",
    "SendPasswordResetUseCase",
    "SigninPasswordUseCase",
    "SignupUseCase",
    "VerifyEmailUseCase",
    "VerifyLoginOtpUseCase",
]
