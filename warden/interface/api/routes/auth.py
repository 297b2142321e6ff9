"""Authentication routes.

Every route hands its body to one use case; domain errors are turned into
``{"detail": ...}`` responses by the application's error handler.
"""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, status

from warden.application.usecase.auth import (
    ConfirmPasswordResetUseCase,
    ResendVerificationUseCase,
    SendLoginOtpUseCase,
    SendPasswordResetUseCase,
    SigninPasswordUseCase,
    SignupUseCase,
    VerifyEmailUseCase,
    VerifyLoginOtpUseCase,
)
from warden.application.usecase.auth.confirm_password_reset import (
    ConfirmPasswordResetRequest,
    ConfirmPasswordResetResponse,
)
from warden.application.usecase.auth.resend_verification import (
    ResendVerificationRequest,
    ResendVerificationResponse,
)
from warden.application.usecase.auth.send_login_otp import (
    SendLoginOtpRequest,
    SendLoginOtpResponse,
)
from warden.application.usecase.auth.send_password_reset import (
    SendPasswordResetRequest,
    SendPasswordResetResponse,
)
from warden.application.usecase.auth.signin_password import (
    SigninPasswordRequest,
    SigninPasswordResponse,
)
from warden.application.usecase.auth.signup import SignupRequest, SignupResponse
from warden.application.usecase.auth.verify_email import (
    VerifyEmailRequest,
    VerifyEmailResponse,
)
from warden.application.usecase.auth.verify_login_otp import (
    VerifyLoginOtpRequest,
    VerifyLoginOtpResponse,
)

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)


@router.post(
    "/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED
)
async def signup(
    request: SignupRequest,
    use_case: FromDishka[SignupUseCase],
) -> SignupResponse:
    """Register a pending account and its external identity.

    The provider emails a confirmation code; the account stays pending until
    it is verified.

    Example:
        POST /auth/signup
        {
            "email": "ada@example.com",
            "full_name": "Ada Lovelace",
            "phone_number": "+15550100",
            "password": "correct horse battery"
        }
    """
    return await use_case.execute(request)


@router.post("/verify-email", response_model=VerifyEmailResponse)
async def verify_email(
    request: VerifyEmailRequest,
    use_case: FromDishka[VerifyEmailUseCase],
) -> VerifyEmailResponse:
    """Confirm the emailed code, activate the account and log it in."""
    return await use_case.execute(request)


@router.post("/resend-verification", response_model=ResendVerificationResponse)
async def resend_verification(
    request: ResendVerificationRequest,
    use_case: FromDishka[ResendVerificationUseCase],
) -> ResendVerificationResponse:
    """Re-send the confirmation code of a pending account.

    When the provider no longer accepts a resend, the account is confirmed
    administratively and reported as active.
    """
    return await use_case.execute(request)


@router.post("/login/otp", response_model=SendLoginOtpResponse)
async def send_login_otp(
    request: SendLoginOtpRequest,
    use_case: FromDishka[SendLoginOtpUseCase],
) -> SendLoginOtpResponse:
    """Email a six-digit login code to an active account."""
    return await use_case.execute(request)


@router.post("/login/otp/verify", response_model=VerifyLoginOtpResponse)
async def verify_login_otp(
    request: VerifyLoginOtpRequest,
    use_case: FromDishka[VerifyLoginOtpUseCase],
) -> VerifyLoginOtpResponse:
    """Log in with a login code."""
    return await use_case.execute(request)


@router.post("/login/password", response_model=SigninPasswordResponse)
async def signin_password(
    request: SigninPasswordRequest,
    use_case: FromDishka[SigninPasswordUseCase],
) -> SigninPasswordResponse:
    """Log in with the locally stored password."""
    return await use_case.execute(request)


@router.post("/password/forgot", response_model=SendPasswordResetResponse)
async def send_password_reset(
    request: SendPasswordResetRequest,
    use_case: FromDishka[SendPasswordResetUseCase],
) -> SendPasswordResetResponse:
    """Have the identity provider email a password reset code."""
    return await use_case.execute(request)


@router.post("/password/reset", response_model=ConfirmPasswordResetResponse)
async def confirm_password_reset(
    request: ConfirmPasswordResetRequest,
    use_case: FromDishka[ConfirmPasswordResetUseCase],
) -> ConfirmPasswordResetResponse:
    """Set a new password with the emailed reset code."""
    return await use_case.execute(request)
