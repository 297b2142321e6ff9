"""Application layer DI providers."""

from dishka import Scope, provide

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
from warden.config import Settings
from warden.domain.service import (
    AccountService,
    CredentialService,
    IdentityProvider,
    OtpSender,
    OtpService,
)
from warden.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed.

    Use cases are REQUEST-scoped like the domain services they orchestrate.
    """

    scope = Scope.REQUEST

    @provide
    def get_signup_use_case(
        self,
        account_service: AccountService,
        credential_service: CredentialService,
        identity_provider: IdentityProvider,
        settings: Settings,
    ) -> SignupUseCase:
        """Provide signup use case."""
        return SignupUseCase(
            account_service=account_service,
            credential_service=credential_service,
            identity_provider=identity_provider,
            settings=settings,
        )

    @provide
    def get_verify_email_use_case(
        self,
        account_service: AccountService,
        credential_service: CredentialService,
        identity_provider: IdentityProvider,
    ) -> VerifyEmailUseCase:
        """Provide verify email use case."""
        return VerifyEmailUseCase(
            account_service=account_service,
            credential_service=credential_service,
            identity_provider=identity_provider,
        )

    @provide
    def get_resend_verification_use_case(
        self,
        account_service: AccountService,
        credential_service: CredentialService,
        identity_provider: IdentityProvider,
    ) -> ResendVerificationUseCase:
        """Provide resend verification use case."""
        return ResendVerificationUseCase(
            account_service=account_service,
            credential_service=credential_service,
            identity_provider=identity_provider,
        )

    @provide
    def get_send_login_otp_use_case(
        self,
        account_service: AccountService,
        otp_service: OtpService,
        otp_sender: OtpSender,
        settings: Settings,
    ) -> SendLoginOtpUseCase:
        """Provide send login OTP use case."""
        return SendLoginOtpUseCase(
            account_service=account_service,
            otp_service=otp_service,
            otp_sender=otp_sender,
            settings=settings,
        )

    @provide
    def get_verify_login_otp_use_case(
        self,
        account_service: AccountService,
        credential_service: CredentialService,
        otp_service: OtpService,
        identity_provider: IdentityProvider,
    ) -> VerifyLoginOtpUseCase:
        """Provide verify login OTP use case."""
        return VerifyLoginOtpUseCase(
            account_service=account_service,
            credential_service=credential_service,
            otp_service=otp_service,
            identity_provider=identity_provider,
        )

    @provide
    def get_signin_password_use_case(
        self,
        account_service: AccountService,
        credential_service: CredentialService,
        identity_provider: IdentityProvider,
    ) -> SigninPasswordUseCase:
        """Provide password signin use case."""
        return SigninPasswordUseCase(
            account_service=account_service,
            credential_service=credential_service,
            identity_provider=identity_provider,
        )

    @provide
    def get_send_password_reset_use_case(
        self,
        account_service: AccountService,
        identity_provider: IdentityProvider,
    ) -> SendPasswordResetUseCase:
        """Provide send password reset use case."""
        return SendPasswordResetUseCase(
            account_service=account_service,
            identity_provider=identity_provider,
        )

    @provide
    def get_confirm_password_reset_use_case(
        self,
        account_service: AccountService,
        credential_service: CredentialService,
        identity_provider: IdentityProvider,
    ) -> ConfirmPasswordResetUseCase:
        """Provide confirm password reset use case."""
        return ConfirmPasswordResetUseCase(
            account_service=account_service,
            credential_service=credential_service,
            identity_provider=identity_provider,
        )
