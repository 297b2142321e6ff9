"""Unit tests for the password reset use cases."""

import pytest

from warden.application.usecase.auth import (
    ConfirmPasswordResetUseCase,
    SendLoginOtpUseCase,
    SendPasswordResetUseCase,
    SigninPasswordUseCase,
    VerifyLoginOtpUseCase,
)
from warden.application.usecase.auth.confirm_password_reset import (
    ConfirmPasswordResetRequest,
)
from warden.application.usecase.auth.send_login_otp import SendLoginOtpRequest
from warden.application.usecase.auth.send_password_reset import (
    SendPasswordResetRequest,
)
from warden.application.usecase.auth.signin_password import SigninPasswordRequest
from warden.application.usecase.auth.verify_login_otp import VerifyLoginOtpRequest
from warden.domain.error import AuthenticationError, NotFoundError, RateLimitedError
from warden.domain.repository import AccountRepository
from warden.domain.service import (
    AccountService,
    CredentialService,
    IdentityProvider,
    OtpSender,
)
from warden.domain.value import ProviderErrorKind
from tests.conftest import make_account
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()

EMAIL = "ada@example.com"
OLD_PASSWORD = "correct horse battery"
NEW_PASSWORD = "staple battery horse"


async def linked_account(container):
    identity_provider = await container.get(IdentityProvider)
    credential_service = await container.get(CredentialService)
    account_repo = await container.get(AccountRepository)
    external_id = identity_provider.seed_identity(
        EMAIL, password=credential_service.derived_credential(EMAIL)
    )
    return await account_repo.add(
        make_account(password=OLD_PASSWORD, external_id=external_id)
    )


class TestSendPasswordReset:
    """Tests for SendPasswordResetUseCase."""

    @pytest.mark.asyncio
    async def test_reset_challenge_is_sent(self, unit_env):
        # Arrange
        await linked_account(unit_env)
        use_case = await unit_env.get(SendPasswordResetUseCase)
        identity_provider = await unit_env.get(IdentityProvider)

        # Act
        response = await use_case.execute(SendPasswordResetRequest(email=EMAIL))

        # Assert
        assert response.email == EMAIL
        assert identity_provider.calls_to("send_reset_challenge") == [EMAIL]

    @pytest.mark.asyncio
    async def test_unknown_account_is_not_found(self, unit_env):
        use_case = await unit_env.get(SendPasswordResetUseCase)
        identity_provider = await unit_env.get(IdentityProvider)

        with pytest.raises(NotFoundError):
            await use_case.execute(SendPasswordResetRequest(email=EMAIL))
        assert identity_provider.calls == []

    @pytest.mark.asyncio
    async def test_rate_limited(self, unit_env):
        await linked_account(unit_env)
        use_case = await unit_env.get(SendPasswordResetUseCase)
        identity_provider = await unit_env.get(IdentityProvider)
        identity_provider.fail_on(
            "send_reset_challenge", ProviderErrorKind.RATE_LIMITED
        )

        with pytest.raises(RateLimitedError, match="password reset"):
            await use_case.execute(SendPasswordResetRequest(email=EMAIL))


class TestConfirmPasswordReset:
    """Tests for ConfirmPasswordResetUseCase."""

    @pytest.mark.asyncio
    async def test_reset_then_both_login_paths_work(self, unit_env):
        """After a reset the new password signs in and OTP login still works."""
        # Arrange
        await linked_account(unit_env)
        identity_provider = await unit_env.get(IdentityProvider)
        send_reset = await unit_env.get(SendPasswordResetUseCase)
        confirm_reset = await unit_env.get(ConfirmPasswordResetUseCase)
        signin = await unit_env.get(SigninPasswordUseCase)
        send_otp = await unit_env.get(SendLoginOtpUseCase)
        verify_otp = await unit_env.get(VerifyLoginOtpUseCase)
        mailer = await unit_env.get(OtpSender)
        await send_reset.execute(SendPasswordResetRequest(email=EMAIL))

        # Act
        await confirm_reset.execute(
            ConfirmPasswordResetRequest(
                email=EMAIL,
                code=identity_provider.reset_code,
                new_password=NEW_PASSWORD,
            )
        )

        # Assert
        signed_in = await signin.execute(
            SigninPasswordRequest(email=EMAIL, password=NEW_PASSWORD)
        )
        assert signed_in.tokens is not None

        with pytest.raises(AuthenticationError):
            await signin.execute(
                SigninPasswordRequest(email=EMAIL, password=OLD_PASSWORD)
            )

        await send_otp.execute(SendLoginOtpRequest(email=EMAIL))
        logged_in = await verify_otp.execute(
            VerifyLoginOtpRequest(email=EMAIL, code=mailer.last_code(EMAIL))
        )
        assert logged_in.tokens.access_token

    @pytest.mark.asyncio
    async def test_wrong_code_keeps_old_password(self, unit_env):
        """A rejected reset code changes nothing locally."""
        # Arrange
        await linked_account(unit_env)
        send_reset = await unit_env.get(SendPasswordResetUseCase)
        confirm_reset = await unit_env.get(ConfirmPasswordResetUseCase)
        account_service = await unit_env.get(AccountService)
        credential_service = await unit_env.get(CredentialService)
        await send_reset.execute(SendPasswordResetRequest(email=EMAIL))

        # Act
        with pytest.raises(AuthenticationError) as exc_info:
            await confirm_reset.execute(
                ConfirmPasswordResetRequest(
                    email=EMAIL, code="999999", new_password=NEW_PASSWORD
                )
            )

        # Assert
        assert exc_info.value.status_code == 400
        account = await account_service.get_by_email(EMAIL)
        assert credential_service.verify_password(OLD_PASSWORD, account.password_hash)

    @pytest.mark.asyncio
    async def test_credential_restore_failure_is_not_fatal(self, unit_env):
        """The reset succeeds even if the derived credential cannot be restored."""
        # Arrange
        await linked_account(unit_env)
        identity_provider = await unit_env.get(IdentityProvider)
        send_reset = await unit_env.get(SendPasswordResetUseCase)
        confirm_reset = await unit_env.get(ConfirmPasswordResetUseCase)
        send_otp = await unit_env.get(SendLoginOtpUseCase)
        verify_otp = await unit_env.get(VerifyLoginOtpUseCase)
        mailer = await unit_env.get(OtpSender)
        await send_reset.execute(SendPasswordResetRequest(email=EMAIL))
        identity_provider.fail_on("set_durable_credential", ProviderErrorKind.UNKNOWN)

        # Act
        response = await confirm_reset.execute(
            ConfirmPasswordResetRequest(
                email=EMAIL,
                code=identity_provider.reset_code,
                new_password=NEW_PASSWORD,
            )
        )

        # Assert
        assert response.message == "Password reset successfully"
        # OTP login repairs the provider-side credential
        await send_otp.execute(SendLoginOtpRequest(email=EMAIL))
        logged_in = await verify_otp.execute(
            VerifyLoginOtpRequest(email=EMAIL, code=mailer.last_code(EMAIL))
        )
        assert logged_in.tokens.access_token
