"""Unit tests for VerifyEmailUseCase."""

import pytest

from warden.application.usecase.auth import SignupUseCase, VerifyEmailUseCase
from warden.application.usecase.auth.signup import SignupRequest
from warden.application.usecase.auth.verify_email import VerifyEmailRequest
from warden.domain.error import (
    AuthenticationError,
    DependencyError,
    ValidationError,
)
from warden.domain.repository import AccountRepository
from warden.domain.service import AccountService, IdentityProvider
from warden.domain.value import AccountStatus, ProviderErrorKind
from tests.conftest import make_account
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()


async def sign_up(container) -> None:
    use_case = await container.get(SignupUseCase)
    await use_case.execute(
        SignupRequest(
            email="ada@example.com",
            full_name="Ada Lovelace",
            password="correct horse battery",
        )
    )


class TestVerifyEmailUseCase:
    """Tests for VerifyEmailUseCase."""

    @pytest.mark.asyncio
    async def test_verify_activates_and_returns_tokens(self, unit_env):
        """A correct code activates the account and logs it in."""
        # Arrange
        await sign_up(unit_env)
        use_case = await unit_env.get(VerifyEmailUseCase)
        account_service = await unit_env.get(AccountService)

        # Act
        response = await use_case.execute(
            VerifyEmailRequest(email="ada@example.com", code="123456")
        )

        # Assert
        assert response.tokens.access_token
        assert response.account.status == AccountStatus.ACTIVE
        assert response.account.email_verified_at is not None
        assert response.account.last_login_at is not None
        assert response.account.role is not None
        assert response.account.role.type == "user"

        account = await account_service.get_by_email("ada@example.com")
        assert account.is_active
        assert account.tokens == response.tokens

    @pytest.mark.asyncio
    async def test_wrong_code_leaves_account_pending(self, unit_env):
        """A rejected code is a 400 and changes nothing locally."""
        # Arrange
        await sign_up(unit_env)
        use_case = await unit_env.get(VerifyEmailUseCase)
        account_service = await unit_env.get(AccountService)

        # Act
        with pytest.raises(AuthenticationError) as exc_info:
            await use_case.execute(
                VerifyEmailRequest(email="ada@example.com", code="000000")
            )

        # Assert
        assert exc_info.value.status_code == 400
        account = await account_service.get_by_email("ada@example.com")
        assert account.status == AccountStatus.PENDING_VERIFICATION

    @pytest.mark.asyncio
    async def test_expired_code(self, unit_env):
        """An expired code asks for a new verification email."""
        # Arrange
        await sign_up(unit_env)
        use_case = await unit_env.get(VerifyEmailUseCase)
        identity_provider = await unit_env.get(IdentityProvider)
        identity_provider.fail_on("confirm_code", ProviderErrorKind.EXPIRED_CODE)

        # Act / Assert
        with pytest.raises(AuthenticationError, match="expired"):
            await use_case.execute(
                VerifyEmailRequest(email="ada@example.com", code="123456")
            )

    @pytest.mark.asyncio
    async def test_unknown_or_active_account_is_rejected(self, unit_env):
        """Verification needs a pending account."""
        # Arrange
        use_case = await unit_env.get(VerifyEmailUseCase)
        account_repo = await unit_env.get(AccountRepository)
        await account_repo.add(make_account(external_id="ext-1"))

        # Act / Assert
        for email in ("nobody@example.com", "ada@example.com"):
            with pytest.raises(ValidationError, match="already verified"):
                await use_case.execute(VerifyEmailRequest(email=email, code="123456"))

    @pytest.mark.asyncio
    async def test_token_failure_keeps_activation(self, unit_env):
        """Activation stands when the provider cannot issue tokens afterwards."""
        # Arrange
        await sign_up(unit_env)
        use_case = await unit_env.get(VerifyEmailUseCase)
        account_service = await unit_env.get(AccountService)
        identity_provider = await unit_env.get(IdentityProvider)
        identity_provider.fail_on("issue_tokens", ProviderErrorKind.UNKNOWN)

        # Act
        with pytest.raises(DependencyError, match="authentication tokens"):
            await use_case.execute(
                VerifyEmailRequest(email="ada@example.com", code="123456")
            )

        # Assert
        account = await account_service.get_by_email("ada@example.com")
        assert account.status == AccountStatus.ACTIVE
        assert account.tokens is None
