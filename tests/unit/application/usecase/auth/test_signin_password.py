"""Unit tests for SigninPasswordUseCase."""

import pytest

from warden.application.usecase.auth import SigninPasswordUseCase
from warden.application.usecase.auth.signin_password import SigninPasswordRequest
from warden.domain.error import AuthenticationError
from warden.domain.repository import AccountRepository
from warden.domain.service import AccountService, CredentialService, IdentityProvider
from warden.domain.value import AccountStatus, ProviderErrorKind
from tests.conftest import make_account
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked
unit_env = create_env_fixture()

EMAIL = "ada@example.com"
PASSWORD = "correct horse battery"


class TestSigninPasswordUseCase:
    """Tests for SigninPasswordUseCase."""

    @pytest.mark.asyncio
    async def test_linked_account_gets_tokens(self, unit_env):
        """A correct password logs in and fetches provider tokens."""
        # Arrange
        identity_provider = await unit_env.get(IdentityProvider)
        credential_service = await unit_env.get(CredentialService)
        account_repo = await unit_env.get(AccountRepository)
        account_service = await unit_env.get(AccountService)
        external_id = identity_provider.seed_identity(
            EMAIL, password=credential_service.derived_credential(EMAIL)
        )
        await account_repo.add(make_account(password=PASSWORD, external_id=external_id))
        use_case = await unit_env.get(SigninPasswordUseCase)

        # Act
        response = await use_case.execute(
            SigninPasswordRequest(email="Ada@Example.com", password=PASSWORD)
        )

        # Assert
        assert response.tokens is not None
        assert response.account.last_login_at is not None
        account = await account_service.get_by_email(EMAIL)
        assert account.tokens == response.tokens

    @pytest.mark.asyncio
    async def test_unlinked_account_logs_in_without_tokens(self, unit_env):
        """Password-only accounts authenticate locally."""
        # Arrange
        account_repo = await unit_env.get(AccountRepository)
        identity_provider = await unit_env.get(IdentityProvider)
        await account_repo.add(make_account(password=PASSWORD))
        use_case = await unit_env.get(SigninPasswordUseCase)

        # Act
        response = await use_case.execute(
            SigninPasswordRequest(email=EMAIL, password=PASSWORD)
        )

        # Assert
        assert response.tokens is None
        assert response.account.last_login_at is not None
        assert identity_provider.calls == []

    @pytest.mark.asyncio
    async def test_token_failure_still_logs_in(self, unit_env):
        """The local password already authenticated the caller."""
        # Arrange
        account_repo = await unit_env.get(AccountRepository)
        identity_provider = await unit_env.get(IdentityProvider)
        await account_repo.add(make_account(password=PASSWORD, external_id="ext-1"))
        identity_provider.fail_on("issue_tokens", ProviderErrorKind.TIMEOUT)
        use_case = await unit_env.get(SigninPasswordUseCase)

        # Act
        response = await use_case.execute(
            SigninPasswordRequest(email=EMAIL, password=PASSWORD)
        )

        # Assert
        assert response.tokens is None

    @pytest.mark.asyncio
    async def test_failures_are_indistinguishable(self, unit_env):
        """Unknown email, wrong password, missing hash and pending all look alike."""
        # Arrange
        account_repo = await unit_env.get(AccountRepository)
        await account_repo.add(make_account(password=PASSWORD))
        await account_repo.add(
            make_account(email="otp-only@example.com", external_id="ext-2")
        )
        await account_repo.add(
            make_account(
                email="pending@example.com",
                status=AccountStatus.PENDING_VERIFICATION,
                password=PASSWORD,
                external_id="ext-3",
            )
        )
        use_case = await unit_env.get(SigninPasswordUseCase)
        attempts = [
            ("nobody@example.com", PASSWORD),
            (EMAIL, "wrong horse battery"),
            ("otp-only@example.com", PASSWORD),
            ("pending@example.com", PASSWORD),
        ]

        # Act
        messages = set()
        for email, password in attempts:
            with pytest.raises(AuthenticationError) as exc_info:
                await use_case.execute(
                    SigninPasswordRequest(email=email, password=password)
                )
            assert exc_info.value.status_code == 401
            messages.add(exc_info.value.message)

        # Assert
        assert messages == {"Invalid email or password"}
