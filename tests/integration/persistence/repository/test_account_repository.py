"""Integration tests for the PostgreSQL repositories.

Require a running PostgreSQL reachable through DATABASE__URL. Tables are
created from the SQLAlchemy metadata and dropped afterwards.
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from warden.domain.error import ConflictError
from warden.domain.model import OtpRecord
from warden.domain.repository import AccountRepository, OtpRepository
from warden.domain.value import OtpCode, OtpRecordId, TokenBundle
from warden.persistence.tables import metadata, roles_table
from tests.conftest import USER_ROLE_ID, make_account
from tests.di import build_test_container

pytestmark = pytest.mark.integration


@pytest_asyncio.fixture
async def integration_env():
    container = build_test_container(unmock={"persistence"})
    engine = await container.get(AsyncEngine)
    async with engine.begin() as connection:
        await connection.run_sync(metadata.drop_all)
        await connection.run_sync(metadata.create_all)
        await connection.execute(
            insert(roles_table).values(
                id=USER_ROLE_ID, name="User", type="user", is_active=True
            )
        )

    async with container() as request_container:
        yield request_container

    async with engine.begin() as connection:
        await connection.run_sync(metadata.drop_all)
    await container.close()


class TestPostgresAccountRepository:
    """Integration tests for PostgresAccountRepository."""

    @pytest.mark.asyncio
    async def test_add_and_find_with_tokens(self, integration_env):
        # Arrange
        account_repo = await integration_env.get(AccountRepository)
        account = make_account(external_id="ext-1").model_copy(
            update={"tokens": TokenBundle(access_token="a", expires_in=60)}
        )

        # Act
        await account_repo.add(account)
        found = await account_repo.find_by_email("ada@example.com")

        # Assert
        assert found is not None
        assert found.id == account.id
        assert found.tokens.access_token == "a"

    @pytest.mark.asyncio
    async def test_duplicate_email_is_conflict(self, integration_env):
        account_repo = await integration_env.get(AccountRepository)
        await account_repo.add(make_account(external_id="ext-1"))

        with pytest.raises(ConflictError):
            await account_repo.add(make_account(external_id="ext-2"))

        # The session stays usable after the failed insert
        assert await account_repo.find_by_email("ada@example.com") is not None

    @pytest.mark.asyncio
    async def test_delete(self, integration_env):
        account_repo = await integration_env.get(AccountRepository)
        account = await account_repo.add(make_account(external_id="ext-1"))
        session = await integration_env.get(AsyncSession)

        await account_repo.delete(account.id)
        await session.flush()

        assert await account_repo.find_by_id(account.id) is None


class TestPostgresOtpRepository:
    """Integration tests for PostgresOtpRepository."""

    @pytest.mark.asyncio
    async def test_replace_keeps_only_latest(self, integration_env):
        otp_repo = await integration_env.get(OtpRepository)
        now = datetime.now(timezone.utc)

        def record(code: str) -> OtpRecord:
            return OtpRecord(
                id=OtpRecordId(uuid4()),
                email="ada@example.com",
                code=OtpCode(code),
                expires_at=now + timedelta(minutes=30),
                created_at=now,
            )

        await otp_repo.replace_for_email(record("111111"))
        latest = await otp_repo.replace_for_email(record("222222"))

        found = await otp_repo.find_usable("ada@example.com", now)
        assert found is not None
        assert found.id == latest.id
        assert await otp_repo.delete_for_email("ada@example.com") == 1
