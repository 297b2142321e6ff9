"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from warden.config import Settings
from warden.domain.error import DomainError
from warden.domain.repository import (
    AccountRepository,
    OtpRepository,
    RoleRepository,
)
from warden.persistence.database import create_engine, create_session_factory
from warden.persistence.repository import (
    PostgresAccountRepository,
    PostgresOtpRepository,
    PostgresRoleRepository,
)
from warden.util.di.base import ProviderBase
from warden.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    def get_engine(self, settings: Settings) -> AsyncEngine:
        """Provide database engine."""
        engine = create_engine(settings)
        instrument_sqlalchemy(engine)
        return engine

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        """Provide database session for request scope.

        Committed at the end of the request when it succeeds or fails with a
        DomainError: steps an operation completed before a business failure
        stand (an activation before failed token issuance, a consumed code,
        a compensating delete). Any other exception rolls back.
        """
        async with session_factory() as session:
            try:
                yield session
            except DomainError as e:
                logfire.info("Session committed after domain error", error=str(e))
                await session.commit()
                raise
            except Exception as e:
                logfire.warn("Session rollback", error=str(e))
                await session.rollback()
                raise
            else:
                await session.commit()
                logfire.info("Session committed")

    @provide(scope=Scope.REQUEST)
    def get_account_repository(self, session: AsyncSession) -> AccountRepository:
        """Provide Account repository."""
        return PostgresAccountRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_otp_repository(self, session: AsyncSession) -> OtpRepository:
        """Provide login OTP repository."""
        return PostgresOtpRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_role_repository(self, session: AsyncSession) -> RoleRepository:
        """Provide Role repository."""
        return PostgresRoleRepository(session)
