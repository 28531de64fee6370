from __future__ import annotations

import os
import random
import tempfile
from typing import AsyncIterator

import httpx
import pytest
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Ensure deterministic environment for tests
os.environ.setdefault("LABSEAT_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LABSEAT_LOG_FILE", os.path.join(tempfile.mkdtemp(prefix="labseat-"), "test.log"))
os.environ.setdefault("LABSEAT_ENVIRONMENT", "test")

from api.dependencies import get_allocation_service, get_session
from api.main import app
from core import config as config_module
from core.models import Base
from orchestrator.service import AllocationService

config_module.get_settings.cache_clear()
settings = config_module.get_settings()


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    test_engine = create_async_engine(
        settings.database_url,
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
def service(db_session: AsyncSession) -> AllocationService:
    return AllocationService(db_session, settings=settings, rng=random.Random(42))


@pytest.fixture
async def client(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[httpx.AsyncClient]:
    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    def _override_get_allocation_service(
        session: AsyncSession = Depends(get_session),
    ) -> AllocationService:
        return AllocationService(session, settings=settings, rng=random.Random(7))

    app.dependency_overrides[get_session] = _override_get_session
    app.dependency_overrides[get_allocation_service] = _override_get_allocation_service
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
