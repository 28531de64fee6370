from __future__ import annotations

from typing import AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.db import session_scope
from orchestrator.service import AllocationService


async def get_session() -> AsyncIterator[AsyncSession]:
    async with session_scope() as session:
        yield session


def get_allocation_service(session: AsyncSession = Depends(get_session)) -> AllocationService:
    return AllocationService(session)
