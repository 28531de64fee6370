from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import AuditLog

LABS_PACKED = "labs_packed"
PROBLEMS_ALLOCATED = "problems_allocated"
PROBLEMS_REVERTED = "problems_reverted"
DOMAIN_PROBLEMS_OFFERED = "domain_problems_offered"
PROBLEMS_REFRESHED = "problems_refreshed"
PROBLEM_CONFIRMED = "problem_confirmed"


async def write_audit_log(
    session: AsyncSession,
    actor: str,
    action: str,
    meta: dict[str, Any] | None = None,
) -> AuditLog:
    entry = AuditLog(actor=actor, action=action, meta=meta or {})
    session.add(entry)
    await session.flush()
    return entry


async def recent_audit_logs(session: AsyncSession, limit: int = 100, action: str | None = None) -> list[AuditLog]:
    query = select(AuditLog).order_by(AuditLog.id.desc()).limit(limit)
    if action:
        query = query.where(AuditLog.action == action)
    result = await session.execute(query)
    return list(result.scalars())
