from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from core.audit import recent_audit_logs
from core.models import AuditLog
from core.schemas import AuditLogRead

from .dependencies import get_session

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get("", response_model=list[AuditLogRead])
async def list_audit_logs(
    action: str | None = None,
    limit: int = Query(default=100, ge=1, le=500),
    session: AsyncSession = Depends(get_session),
) -> list[AuditLog]:
    return await recent_audit_logs(session, limit=limit, action=action)
