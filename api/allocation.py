from __future__ import annotations

from fastapi import APIRouter, Depends

from core.schemas import (
    AllocateProblemsRequest,
    AllocationStatsRead,
    ProblemAllocationRead,
    RevertAllocationRead,
)
from orchestrator.service import AllocationService

from .dependencies import get_allocation_service

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/allocate-problems", response_model=ProblemAllocationRead)
async def allocate_problems(
    payload: AllocateProblemsRequest, service: AllocationService = Depends(get_allocation_service)
) -> dict:
    return await service.allocate_problems(assigned_by=payload.assigned_by)


@router.delete("/allocate-problems", response_model=RevertAllocationRead)
async def revert_problem_allocation(service: AllocationService = Depends(get_allocation_service)) -> dict:
    return {"deleted_count": await service.revert_problem_allocation()}


@router.get("/allocation-stats", response_model=AllocationStatsRead)
async def allocation_stats(service: AllocationService = Depends(get_allocation_service)) -> dict:
    return await service.allocation_stats()
