from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.models import Lab
from core.schemas import LabCreate, LabRead, LabUpdate, PackingResultRead
from core.services import list_labs
from orchestrator.service import AllocationService

from .dependencies import get_allocation_service, get_session

router = APIRouter(prefix="/labs", tags=["labs"])


async def _ensure_unique_name(session: AsyncSession, name: str, lab_id: int | None = None) -> None:
    result = await session.execute(select(Lab).where(Lab.name == name))
    clash = result.scalar_one_or_none()
    if clash and clash.id != lab_id:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Lab name already exists")


@router.get("", response_model=list[LabRead])
async def get_labs(session: AsyncSession = Depends(get_session)) -> list[Lab]:
    return sorted(await list_labs(session), key=lambda lab: lab.name)


@router.post("", response_model=LabRead, status_code=status.HTTP_201_CREATED)
async def create_lab(payload: LabCreate, session: AsyncSession = Depends(get_session)) -> Lab:
    await _ensure_unique_name(session, payload.name)
    lab = Lab(
        name=payload.name,
        room_number=payload.room_number,
        capacity=payload.capacity,
        seating_config=payload.seating_config.model_dump(),
        used_slots={},
        current_count=0,
    )
    session.add(lab)
    await session.flush()
    return lab


@router.post("/allocate", response_model=PackingResultRead)
async def allocate_labs(service: AllocationService = Depends(get_allocation_service)) -> dict:
    result = await service.pack_labs()
    return result.as_dict()


@router.put("/{lab_id}", response_model=LabRead)
async def update_lab(lab_id: int, payload: LabUpdate, session: AsyncSession = Depends(get_session)) -> Lab:
    lab = await session.get(Lab, lab_id)
    if not lab:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lab not found")
    changes = payload.model_dump(exclude_unset=True)
    if "name" in changes:
        await _ensure_unique_name(session, changes["name"], lab_id)
    if payload.seating_config is not None:
        changes["seating_config"] = payload.seating_config.model_dump()
    for field, value in changes.items():
        setattr(lab, field, value)
    await session.flush()
    return lab


@router.delete("/{lab_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_lab(lab_id: int, session: AsyncSession = Depends(get_session)) -> None:
    lab = await session.get(Lab, lab_id)
    if not lab:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lab not found")
    await session.delete(lab)
    await session.flush()
