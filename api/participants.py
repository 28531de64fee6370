from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.models import Participant
from core.schemas import (
    AssignmentRead,
    ConfirmProblemRequest,
    DomainProblemsRequest,
    ParticipantCreate,
    ParticipantRead,
)
from core.services import get_participant, list_participants
from orchestrator.service import AllocationService

from .dependencies import get_allocation_service, get_session

router = APIRouter(prefix="/participants", tags=["participants"])


@router.get("", response_model=list[ParticipantRead])
async def get_participants(
    team_id: str | None = None, session: AsyncSession = Depends(get_session)
) -> list[Participant]:
    return await list_participants(session, team_id=team_id)


@router.post("", response_model=ParticipantRead, status_code=status.HTTP_201_CREATED)
async def create_participant(payload: ParticipantCreate, session: AsyncSession = Depends(get_session)) -> Participant:
    if await get_participant(session, payload.participant_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Participant already exists")
    participant = Participant(**payload.model_dump(), has_confirmed_problem=False)
    session.add(participant)
    await session.flush()
    return participant


@router.get("/{participant_id}", response_model=ParticipantRead)
async def get_participant_detail(participant_id: str, session: AsyncSession = Depends(get_session)) -> Participant:
    participant = await get_participant(session, participant_id)
    if not participant:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Participant not found")
    return participant


@router.get("/{participant_id}/problem-assignment", response_model=AssignmentRead)
async def get_problem_assignment(
    participant_id: str, service: AllocationService = Depends(get_allocation_service)
) -> dict:
    return service.describe(await service.get_assignment(participant_id))


@router.post("/{participant_id}/allocate-domain-problems", response_model=AssignmentRead)
async def allocate_domain_problems(
    participant_id: str,
    payload: DomainProblemsRequest,
    service: AllocationService = Depends(get_allocation_service),
) -> dict:
    assignment = await service.allocate_domain_problems(participant_id, payload.domain)
    return service.describe(assignment)


@router.post("/{participant_id}/refresh-problems", response_model=AssignmentRead)
async def refresh_problems(participant_id: str, service: AllocationService = Depends(get_allocation_service)) -> dict:
    return service.describe(await service.refresh_problems(participant_id))


@router.post("/{participant_id}/confirm-problem", response_model=AssignmentRead)
async def confirm_problem(
    participant_id: str,
    payload: ConfirmProblemRequest,
    service: AllocationService = Depends(get_allocation_service),
) -> dict:
    assignment = await service.confirm_problem(
        participant_id,
        selected_index=payload.selected_problem_index,
        custom_problem=payload.custom_problem,
    )
    return service.describe(assignment)
