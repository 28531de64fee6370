from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from labseat import ProblemAssignment, Room, SeatedParticipant, SeatingConfig
from labseat.topology import parse_room

from .models import Lab, Participant, ProblemAssignmentRecord


def to_seated(participant: Participant) -> SeatedParticipant:
    seat = (participant.assigned_seat or "").strip()
    room = (participant.assigned_lab or "").strip() or (parse_room(seat) or "")
    return SeatedParticipant(
        participant_id=participant.participant_id,
        team_id=participant.team_id,
        room=room,
        seat=seat if room else "",
    )


def to_room(lab: Lab) -> Room:
    return Room(
        id=str(lab.id),
        name=lab.name,
        capacity=lab.capacity,
        seating_config=SeatingConfig.from_mapping(lab.seating_config),
        used_slots=SeatingConfig.from_mapping(lab.used_slots),
        current_occupancy=lab.current_count,
    )


def apply_room(lab: Lab, room: Room) -> None:
    lab.used_slots = room.used_slots.as_dict()
    lab.current_count = room.current_occupancy


def record_to_assignment(record: ProblemAssignmentRecord) -> ProblemAssignment:
    return ProblemAssignment.from_dict(
        {
            "participant_id": record.participant_id,
            "team_id": record.team_id,
            "offered_problems": record.offered_problems,
            "selected_problem": record.selected_problem,
            "is_confirmed": record.is_confirmed,
            "refresh_count": record.refresh_count,
            "max_refreshes": record.max_refreshes,
            "refresh_history": record.refresh_history,
            "assigned_by": record.assigned_by,
            "assigned_at": record.assigned_at,
            "selected_at": record.selected_at,
            "confirmed_at": record.confirmed_at,
        }
    )


def apply_assignment(record: ProblemAssignmentRecord, assignment: ProblemAssignment) -> ProblemAssignmentRecord:
    document = assignment.as_dict()
    record.participant_id = assignment.participant_id
    record.team_id = assignment.team_id
    record.offered_problems = document["offered_problems"]
    record.selected_problem = document["selected_problem"]
    record.is_confirmed = assignment.is_confirmed
    record.refresh_count = assignment.refresh_count
    record.max_refreshes = assignment.max_refreshes
    record.refresh_history = document["refresh_history"]
    record.assigned_by = assignment.assigned_by
    record.assigned_at = assignment.assigned_at
    record.selected_at = assignment.selected_at
    record.confirmed_at = assignment.confirmed_at
    return record


def new_assignment_record(assignment: ProblemAssignment) -> ProblemAssignmentRecord:
    return apply_assignment(ProblemAssignmentRecord(), assignment)


async def list_labs(db: AsyncSession) -> list[Lab]:
    result = await db.execute(select(Lab).order_by(Lab.id))
    return list(result.scalars())


async def list_participants(db: AsyncSession, team_id: str | None = None) -> list[Participant]:
    query = select(Participant).order_by(Participant.created_at, Participant.participant_id)
    if team_id is not None:
        query = query.where(Participant.team_id == team_id)
    result = await db.execute(query)
    return list(result.scalars())


async def get_participant(db: AsyncSession, participant_id: str) -> Participant | None:
    return await db.get(Participant, participant_id)


async def get_assignment_record(db: AsyncSession, participant_id: str) -> ProblemAssignmentRecord | None:
    result = await db.execute(
        select(ProblemAssignmentRecord).where(ProblemAssignmentRecord.participant_id == participant_id)
    )
    return result.scalar_one_or_none()


async def list_assignment_records(db: AsyncSession, team_id: str | None = None) -> list[ProblemAssignmentRecord]:
    query = select(ProblemAssignmentRecord).order_by(ProblemAssignmentRecord.id)
    if team_id is not None:
        query = query.where(ProblemAssignmentRecord.team_id == team_id)
    result = await db.execute(query)
    return list(result.scalars())


async def load_assignment_map(db: AsyncSession) -> dict[str, list[tuple[int, int]]]:
    """Return ``participant_id -> [(domain_index, problem_index), ...]`` for every record."""

    return {
        record.participant_id: [
            (int(item["domain_index"]), int(item["problem_index"])) for item in record.offered_problems
        ]
        for record in await list_assignment_records(db)
    }


async def count_assignments(db: AsyncSession, confirmed: bool | None = None) -> int:
    query = select(func.count(ProblemAssignmentRecord.id))
    if confirmed is not None:
        query = query.where(ProblemAssignmentRecord.is_confirmed == confirmed)
    result = await db.execute(query)
    return int(result.scalar_one())

