from __future__ import annotations

import random
from typing import Any, Dict, List

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core import audit
from core.config import Settings, get_settings
from core.logging import logger
from core.models import Participant, ProblemAssignmentRecord
from core.services import (
    apply_assignment,
    apply_room,
    count_assignments,
    get_assignment_record,
    get_participant,
    list_assignment_records,
    list_labs,
    list_participants,
    load_assignment_map,
    new_assignment_record,
    record_to_assignment,
    to_room,
    to_seated,
)
from labseat import (
    DEFAULT_CATALOG,
    AlreadyConfirmedError,
    AssignmentLifecycle,
    NeighborAwareAllocator,
    NotFoundError,
    PackingResult,
    ProblemAssignment,
    ProblemCatalog,
    SeatedParticipant,
    group_teams,
    pack,
)
from labseat.lifecycle import Clock, utcnow
from orchestrator.exceptions import AllocationExistsError, EmptyRosterError


class AllocationService:
    """Runs engine operations against snapshots loaded from the database.

    Every public method reads what it needs, computes the new state with the
    pure ``labseat`` engine and stages all resulting writes on ``self.db``.
    Committing is left to the caller's transaction, so multi-row updates such
    as the team confirmation cascade land together or not at all.
    """

    def __init__(
        self,
        db: AsyncSession,
        settings: Settings | None = None,
        catalog: ProblemCatalog | None = None,
        rng: random.Random | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self.db = db
        self.settings = settings or get_settings()
        self.config = self.settings.engine_config()
        self.catalog = catalog or DEFAULT_CATALOG
        self.allocator = NeighborAwareAllocator(self.catalog, rng=rng)
        self.lifecycle = AssignmentLifecycle(self.config, clock=clock)

    def describe(self, assignment: ProblemAssignment) -> Dict[str, Any]:
        payload = assignment.as_dict()
        payload["can_refresh"] = self.lifecycle.can_refresh(assignment)
        return payload

    async def pack_labs(self, actor: str = "admin") -> PackingResult:
        labs = await list_labs(self.db)
        participants = await list_participants(self.db)
        if not participants:
            raise EmptyRosterError("No participants found")

        teams = group_teams([to_seated(participant) for participant in participants])
        result = pack([to_room(lab) for lab in labs], teams, config=self.config)
        if not result.is_feasible:
            logger.bind(event="labs_packing_failed", unplaced=len(result.unplaced)).warning(
                "labs_packing_failed"
            )
            result.raise_for_unplaced()

        by_id = {participant.participant_id: participant for participant in participants}
        for allocation in result.allocations:
            participant = by_id[allocation.participant_id]
            participant.assigned_lab = allocation.room
            participant.assigned_seat = allocation.seat
        for lab, room in zip(labs, result.rooms):
            apply_room(lab, room)
        await self.db.flush()

        logger.info("Packed {} teams into {} labs", len(teams), len(labs))
        await audit.write_audit_log(
            self.db,
            actor,
            audit.LABS_PACKED,
            {"teams": len(teams), "labs": len(labs), "participants": len(result.allocations)},
        )
        return result

    async def allocate_problems(self, assigned_by: str) -> Dict[str, Any]:
        existing = await count_assignments(self.db)
        if existing:
            raise AllocationExistsError(existing)
        participants = await list_participants(self.db)
        if not participants:
            raise EmptyRosterError("No participants found")

        roster = [to_seated(participant) for participant in participants]
        allocations = self.allocator.allocate_all(roster)
        for seated, participant in zip(roster, participants):
            assignment = self.lifecycle.open(
                seated, allocations[seated.participant_id], assigned_by=assigned_by
            )
            self.db.add(new_assignment_record(assignment))
            participant.has_confirmed_problem = False
        await self.db.flush()

        teams = len({seated.team_id for seated in roster})
        logger.bind(event="problems_allocated", participants=len(roster), teams=teams).info(
            "problems_allocated"
        )
        await audit.write_audit_log(
            self.db, assigned_by, audit.PROBLEMS_ALLOCATED, {"participants": len(roster), "teams": teams}
        )
        return {
            "allocated": len(roster),
            "teams": teams,
            "message": f"Allocated problem statements to {len(roster)} participants ({teams} teams).",
        }

    async def revert_problem_allocation(self, actor: str = "admin") -> int:
        result = await self.db.execute(delete(ProblemAssignmentRecord))
        await self.db.execute(update(Participant).values(has_confirmed_problem=False))
        await self.db.flush()
        deleted = int(result.rowcount or 0)
        logger.info("Reverted problem allocation, {} assignments deleted", deleted)
        await audit.write_audit_log(self.db, actor, audit.PROBLEMS_REVERTED, {"deleted": deleted})
        return deleted

    async def get_assignment(self, participant_id: str) -> ProblemAssignment:
        record = await self._require_record(participant_id)
        return record_to_assignment(record)

    async def allocate_domain_problems(self, participant_id: str, domain: str) -> ProblemAssignment:
        if not self.catalog.has_domain(domain):
            raise NotFoundError(f"Domain {domain!r} not found")
        participant = await self._require_participant(participant_id)
        if participant.has_confirmed_problem or await self._team_selection(participant.team_id) is not None:
            raise NotFoundError(
                f"No open assignment for participant {participant_id}: the team has already confirmed."
            )
        record = await get_assignment_record(self.db, participant_id)
        existing = record_to_assignment(record) if record else None

        roster, seated, assigned = await self._snapshot(participant)
        problems = self.allocator.allocate_by_domain(seated, roster, assigned, domain)
        assignment = self.lifecycle.open(seated, problems, existing=existing)

        participant.domain = domain
        if record is None:
            self.db.add(new_assignment_record(assignment))
        else:
            apply_assignment(record, assignment)
        await self.db.flush()

        logger.bind(event="domain_problems_offered", participant_id=participant_id, domain=domain).info(
            "domain_problems_offered"
        )
        await audit.write_audit_log(
            self.db,
            participant_id,
            audit.DOMAIN_PROBLEMS_OFFERED,
            {"domain": domain, "offered": [list(key) for key in assignment.offered_keys]},
        )
        return assignment

    async def refresh_problems(self, participant_id: str) -> ProblemAssignment:
        record = await self._require_record(participant_id)
        assignment = record_to_assignment(record)
        self.lifecycle.ensure_refreshable(assignment)
        participant = await self._require_participant(participant_id)

        roster, seated, assigned = await self._snapshot(participant)
        new_problems = self.allocator.refresh_one(seated, roster, assigned, assignment.offered_keys)
        refreshed = self.lifecycle.refresh(assignment, new_problems)
        apply_assignment(record, refreshed)
        await self.db.flush()

        logger.bind(
            event="problems_refreshed",
            participant_id=participant_id,
            refresh_count=refreshed.refresh_count,
            max_refreshes=refreshed.max_refreshes,
        ).info("problems_refreshed")
        await audit.write_audit_log(
            self.db,
            participant_id,
            audit.PROBLEMS_REFRESHED,
            {"refresh_count": refreshed.refresh_count},
        )
        return refreshed

    async def confirm_problem(
        self,
        participant_id: str,
        *,
        selected_index: int | None = None,
        custom_problem: str | None = None,
    ) -> ProblemAssignment:
        record = await self._require_record(participant_id)
        assignment = record_to_assignment(record)
        if not assignment.is_confirmed:
            locked = await self._team_selection(assignment.team_id)
            if locked is not None:
                raise AlreadyConfirmedError(
                    "Problem already confirmed by the team", selected_problem=locked.selected_problem
                )
        if custom_problem is not None:
            confirmed = self.lifecycle.confirm_custom(assignment, custom_problem)
        else:
            confirmed = self.lifecycle.confirm_selection(assignment, -1 if selected_index is None else selected_index)
        apply_assignment(record, confirmed)

        team_records = {
            item.participant_id: item
            for item in await list_assignment_records(self.db, team_id=confirmed.team_id)
            if item.participant_id != participant_id
        }
        teammates = [record_to_assignment(item) for item in team_records.values()]
        for updated in self.lifecycle.cascade(confirmed, teammates):
            apply_assignment(team_records[updated.participant_id], updated)

        selected = confirmed.selected_problem
        for member in await list_participants(self.db, team_id=confirmed.team_id):
            member.has_confirmed_problem = True
            member.domain = selected.domain
        await self.db.flush()

        logger.bind(
            event="problem_confirmed",
            participant_id=participant_id,
            team_id=confirmed.team_id,
            teammates=len(teammates),
            custom=selected.is_custom,
        ).info("problem_confirmed")
        await audit.write_audit_log(
            self.db,
            participant_id,
            audit.PROBLEM_CONFIRMED,
            {"team_id": confirmed.team_id, "selected": list(selected.key), "cascaded": len(teammates)},
        )
        return confirmed

    async def allocation_stats(self) -> Dict[str, Any]:
        seated = await self.db.execute(
            select(func.count(Participant.participant_id)).where(
                Participant.assigned_seat.is_not(None), Participant.assigned_seat != ""
            )
        )
        allocated = await count_assignments(self.db)
        confirmed = await count_assignments(self.db, confirmed=True)
        refreshes = await self.db.execute(
            select(
                func.coalesce(func.sum(ProblemAssignmentRecord.refresh_count), 0),
                func.coalesce(func.avg(ProblemAssignmentRecord.refresh_count), 0),
            )
        )
        total_refreshes, avg_refreshes = refreshes.one()
        return {
            "total": int(seated.scalar_one()),
            "allocated": allocated,
            "confirmed": confirmed,
            "pending": allocated - confirmed,
            "total_refreshes": int(total_refreshes),
            "avg_refreshes": round(float(avg_refreshes), 1),
        }

    async def _require_participant(self, participant_id: str) -> Participant:
        participant = await get_participant(self.db, participant_id)
        if participant is None:
            raise NotFoundError(f"Participant {participant_id} not found")
        return participant

    async def _require_record(self, participant_id: str) -> ProblemAssignmentRecord:
        record = await get_assignment_record(self.db, participant_id)
        if record is None:
            raise NotFoundError(f"No problem assignment found for participant {participant_id}")
        return record

    async def _team_selection(self, team_id: str) -> ProblemAssignment | None:
        for item in await list_assignment_records(self.db, team_id=team_id):
            if item.is_confirmed:
                return record_to_assignment(item)
        return None

    async def _snapshot(
        self, participant: Participant
    ) -> tuple[List[SeatedParticipant], SeatedParticipant, Dict[str, List[tuple[int, int]]]]:
        roster = [to_seated(item) for item in await list_participants(self.db)]
        seated = next(
            (item for item in roster if item.participant_id == participant.participant_id),
            to_seated(participant),
        )
        assigned = await load_assignment_map(self.db)
        return roster, seated, assigned
