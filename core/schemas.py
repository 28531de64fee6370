from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class SeatingConfigSchema(BaseModel):
    size1: int = Field(default=0, ge=0)
    size2: int = Field(default=0, ge=0)
    size3: int = Field(default=0, ge=0)
    size4: int = Field(default=0, ge=0)
    size5: int = Field(default=0, ge=0)


class LabBase(ORMModel):
    name: str = Field(min_length=1)
    room_number: str | None = None
    capacity: int = Field(ge=0)
    seating_config: SeatingConfigSchema = Field(default_factory=SeatingConfigSchema)


class LabCreate(LabBase):
    pass


class LabUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    room_number: str | None = None
    capacity: int | None = Field(default=None, ge=0)
    seating_config: SeatingConfigSchema | None = None


class LabRead(LabBase):
    id: int
    current_count: int
    used_slots: SeatingConfigSchema = Field(default_factory=SeatingConfigSchema)


class ParticipantCreate(BaseModel):
    participant_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    team_id: str = Field(min_length=1)
    assigned_lab: str | None = None
    assigned_seat: str | None = None


class ParticipantRead(ORMModel):
    participant_id: str
    name: str
    team_id: str
    assigned_lab: str | None
    assigned_seat: str | None
    domain: str | None
    has_confirmed_problem: bool


class ProblemRead(BaseModel):
    domain_index: int
    problem_index: int
    domain: str
    problem: str


class RefreshEntryRead(BaseModel):
    timestamp: datetime
    previous_options: list[list[int]]


class AssignmentRead(BaseModel):
    participant_id: str
    team_id: str
    offered_problems: list[ProblemRead]
    selected_problem: ProblemRead | None = None
    is_confirmed: bool
    refresh_count: int
    max_refreshes: int
    can_refresh: bool
    refresh_history: list[RefreshEntryRead] = Field(default_factory=list)
    assigned_by: str
    assigned_at: datetime
    selected_at: datetime | None = None
    confirmed_at: datetime | None = None


class DomainProblemsRequest(BaseModel):
    domain: str = Field(min_length=1)


class ConfirmProblemRequest(BaseModel):
    selected_problem_index: int | None = None
    custom_problem: str | None = None

    @model_validator(mode="after")
    def _exactly_one_choice(self) -> "ConfirmProblemRequest":
        if (self.selected_problem_index is None) == (self.custom_problem is None):
            raise ValueError("Provide either selected_problem_index or custom_problem.")
        return self


class AllocateProblemsRequest(BaseModel):
    assigned_by: str = Field(min_length=1)


class SeatAllocationRead(BaseModel):
    participant_id: str
    room: str
    seat: str


class UnplacedTeamRead(BaseModel):
    team_id: str
    size: int
    reason: str


class PackingResultRead(BaseModel):
    allocations: list[SeatAllocationRead]
    unplaced: list[UnplacedTeamRead]


class ProblemAllocationRead(BaseModel):
    allocated: int
    teams: int
    message: str


class RevertAllocationRead(BaseModel):
    deleted_count: int


class AllocationStatsRead(BaseModel):
    total: int
    allocated: int
    confirmed: int
    pending: int
    total_refreshes: int
    avg_refreshes: float


class AuditLogRead(ORMModel):
    id: int
    actor: str
    action: str
    meta: dict[str, Any]
    created_at: datetime
