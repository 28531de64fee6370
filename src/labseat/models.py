"""Data models describing rooms, seated participants, problems and assignments."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Mapping, Sequence, Tuple

from .exceptions import ValidationError

ProblemKey = Tuple[int, int]

CUSTOM_DOMAIN = "Open Innovation"
CUSTOM_INDEX = -1


@dataclass(slots=True, frozen=True)
class SeatedParticipant:
    """Seat-relevant projection of a participant."""

    participant_id: str
    team_id: str
    room: str = ""
    seat: str = ""

    def __post_init__(self) -> None:
        if not self.participant_id:
            raise ValidationError("participant_id cannot be empty.")
        object.__setattr__(self, "room", (self.room or "").strip())
        object.__setattr__(self, "seat", (self.seat or "").strip())
        if self.seat and not self.room:
            raise ValidationError("A seated participant must have a room.")


@dataclass(slots=True, frozen=True)
class SeatingConfig:
    """Number of team-slots per team size in a room."""

    size1: int = 0
    size2: int = 0
    size3: int = 0
    size4: int = 0
    size5: int = 0

    def __post_init__(self) -> None:
        for team_size in range(1, 6):
            if self.quota(team_size) < 0:
                raise ValidationError("Seating quotas cannot be negative.")

    def quota(self, team_size: int) -> int:
        return getattr(self, f"size{team_size}", 0)

    @classmethod
    def from_mapping(cls, data: Mapping[str, int] | None) -> "SeatingConfig":
        data = data or {}
        return cls(**{f"size{k}": int(data.get(f"size{k}", 0) or 0) for k in range(1, 6)})

    def as_dict(self) -> dict[str, int]:
        return {f"size{k}": self.quota(k) for k in range(1, 6)}


@dataclass(slots=True, frozen=True)
class Room:
    """A lab with a head-count capacity and a team-slot quota."""

    name: str
    capacity: int
    seating_config: SeatingConfig = field(default_factory=SeatingConfig)
    used_slots: SeatingConfig = field(default_factory=SeatingConfig)
    current_occupancy: int = 0
    id: str | None = None

    def __post_init__(self) -> None:
        name = self.name.strip()
        if not name:
            raise ValidationError("Room name cannot be empty.")
        if self.capacity < 0:
            raise ValidationError("Room capacity cannot be negative.")
        object.__setattr__(self, "name", name)


@dataclass(slots=True, frozen=True)
class SeatAllocation:
    participant_id: str
    room: str
    seat: str

    def as_dict(self) -> dict[str, str]:
        return {"participant_id": self.participant_id, "room": self.room, "seat": self.seat}


@dataclass(slots=True, frozen=True)
class UnplacedTeam:
    team_id: str
    size: int
    reason: str

    def as_dict(self) -> dict[str, Any]:
        return {"team_id": self.team_id, "size": self.size, "reason": self.reason}


@dataclass(slots=True, frozen=True)
class Problem:
    """A problem statement; identity is the ``(domain_index, problem_index)`` pair."""

    domain_index: int
    problem_index: int
    domain: str
    problem: str

    @property
    def key(self) -> ProblemKey:
        return (self.domain_index, self.problem_index)

    @property
    def is_custom(self) -> bool:
        return self.key == (CUSTOM_INDEX, CUSTOM_INDEX)

    @classmethod
    def custom(cls, text: str) -> "Problem":
        return cls(CUSTOM_INDEX, CUSTOM_INDEX, CUSTOM_DOMAIN, text)

    def as_dict(self) -> dict[str, Any]:
        return {
            "domain_index": self.domain_index,
            "problem_index": self.problem_index,
            "domain": self.domain,
            "problem": self.problem,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Problem":
        return cls(
            domain_index=int(data["domain_index"]),
            problem_index=int(data["problem_index"]),
            domain=str(data["domain"]),
            problem=str(data["problem"]),
        )


@dataclass(slots=True, frozen=True)
class RefreshEntry:
    """Snapshot of the offered options taken just before a refresh."""

    timestamp: datetime
    previous_options: Tuple[ProblemKey, ...]

    def as_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "previous_options": [list(pair) for pair in self.previous_options],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RefreshEntry":
        return cls(
            timestamp=datetime.fromisoformat(data["timestamp"]),
            previous_options=tuple((int(d), int(p)) for d, p in data["previous_options"]),
        )


class AssignmentState(str, enum.Enum):
    UNALLOCATED = "unallocated"
    OFFERED = "offered"
    CONFIRMED = "confirmed"


def _parse_timestamp(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


@dataclass(slots=True, frozen=True)
class ProblemAssignment:
    """Problem options offered to one participant and the confirmed choice."""

    participant_id: str
    team_id: str
    offered_problems: Tuple[Problem, ...]
    max_refreshes: int
    assigned_at: datetime
    assigned_by: str = "system"
    selected_problem: Problem | None = None
    is_confirmed: bool = False
    refresh_count: int = 0
    refresh_history: Tuple[RefreshEntry, ...] = ()
    selected_at: datetime | None = None
    confirmed_at: datetime | None = None

    def __post_init__(self) -> None:
        offered = tuple(self.offered_problems)
        if not offered:
            raise ValidationError("An assignment must offer at least one problem.")
        if len({problem.key for problem in offered}) != len(offered):
            raise ValidationError("Offered problems must be unique.")
        if self.is_confirmed and self.selected_problem is None:
            raise ValidationError("A confirmed assignment must have a selected problem.")
        if self.refresh_count < 0:
            raise ValidationError("refresh_count cannot be negative.")
        object.__setattr__(self, "offered_problems", offered)
        object.__setattr__(self, "refresh_history", tuple(self.refresh_history))

    @property
    def state(self) -> AssignmentState:
        return AssignmentState.CONFIRMED if self.is_confirmed else AssignmentState.OFFERED

    @property
    def offered_keys(self) -> List[ProblemKey]:
        return [problem.key for problem in self.offered_problems]

    def as_dict(self) -> dict[str, Any]:
        """Return the persisted document shape."""

        return {
            "participant_id": self.participant_id,
            "team_id": self.team_id,
            "offered_problems": [problem.as_dict() for problem in self.offered_problems],
            "selected_problem": self.selected_problem.as_dict() if self.selected_problem else None,
            "is_confirmed": self.is_confirmed,
            "refresh_count": self.refresh_count,
            "max_refreshes": self.max_refreshes,
            "refresh_history": [entry.as_dict() for entry in self.refresh_history],
            "assigned_by": self.assigned_by,
            "assigned_at": self.assigned_at.isoformat(),
            "selected_at": self.selected_at.isoformat() if self.selected_at else None,
            "confirmed_at": self.confirmed_at.isoformat() if self.confirmed_at else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProblemAssignment":
        selected = data.get("selected_problem")
        return cls(
            participant_id=data["participant_id"],
            team_id=data["team_id"],
            offered_problems=tuple(Problem.from_dict(item) for item in data["offered_problems"]),
            selected_problem=Problem.from_dict(selected) if selected else None,
            is_confirmed=bool(data.get("is_confirmed", False)),
            refresh_count=int(data.get("refresh_count", 0)),
            max_refreshes=int(data["max_refreshes"]),
            refresh_history=tuple(
                RefreshEntry.from_dict(item) for item in data.get("refresh_history") or ()
            ),
            assigned_by=data.get("assigned_by") or "system",
            assigned_at=_parse_timestamp(data["assigned_at"]),
            selected_at=_parse_timestamp(data.get("selected_at")),
            confirmed_at=_parse_timestamp(data.get("confirmed_at")),
        )


def group_teams(roster: Sequence[SeatedParticipant]) -> dict[str, List[str]]:
    """Group participant ids by team, preserving roster order."""

    teams: dict[str, List[str]] = {}
    for participant in roster:
        teams.setdefault(participant.team_id, []).append(participant.participant_id)
    return teams

