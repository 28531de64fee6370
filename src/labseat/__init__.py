"""Lab seating and problem-statement allocation engine."""

from .allocator import NeighborAwareAllocator, filter_by_exclusion, neighbor_exclusions, or_else
from .catalog import Domain, ProblemCatalog, sample
from .config import DEFAULT_CONFIG, EngineConfig
from .data import DEFAULT_CATALOG
from .exceptions import (
    AlreadyConfirmedError,
    InvalidCustomTextError,
    InvalidSelectionError,
    LabSeatError,
    NotFoundError,
    PackingInfeasibleError,
    RefreshDeniedError,
    ValidationError,
)
from .lifecycle import AssignmentLifecycle, state_of
from .models import (
    AssignmentState,
    Problem,
    ProblemAssignment,
    RefreshEntry,
    Room,
    SeatAllocation,
    SeatedParticipant,
    SeatingConfig,
    UnplacedTeam,
    group_teams,
)
from .packer import PackingResult, pack, slot_letters
from .topology import get_neighbors, neighbor_labels, parse_column, parse_room, parse_row

__all__ = [
    "AlreadyConfirmedError",
    "AssignmentLifecycle",
    "AssignmentState",
    "DEFAULT_CATALOG",
    "DEFAULT_CONFIG",
    "Domain",
    "EngineConfig",
    "InvalidCustomTextError",
    "InvalidSelectionError",
    "LabSeatError",
    "NeighborAwareAllocator",
    "NotFoundError",
    "PackingInfeasibleError",
    "PackingResult",
    "Problem",
    "ProblemAssignment",
    "ProblemCatalog",
    "RefreshDeniedError",
    "RefreshEntry",
    "Room",
    "SeatAllocation",
    "SeatedParticipant",
    "SeatingConfig",
    "UnplacedTeam",
    "ValidationError",
    "filter_by_exclusion",
    "get_neighbors",
    "group_teams",
    "neighbor_exclusions",
    "neighbor_labels",
    "or_else",
    "pack",
    "parse_column",
    "parse_room",
    "parse_row",
    "sample",
    "slot_letters",
    "state_of",
]
