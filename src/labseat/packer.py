"""First-fit packing of whole teams into rooms under team-size quotas."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, List, Mapping, Sequence

from .config import DEFAULT_CONFIG, EngineConfig
from .exceptions import PackingInfeasibleError
from .models import Room, SeatAllocation, SeatingConfig, UnplacedTeam

NO_SLOT_REASON = "No matching slot available"


def slot_letters(index: int) -> str:
    """Convert a zero-based slot index to spreadsheet-style letters (0 -> A, 26 -> AA)."""

    if index < 0:
        raise ValueError("Slot index cannot be negative.")
    letters = ""
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def slot_label(team_size: int, slot_index: int) -> str:
    return f"{team_size}{slot_letters(slot_index)}"


@dataclass(slots=True, frozen=True)
class PackingResult:
    allocations: tuple[SeatAllocation, ...]
    unplaced: tuple[UnplacedTeam, ...]
    rooms: tuple[Room, ...]

    @property
    def is_feasible(self) -> bool:
        return not self.unplaced

    def raise_for_unplaced(self) -> None:
        if self.unplaced:
            raise PackingInfeasibleError(self.unplaced)

    def as_dict(self) -> dict[str, list[dict]]:
        return {
            "allocations": [item.as_dict() for item in self.allocations],
            "unplaced": [item.as_dict() for item in self.unplaced],
        }


class _RoomState:
    __slots__ = ("room", "used", "occupancy")

    def __init__(self, room: Room) -> None:
        self.room = room
        self.used: Dict[int, int] = {}
        self.occupancy = 0

    def fits(self, team_size: int) -> bool:
        return (
            self.used.get(team_size, 0) < self.room.seating_config.quota(team_size)
            and self.occupancy + team_size <= self.room.capacity
        )

    def take_slot(self, team_size: int) -> int:
        slot_index = self.used.get(team_size, 0)
        self.used[team_size] = slot_index + 1
        self.occupancy += team_size
        return slot_index

    def snapshot(self) -> Room:
        used = SeatingConfig(**{f"size{k}": self.used.get(k, 0) for k in range(1, 6)})
        return replace(self.room, used_slots=used, current_occupancy=self.occupancy)


def pack(
    rooms: Sequence[Room],
    teams_by_id: Mapping[str, Sequence[str]],
    *,
    config: EngineConfig = DEFAULT_CONFIG,
) -> PackingResult:
    """Place every team into the first room with a free slot of its size.

    Room counters always start from zero. Teams are placed largest first; a
    team that fits nowhere is reported in ``unplaced`` and, when any team is
    unplaced, no allocation is returned at all.
    """

    states = [_RoomState(room) for room in rooms]
    ordered = sorted(teams_by_id.items(), key=lambda item: len(item[1]), reverse=True)

    allocations: List[SeatAllocation] = []
    unplaced: List[UnplacedTeam] = []
    for team_id, members in ordered:
        team_size = len(members)
        if team_size == 0:
            continue
        target = None
        if team_size <= config.max_team_size:
            target = next((state for state in states if state.fits(team_size)), None)
        if target is None:
            unplaced.append(UnplacedTeam(team_id=team_id, size=team_size, reason=NO_SLOT_REASON))
            continue
        label = slot_label(team_size, target.take_slot(team_size))
        allocations.extend(
            SeatAllocation(participant_id=member, room=target.room.name, seat=label)
            for member in members
        )

    if unplaced:
        return PackingResult(
            allocations=(),
            unplaced=tuple(unplaced),
            rooms=tuple(replace(room, used_slots=SeatingConfig(), current_occupancy=0) for room in rooms),
        )
    return PackingResult(
        allocations=tuple(allocations),
        unplaced=(),
        rooms=tuple(state.snapshot() for state in states),
    )
