"""Seat label parsing and grid adjacency.

Seat labels follow ``<room>-<row>-<column>``, for example ``L1-A-12``.  The
row is a letter and the column a positive integer.  Two seats are neighbours
when they share a room and either sit next to each other in the same row
(``left``/``right``) or occupy the same column in adjacent rows
(``front`` is the next row letter, ``back`` the previous one).

Parsing never raises: a label that does not follow the grammar simply has no
computable neighbours, so unseated participants can still be processed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Sequence

from .models import SeatedParticipant

SEAT_PATTERN = re.compile(r"^(?P<room>[^-\s]+)-(?P<row>[A-Z]+)-(?P<column>\d+)$")

FIRST_ROW = "A"
LAST_ROW = "Z"


def _match(seat: str | None) -> re.Match[str] | None:
    if not seat:
        return None
    return SEAT_PATTERN.match(seat.strip())


def parse_room(seat: str | None) -> str | None:
    match = _match(seat)
    return match.group("room") if match else None


def parse_row(seat: str | None) -> str | None:
    match = _match(seat)
    return match.group("row") if match else None


def parse_column(seat: str | None) -> int | None:
    match = _match(seat)
    return int(match.group("column")) if match else None


def format_seat(room: str, row: str, column: int) -> str:
    return f"{room}-{row}-{column}"


def shift_row(row: str, offset: int) -> str | None:
    """Move ``row`` by ``offset`` character codes.

    Only single-letter rows between ``A`` and ``Z`` have adjacent rows; any
    shift that would leave that range yields ``None``.
    """

    if len(row) != 1:
        return None
    shifted = chr(ord(row) + offset)
    if not FIRST_ROW <= shifted <= LAST_ROW:
        return None
    return shifted


@dataclass(slots=True, frozen=True)
class NeighborLabels:
    left: str | None = None
    right: str | None = None
    front: str | None = None
    back: str | None = None

    def __iter__(self) -> Iterator[str]:
        for label in (self.left, self.right, self.front, self.back):
            if label is not None:
                yield label


def neighbor_labels(seat: str | None) -> NeighborLabels:
    """Return the labels of the four grid-adjacent seats of ``seat``."""

    match = _match(seat)
    if match is None:
        return NeighborLabels()
    room = match.group("room")
    row = match.group("row")
    column = int(match.group("column"))

    next_row = shift_row(row, 1)
    prev_row = shift_row(row, -1)
    return NeighborLabels(
        left=format_seat(room, row, column - 1) if column > 0 else None,
        right=format_seat(room, row, column + 1),
        front=format_seat(room, next_row, column) if next_row else None,
        back=format_seat(room, prev_row, column) if prev_row else None,
    )


def get_neighbors(
    participant: SeatedParticipant,
    roster: Sequence[SeatedParticipant],
) -> List[SeatedParticipant]:
    """Return every other participant sitting on one of the adjacent seats."""

    candidates = set(neighbor_labels(participant.seat))
    if not candidates:
        return []
    return [
        other
        for other in roster
        if other.participant_id != participant.participant_id and other.seat in candidates
    ]


def seat_sort_key(participant: SeatedParticipant) -> tuple[str, str, int]:
    """Order participants room by room, row by row, column by column."""

    seat = participant.seat
    return (
        parse_room(seat) or participant.room or "",
        parse_row(seat) or "",
        parse_column(seat) or 0,
    )
