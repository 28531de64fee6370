from __future__ import annotations

import pytest

from labseat import SeatedParticipant, get_neighbors, neighbor_labels, parse_column, parse_room, parse_row
from labseat.topology import seat_sort_key, shift_row


def seat(pid: str, label: str, team: str = "T") -> SeatedParticipant:
    room = label.split("-")[0] if label else ""
    return SeatedParticipant(pid, team, room=room, seat=label)


def test_parse_seat_parts() -> None:
    assert parse_room("L1-A-12") == "L1"
    assert parse_row("L1-A-12") == "A"
    assert parse_column("L1-A-12") == 12


@pytest.mark.parametrize("label", ["", None, "5A", "L1-a-3", "L1-A-", "L1--3", "garbage"])
def test_malformed_labels_parse_to_none(label) -> None:
    assert parse_room(label) is None
    assert parse_row(label) is None
    assert parse_column(label) is None
    assert list(neighbor_labels(label)) == []


def test_neighbor_labels_in_grid() -> None:
    labels = neighbor_labels("L2-C-5")
    assert labels.left == "L2-C-4"
    assert labels.right == "L2-C-6"
    assert labels.front == "L2-D-5"
    assert labels.back == "L2-B-5"


def test_rows_do_not_wrap_past_alphabet_edges() -> None:
    assert neighbor_labels("L1-A-3").back is None
    assert neighbor_labels("L1-Z-3").front is None
    assert shift_row("AB", 1) is None


def test_get_neighbors_excludes_self_and_far_seats() -> None:
    me = seat("p1", "L1-B-2")
    roster = [
        me,
        seat("left", "L1-B-1"),
        seat("right", "L1-B-3"),
        seat("front", "L1-C-2"),
        seat("back", "L1-A-2"),
        seat("diagonal", "L1-A-1"),
        seat("other-lab", "L2-B-1"),
        seat("unseated", ""),
    ]
    neighbors = {n.participant_id for n in get_neighbors(me, roster)}
    assert neighbors == {"left", "right", "front", "back"}


def test_unseated_participant_has_no_neighbors() -> None:
    me = SeatedParticipant("p1", "T")
    assert get_neighbors(me, [me, seat("p2", "L1-A-1")]) == []


def test_neighbor_relation_is_symmetric_for_generated_labels() -> None:
    roster = [seat(f"p{row}{col}", f"L1-{row}-{col}") for row in "ABC" for col in range(1, 4)]
    for a in roster:
        for b in get_neighbors(a, roster):
            assert a.participant_id in {n.participant_id for n in get_neighbors(b, roster)}
            if b.seat == neighbor_labels(a.seat).right:
                assert a.seat == neighbor_labels(b.seat).left


def test_seat_sort_key_orders_room_row_column() -> None:
    roster = [seat("c", "L1-B-1"), seat("b", "L1-A-10"), seat("a", "L1-A-2"), seat("d", "L0-Z-9")]
    assert [p.participant_id for p in sorted(roster, key=seat_sort_key)] == ["d", "a", "b", "c"]


def test_padded_seat_labels_are_normalized() -> None:
    me = SeatedParticipant("p1", "T", room=" L1 ", seat=" L1-B-2 ")
    padded = SeatedParticipant("p2", "T", room="L1", seat="L1-B-3  ")

    assert me.seat == "L1-B-2"
    assert me.room == "L1"
    assert [n.participant_id for n in get_neighbors(me, [me, padded])] == ["p2"]
    assert [n.participant_id for n in get_neighbors(padded, [me, padded])] == ["p1"]
