from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from labseat import (
    AlreadyConfirmedError,
    AssignmentLifecycle,
    AssignmentState,
    EngineConfig,
    InvalidCustomTextError,
    InvalidSelectionError,
    NotFoundError,
    Problem,
    ProblemAssignment,
    RefreshDeniedError,
    SeatedParticipant,
    ValidationError,
    state_of,
)

P0 = Problem(0, 0, "Web", "Portal")
P1 = Problem(0, 1, "Web", "Chat")
P2 = Problem(1, 0, "Data", "Dashboard")
P3 = Problem(1, 1, "Data", "Forecast")


class TickingClock:
    def __init__(self) -> None:
        self.now = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(minutes=1)
        return self.now


@pytest.fixture
def lifecycle() -> AssignmentLifecycle:
    return AssignmentLifecycle(clock=TickingClock())


@pytest.fixture
def alice() -> SeatedParticipant:
    return SeatedParticipant("alice", "T1", room="L1", seat="L1-A-1")


def test_open_creates_offered_assignment(lifecycle: AssignmentLifecycle, alice: SeatedParticipant) -> None:
    assert state_of(None) is AssignmentState.UNALLOCATED

    assignment = lifecycle.open(alice, [P0], assigned_by="admin")

    assert state_of(assignment) is AssignmentState.OFFERED
    assert assignment.team_id == "T1"
    assert assignment.max_refreshes == 2
    assert assignment.refresh_count == 0
    assert assignment.assigned_by == "admin"
    assert assignment.selected_problem is None


def test_open_validates_offer_size(lifecycle: AssignmentLifecycle, alice: SeatedParticipant) -> None:
    with pytest.raises(ValidationError):
        lifecycle.open(alice, [])
    with pytest.raises(ValidationError):
        lifecycle.open(alice, [P0, P1, P2, P3])


def test_open_replaces_options_but_keeps_counters(lifecycle: AssignmentLifecycle, alice: SeatedParticipant) -> None:
    first = lifecycle.refresh(lifecycle.open(alice, [P0]), [P1])

    reopened = lifecycle.open(alice, [P2, P3, P0], existing=first)

    assert reopened.offered_problems == (P2, P3, P0)
    assert reopened.refresh_count == 1
    assert reopened.assigned_at == first.assigned_at


def test_open_rejects_confirmed_assignment(lifecycle: AssignmentLifecycle, alice: SeatedParticipant) -> None:
    confirmed = lifecycle.confirm_selection(lifecycle.open(alice, [P0]), 0)
    with pytest.raises(NotFoundError):
        lifecycle.open(alice, [P1], existing=confirmed)


def test_refresh_is_additive_and_recorded(lifecycle: AssignmentLifecycle, alice: SeatedParticipant) -> None:
    assignment = lifecycle.open(alice, [P0])

    once = lifecycle.refresh(assignment, [P1])
    twice = lifecycle.refresh(once, [P2])

    assert twice.offered_problems == (P0, P1, P2)
    assert twice.refresh_count == len(twice.refresh_history) == 2
    assert [entry.previous_options for entry in twice.refresh_history] == [((0, 0),), ((0, 0), (0, 1))]
    assert twice.refresh_history[0].timestamp < twice.refresh_history[1].timestamp
    assert not lifecycle.can_refresh(twice)
    assert assignment.offered_problems == (P0,)


def test_refresh_budget_is_enforced(alice: SeatedParticipant) -> None:
    lifecycle = AssignmentLifecycle(config=EngineConfig(default_max_refreshes=1))
    refreshed = lifecycle.refresh(lifecycle.open(alice, [P0]), [P1])

    with pytest.raises(RefreshDeniedError) as excinfo:
        lifecycle.refresh(refreshed, [P2])

    assert str(excinfo.value) == "Refresh limit reached"
    assert excinfo.value.refresh_count == 1
    assert excinfo.value.max_refreshes == 1
    assert refreshed.offered_problems == (P0, P1)


def test_refresh_stops_at_option_ceiling(lifecycle: AssignmentLifecycle, alice: SeatedParticipant) -> None:
    full = lifecycle.open(alice, [P0, P1, P2])
    assert not lifecycle.can_refresh(full)
    with pytest.raises(RefreshDeniedError, match="Maximum number of offered problems"):
        lifecycle.refresh(full, [P3])


def test_refresh_after_confirmation_is_denied(lifecycle: AssignmentLifecycle, alice: SeatedParticipant) -> None:
    confirmed = lifecycle.confirm_selection(lifecycle.open(alice, [P0]), 0)
    with pytest.raises(RefreshDeniedError, match="Cannot refresh after confirmation"):
        lifecycle.refresh(confirmed, [P1])


def test_confirm_selection(lifecycle: AssignmentLifecycle, alice: SeatedParticipant) -> None:
    offered = lifecycle.open(alice, [P0, P1])

    with pytest.raises(InvalidSelectionError):
        lifecycle.confirm_selection(offered, 2)
    with pytest.raises(InvalidSelectionError):
        lifecycle.confirm_selection(offered, -1)

    confirmed = lifecycle.confirm_selection(offered, 1)
    assert confirmed.state is AssignmentState.CONFIRMED
    assert confirmed.selected_problem == P1
    assert confirmed.selected_at == confirmed.confirmed_at is not None

    with pytest.raises(AlreadyConfirmedError) as excinfo:
        lifecycle.confirm_selection(confirmed, 0)
    assert excinfo.value.selected_problem == P1


def test_confirm_custom_problem(lifecycle: AssignmentLifecycle, alice: SeatedParticipant) -> None:
    offered = lifecycle.open(alice, [P0])

    with pytest.raises(InvalidCustomTextError):
        lifecycle.confirm_custom(offered, "short")
    with pytest.raises(InvalidCustomTextError):
        lifecycle.confirm_custom(offered, "   tiny    ")

    confirmed = lifecycle.confirm_custom(offered, "  a valid ten+ char idea ")
    selected = confirmed.selected_problem
    assert selected is not None and selected.is_custom
    assert selected.key == (-1, -1)
    assert selected.domain == "Open Innovation"
    assert selected.problem == "a valid ten+ char idea"

    with pytest.raises(AlreadyConfirmedError):
        lifecycle.confirm_custom(confirmed, "another custom idea")


def test_cascade_copies_choice_to_teammates_only(lifecycle: AssignmentLifecycle, alice: SeatedParticipant) -> None:
    bob = SeatedParticipant("bob", "T1", room="L1", seat="L1-A-2")
    carol = SeatedParticipant("carol", "T2", room="L1", seat="L1-A-3")
    mine = lifecycle.confirm_selection(lifecycle.open(alice, [P0, P1]), 1)
    bobs = lifecycle.open(bob, [P2])
    carols = lifecycle.open(carol, [P3])

    updated = lifecycle.cascade(mine, [mine, bobs, carols])

    assert [a.participant_id for a in updated] == ["bob"]
    [bob_after] = updated
    assert bob_after.is_confirmed
    assert bob_after.selected_problem == P1
    assert bob_after.offered_problems == (P2,)
    assert bob_after.confirmed_at == mine.confirmed_at


def test_cascade_requires_confirmed_source(lifecycle: AssignmentLifecycle, alice: SeatedParticipant) -> None:
    with pytest.raises(ValidationError):
        lifecycle.cascade(lifecycle.open(alice, [P0]), [])


def test_assignment_document_round_trip(lifecycle: AssignmentLifecycle, alice: SeatedParticipant) -> None:
    assignment = lifecycle.confirm_selection(lifecycle.refresh(lifecycle.open(alice, [P0]), [P1]), 0)
    document = assignment.as_dict()

    assert document["offered_problems"][1] == {
        "domain_index": 0,
        "problem_index": 1,
        "domain": "Web",
        "problem": "Chat",
    }
    assert document["refresh_history"][0]["previous_options"] == [[0, 0]]
    assert ProblemAssignment.from_dict(document) == assignment


def test_cascade_leaves_confirmed_teammates_alone(lifecycle: AssignmentLifecycle, alice: SeatedParticipant) -> None:
    bob = SeatedParticipant("bob", "T1", room="L1", seat="L1-A-2")
    bobs = lifecycle.confirm_selection(lifecycle.open(bob, [P2, P3]), 1)
    mine = lifecycle.confirm_selection(lifecycle.open(alice, [P0, P1]), 0)

    assert lifecycle.cascade(mine, [bobs]) == []
    assert bobs.selected_problem == P3


def test_refresh_without_new_problems_is_denied(lifecycle: AssignmentLifecycle, alice: SeatedParticipant) -> None:
    assignment = lifecycle.open(alice, [P0])

    with pytest.raises(RefreshDeniedError, match="No new problems left"):
        lifecycle.refresh(assignment, [])

    assert assignment.refresh_count == 0
    assert assignment.offered_problems == (P0,)
