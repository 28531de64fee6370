"""Per-participant assignment state machine.

``UNALLOCATED -> OFFERED -> CONFIRMED``.  Every transition returns a new
:class:`~labseat.models.ProblemAssignment`; the input is never modified, so a
rejected transition leaves the caller's state exactly as it was.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Sequence

from .config import DEFAULT_CONFIG, EngineConfig
from .exceptions import (
    AlreadyConfirmedError,
    InvalidCustomTextError,
    InvalidSelectionError,
    NotFoundError,
    RefreshDeniedError,
    ValidationError,
)
from .models import AssignmentState, Problem, ProblemAssignment, RefreshEntry, SeatedParticipant

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def state_of(assignment: ProblemAssignment | None) -> AssignmentState:
    if assignment is None:
        return AssignmentState.UNALLOCATED
    return assignment.state


class AssignmentLifecycle:
    """Applies the offer, refresh and confirm transitions under one configuration."""

    def __init__(self, config: EngineConfig = DEFAULT_CONFIG, clock: Clock = utcnow) -> None:
        self.config = config
        self._clock = clock

    def _check_offer_size(self, problems: Sequence[Problem]) -> None:
        if not self.config.min_offered_problems <= len(problems) <= self.config.max_offered_problems:
            raise ValidationError(
                f"An offer must hold between {self.config.min_offered_problems} and "
                f"{self.config.max_offered_problems} problems, got {len(problems)}."
            )

    def open(
        self,
        participant: SeatedParticipant,
        problems: Sequence[Problem],
        *,
        existing: ProblemAssignment | None = None,
        assigned_by: str = "system",
    ) -> ProblemAssignment:
        """Create an assignment, or replace the options of an unconfirmed one."""

        if existing is not None and existing.is_confirmed:
            raise NotFoundError(
                f"No open assignment for participant {participant.participant_id}: already confirmed."
            )
        self._check_offer_size(problems)
        if existing is not None:
            return replace(existing, offered_problems=tuple(problems))
        return ProblemAssignment(
            participant_id=participant.participant_id,
            team_id=participant.team_id,
            offered_problems=tuple(problems),
            max_refreshes=self.config.default_max_refreshes,
            assigned_by=assigned_by,
            assigned_at=self._clock(),
        )

    def can_refresh(self, assignment: ProblemAssignment) -> bool:
        return (
            not assignment.is_confirmed
            and assignment.refresh_count < assignment.max_refreshes
            and len(assignment.offered_problems) < self.config.max_offered_problems
        )

    def ensure_refreshable(self, assignment: ProblemAssignment) -> None:
        if assignment.is_confirmed:
            reason = "Cannot refresh after confirmation"
        elif assignment.refresh_count >= assignment.max_refreshes:
            reason = "Refresh limit reached"
        elif len(assignment.offered_problems) >= self.config.max_offered_problems:
            reason = "Maximum number of offered problems reached"
        else:
            return
        raise RefreshDeniedError(
            reason,
            refresh_count=assignment.refresh_count,
            max_refreshes=assignment.max_refreshes,
        )

    def refresh(self, assignment: ProblemAssignment, new_problems: Sequence[Problem]) -> ProblemAssignment:
        """Append newly sampled options, bump the counter and record the previous offer."""

        self.ensure_refreshable(assignment)
        if not new_problems:
            raise RefreshDeniedError(
                "No new problems left to offer",
                refresh_count=assignment.refresh_count,
                max_refreshes=assignment.max_refreshes,
            )
        offered = assignment.offered_problems + tuple(new_problems)
        self._check_offer_size(offered)
        entry = RefreshEntry(timestamp=self._clock(), previous_options=tuple(assignment.offered_keys))
        return replace(
            assignment,
            offered_problems=offered,
            refresh_count=assignment.refresh_count + 1,
            refresh_history=assignment.refresh_history + (entry,),
        )

    def _ensure_not_confirmed(self, assignment: ProblemAssignment) -> None:
        if assignment.is_confirmed:
            raise AlreadyConfirmedError(
                "Problem already confirmed", selected_problem=assignment.selected_problem
            )

    def _lock(self, assignment: ProblemAssignment, selected: Problem) -> ProblemAssignment:
        now = self._clock()
        return replace(
            assignment,
            selected_problem=selected,
            is_confirmed=True,
            selected_at=now,
            confirmed_at=now,
        )

    def confirm_selection(self, assignment: ProblemAssignment, index: int) -> ProblemAssignment:
        self._ensure_not_confirmed(assignment)
        if not 0 <= index < len(assignment.offered_problems):
            raise InvalidSelectionError(
                f"Selection {index} is not one of the {len(assignment.offered_problems)} offered problems."
            )
        return self._lock(assignment, assignment.offered_problems[index])

    def confirm_custom(self, assignment: ProblemAssignment, text: str) -> ProblemAssignment:
        self._ensure_not_confirmed(assignment)
        statement = (text or "").strip()
        if len(statement) < self.config.min_custom_problem_length:
            raise InvalidCustomTextError(
                f"Custom problem must be at least {self.config.min_custom_problem_length} characters."
            )
        return self._lock(assignment, Problem.custom(statement))

    def cascade(
        self,
        confirmed: ProblemAssignment,
        teammates: Iterable[ProblemAssignment],
    ) -> List[ProblemAssignment]:
        """Copy the confirmed choice onto every other open assignment of the same team.

        Teammates that are already confirmed keep their selection.
        """

        if not confirmed.is_confirmed or confirmed.selected_problem is None:
            raise ValidationError("Only a confirmed assignment can be cascaded.")
        updated: List[ProblemAssignment] = []
        for teammate in teammates:
            if teammate.team_id != confirmed.team_id or teammate.participant_id == confirmed.participant_id:
                continue
            if teammate.is_confirmed:
                continue
            updated.append(
                replace(
                    teammate,
                    selected_problem=confirmed.selected_problem,
                    is_confirmed=True,
                    selected_at=confirmed.selected_at,
                    confirmed_at=confirmed.confirmed_at,
                )
            )
        return updated
