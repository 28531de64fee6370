"""Custom exception hierarchy for the labseat package."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .models import Problem, UnplacedTeam


class LabSeatError(Exception):
    """Base error for all lab seating and allocation exceptions."""


class ValidationError(LabSeatError):
    """Raised when input data cannot be validated."""


class NotFoundError(LabSeatError):
    """Raised when a participant, team or assignment is missing from the snapshot."""


class RefreshDeniedError(LabSeatError):
    """Raised when a refresh is requested after confirmation or past the budget."""

    def __init__(self, message: str, *, refresh_count: int, max_refreshes: int) -> None:
        super().__init__(message)
        self.refresh_count = refresh_count
        self.max_refreshes = max_refreshes


class InvalidSelectionError(ValidationError):
    """Raised when a confirmation index does not point at an offered problem."""


class InvalidCustomTextError(ValidationError):
    """Raised when a custom problem statement is too short."""


class AlreadyConfirmedError(LabSeatError):
    """Raised when confirming an assignment that is already locked in."""

    def __init__(self, message: str, *, selected_problem: "Problem | None") -> None:
        super().__init__(message)
        self.selected_problem = selected_problem


class PackingInfeasibleError(LabSeatError):
    """Raised when one or more teams could not be placed in any room."""

    def __init__(self, unplaced: Sequence["UnplacedTeam"]) -> None:
        super().__init__(f"{len(unplaced)} team(s) could not be placed")
        self.unplaced = tuple(unplaced)
