"""Tunable limits shared by the packer, allocator and lifecycle."""

from __future__ import annotations

from dataclasses import dataclass

from .exceptions import ValidationError


@dataclass(slots=True, frozen=True)
class EngineConfig:
    """Recognised engine options.

    ``max_team_size`` bounds the team-slot shape used by the packer, the
    offered-problem bounds keep every assignment between one and three
    options, and ``default_max_refreshes`` is the refresh budget given to new
    assignments.
    """

    max_team_size: int = 5
    min_offered_problems: int = 1
    max_offered_problems: int = 3
    default_max_refreshes: int = 2
    min_custom_problem_length: int = 10

    def __post_init__(self) -> None:
        if self.max_team_size < 1:
            raise ValidationError("max_team_size must be at least 1.")
        if not 1 <= self.min_offered_problems <= self.max_offered_problems:
            raise ValidationError("Offered problem bounds must satisfy 1 <= min <= max.")
        if self.default_max_refreshes < 0:
            raise ValidationError("default_max_refreshes cannot be negative.")
        if self.min_custom_problem_length < 1:
            raise ValidationError("min_custom_problem_length must be positive.")


DEFAULT_CONFIG = EngineConfig()
