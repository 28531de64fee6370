"""Static problem-statement catalog and sampling helpers."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Sequence, TypeVar

from .exceptions import NotFoundError, ValidationError
from .models import Problem

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class Domain:
    name: str
    statements: tuple[str, ...]

    def __post_init__(self) -> None:
        name = self.name.strip()
        if not name:
            raise ValidationError("Domain name cannot be empty.")
        statements = tuple(s.strip() for s in self.statements)
        if not statements or not all(statements):
            raise ValidationError(f"Domain {name!r} needs at least one non-empty statement.")
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "statements", statements)


@dataclass(slots=True, frozen=True)
class ProblemCatalog:
    """Immutable lookup of domains and their ordered problem statements."""

    domains: tuple[Domain, ...]
    _problems: tuple[Problem, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        domains = tuple(self.domains)
        if not domains:
            raise ValidationError("A catalog needs at least one domain.")
        names = [domain.name for domain in domains]
        if len(set(names)) != len(names):
            raise ValidationError("Domain names must be unique.")
        object.__setattr__(self, "domains", domains)
        object.__setattr__(
            self,
            "_problems",
            tuple(
                Problem(d_idx, p_idx, domain.name, statement)
                for d_idx, domain in enumerate(domains)
                for p_idx, statement in enumerate(domain.statements)
            ),
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Iterable[str]]) -> "ProblemCatalog":
        return cls(tuple(Domain(name, tuple(statements)) for name, statements in data.items()))

    def __len__(self) -> int:
        return len(self._problems)

    @property
    def domain_names(self) -> List[str]:
        return [domain.name for domain in self.domains]

    def has_domain(self, name: str) -> bool:
        return any(domain.name == name for domain in self.domains)

    def all_problems(self) -> List[Problem]:
        """Return every problem, domain by domain, in declaration order."""

        return list(self._problems)

    def problem(self, domain_index: int, problem_index: int) -> Problem:
        if not 0 <= domain_index < len(self.domains):
            raise NotFoundError(f"Domain {domain_index} does not exist.")
        domain = self.domains[domain_index]
        if not 0 <= problem_index < len(domain.statements):
            raise NotFoundError(f"Problem {problem_index} does not exist in {domain.name!r}.")
        return Problem(domain_index, problem_index, domain.name, domain.statements[problem_index])


def sample(pool: Sequence[T], count: int, rng: random.Random | None = None) -> List[T]:
    """Pick ``count`` distinct items uniformly; returns the whole pool when it is smaller."""

    if count <= 0:
        return []
    chooser = rng or random
    return chooser.sample(list(pool), min(count, len(pool)))
