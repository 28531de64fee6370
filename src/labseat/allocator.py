"""Neighbour-aware distribution of problem statements.

Every entry point follows the same two steps: remove the problems already
held by seat neighbours (``filter_by_exclusion``) and, when nothing is left,
use the unfiltered pool instead (``or_else``).  Allocation is therefore never
blocked by the adjacency rule; it only degrades to ignoring it.
"""

from __future__ import annotations

import random
from typing import Collection, Dict, Iterable, List, Mapping, Sequence, Set

from .catalog import ProblemCatalog, sample
from .models import Problem, ProblemKey, SeatedParticipant
from .topology import get_neighbors, seat_sort_key

AssignedMap = Mapping[str, Iterable[Sequence[int]]]

SAME_DOMAIN_OPTIONS = 2
OTHER_DOMAIN_OPTIONS = 1


def filter_by_exclusion(pool: Sequence[Problem], excluded: Collection[ProblemKey]) -> List[Problem]:
    return [problem for problem in pool if problem.key not in excluded]


def or_else(filtered: Sequence[Problem], fallback: Sequence[Problem]) -> List[Problem]:
    return list(filtered) if filtered else list(fallback)


def _as_keys(pairs: Iterable[Sequence[int]]) -> Set[ProblemKey]:
    return {(int(pair[0]), int(pair[1])) for pair in pairs}


def neighbor_exclusions(
    participant: SeatedParticipant,
    roster: Sequence[SeatedParticipant],
    assigned: AssignedMap,
) -> Set[ProblemKey]:
    """Union of the problem keys held by every seat neighbour of ``participant``."""

    excluded: Set[ProblemKey] = set()
    for neighbor in get_neighbors(participant, roster):
        excluded |= _as_keys(assigned.get(neighbor.participant_id, ()))
    return excluded


class NeighborAwareAllocator:
    """Samples problems for participants so adjacent seats do not share them."""

    def __init__(self, catalog: ProblemCatalog, rng: random.Random | None = None) -> None:
        self.catalog = catalog
        self._rng = rng

    def _pick(self, pool: Sequence[Problem], count: int) -> List[Problem]:
        return sample(pool, count, self._rng)

    def allocate_initial(
        self,
        participant: SeatedParticipant,
        roster: Sequence[SeatedParticipant],
        assigned: AssignedMap,
    ) -> List[Problem]:
        """Seed a participant with a single problem no neighbour holds."""

        everything = self.catalog.all_problems()
        excluded = neighbor_exclusions(participant, roster, assigned)
        pool = or_else(filter_by_exclusion(everything, excluded), everything)
        return self._pick(pool, 1)

    def allocate_by_domain(
        self,
        participant: SeatedParticipant,
        roster: Sequence[SeatedParticipant],
        assigned: AssignedMap,
        domain: str,
    ) -> List[Problem]:
        """Offer two problems from ``domain`` and one from another domain.

        Each half falls back to its own unfiltered subset, so the domain
        preference survives even when the neighbour rule cannot.  If the
        domain itself has fewer than two problems the offer is completed from
        the other domains.
        """

        everything = self.catalog.all_problems()
        same = [problem for problem in everything if problem.domain == domain]
        other = [problem for problem in everything if problem.domain != domain]
        excluded = neighbor_exclusions(participant, roster, assigned)

        same_pool = or_else(filter_by_exclusion(same, excluded), same)
        other_pool = or_else(filter_by_exclusion(other, excluded), other)

        picked_same = self._pick(same_pool, SAME_DOMAIN_OPTIONS)
        wanted_other = OTHER_DOMAIN_OPTIONS + SAME_DOMAIN_OPTIONS - len(picked_same)
        picked_other = self._pick(other_pool, wanted_other)
        if len(picked_other) < wanted_other:
            # filtered other-domain pool ran short; complete from the full subset
            taken = {problem.key for problem in picked_other}
            remainder = [problem for problem in other if problem.key not in taken]
            picked_other += self._pick(remainder, wanted_other - len(picked_other))
        return picked_same + picked_other

    def refresh_one(
        self,
        participant: SeatedParticipant,
        roster: Sequence[SeatedParticipant],
        assigned: AssignedMap,
        current: Iterable[Sequence[int]],
    ) -> List[Problem]:
        """Return one new problem that is neither on offer already nor held nearby.

        When every remaining problem is held by a neighbour, the neighbour rule
        is dropped. Options already on offer are never repeated, so the result
        is empty once the whole catalog has been offered.
        """

        everything = self.catalog.all_problems()
        own = _as_keys(current)
        excluded = neighbor_exclusions(participant, roster, assigned) | own
        fresh = filter_by_exclusion(everything, own)
        pool = or_else(filter_by_exclusion(everything, excluded), fresh)
        return self._pick(pool, 1)

    def allocate_all(self, roster: Sequence[SeatedParticipant]) -> Dict[str, List[Problem]]:
        """Seed every participant in one seat-ordered sweep.

        Each result is fed into the running assignment map before the next
        participant is processed, so later seats avoid what earlier
        neighbours received in this same pass.
        """

        ordered = sorted(roster, key=seat_sort_key)
        allocations: Dict[str, List[Problem]] = {}
        assigned: Dict[str, List[ProblemKey]] = {}
        for participant in ordered:
            offered = self.allocate_initial(participant, ordered, assigned)
            allocations[participant.participant_id] = offered
            assigned[participant.participant_id] = [problem.key for problem in offered]
        return allocations
