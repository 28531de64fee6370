from __future__ import annotations

import random

import pytest

from labseat import DEFAULT_CATALOG, Domain, NotFoundError, Problem, ProblemCatalog, ValidationError, sample


@pytest.fixture
def catalog() -> ProblemCatalog:
    return ProblemCatalog.from_mapping({"Web": ["Portal", "Chat"], "Data": ["Dashboard"]})


def test_all_problems_is_flat_and_stable(catalog: ProblemCatalog) -> None:
    problems = catalog.all_problems()
    assert problems == [
        Problem(0, 0, "Web", "Portal"),
        Problem(0, 1, "Web", "Chat"),
        Problem(1, 0, "Data", "Dashboard"),
    ]
    assert catalog.all_problems() == problems
    assert len(catalog) == 3


def test_lookup_by_indices(catalog: ProblemCatalog) -> None:
    assert catalog.problem(0, 1).problem == "Chat"
    with pytest.raises(NotFoundError):
        catalog.problem(2, 0)
    with pytest.raises(NotFoundError):
        catalog.problem(1, 1)


def test_domain_helpers(catalog: ProblemCatalog) -> None:
    assert catalog.domain_names == ["Web", "Data"]
    assert catalog.has_domain("Data")
    assert not catalog.has_domain("Space")


def test_catalog_validation() -> None:
    with pytest.raises(ValidationError):
        ProblemCatalog(())
    with pytest.raises(ValidationError):
        ProblemCatalog((Domain("Web", ("a",)), Domain("Web", ("b",))))
    with pytest.raises(ValidationError):
        Domain("Empty", ())


def test_sample_is_distinct_and_saturates() -> None:
    pool = list(range(10))
    picked = sample(pool, 4, random.Random(3))
    assert len(picked) == len(set(picked)) == 4
    assert set(picked) <= set(pool)
    assert sorted(sample(pool, 25)) == pool
    assert sample(pool, 0) == []


def test_default_catalog_contents() -> None:
    assert len(DEFAULT_CATALOG.domains) == 12
    assert len(DEFAULT_CATALOG) == 59
    assert DEFAULT_CATALOG.problem(11, 0).domain == "Open Innovation / Student Choice"
