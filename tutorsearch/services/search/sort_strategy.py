# tutorsearch/services/search/sort_strategy.py
"""
Sort strategies.

Each entity has its own sort vocabulary. An unknown key (including a key
that only exists for the other entity) falls back to the default ordering:
nearest first when the request has an origin, newest first otherwise. An
explicit key always replaces distance ordering; distance is still used to
filter and annotate results.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from tutorsearch.core.constants import URGENCY_DEFAULT_PRIORITY, URGENCY_PRIORITY

DISTANCE = "distance"
LATEST = "latest"


@dataclass(frozen=True)
class SortTerm:
    """One ordering term. ``ranks`` maps categorical values to an ascending priority."""

    field: str
    descending: bool = False
    ranks: Tuple[Tuple[str, int], ...] = ()
    default_rank: int = URGENCY_DEFAULT_PRIORITY

    def rank_of(self, value: Any) -> int:
        return dict(self.ranks).get(value, self.default_rank)

    def key_of(self, value: Any) -> Any:
        return self.rank_of(value) if self.ranks else value


@dataclass(frozen=True)
class SortPlan:
    key: str
    terms: Tuple[SortTerm, ...] = ()
    by_distance: bool = False


LATEST_TERMS: Tuple[SortTerm, ...] = (SortTerm("created_at", descending=True),)

TEACHER_SORTS: Mapping[str, Tuple[SortTerm, ...]] = {
    "rating": (
        SortTerm("rating_average", descending=True),
        SortTerm("rating_count", descending=True),
    ),
    "experience": (SortTerm("experience_years", descending=True),),
    "price-low": (SortTerm("hourly_rate_min"),),
    "price-high": (SortTerm("hourly_rate_max", descending=True),),
    LATEST: LATEST_TERMS,
}

JOB_SORTS: Mapping[str, Tuple[SortTerm, ...]] = {
    "budget-high": (SortTerm("budget_max", descending=True),),
    "budget-low": (SortTerm("budget_min"),),
    "urgency": (
        SortTerm("urgency", ranks=tuple(URGENCY_PRIORITY.items())),
        SortTerm("created_at", descending=True),
    ),
    LATEST: LATEST_TERMS,
}


def select_sort(
    vocabulary: Mapping[str, Tuple[SortTerm, ...]],
    sort_by: Optional[str],
    has_origin: bool,
) -> SortPlan:
    key = (sort_by or "").strip().lower()
    terms = vocabulary.get(key) if key and key != DISTANCE else None
    if terms is not None:
        return SortPlan(key=key, terms=terms)
    if has_origin:
        return SortPlan(key=DISTANCE, by_distance=True)
    return SortPlan(key=LATEST, terms=LATEST_TERMS)
