# tutorsearch/services/search/location_suggestions.py
"""
Typeahead suggestions over the city/state columns of both collections.

This path does not touch the spatial index. Each collection is grouped by
(city, state) separately; groups with the same pair are merged by summing
their counts. Representative coordinates come from the earliest created row
of the group, with teacher rows taking precedence over job rows on merge.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ...repositories.spatial_index_repository import LocationGroup


@dataclass(frozen=True)
class LocationSuggestion:
    city: str
    state: Optional[str]
    longitude: float
    latitude: float
    count: int

    @property
    def label(self) -> str:
        return f"{self.city}, {self.state}" if self.state else self.city

    @property
    def coordinates(self) -> List[float]:
        return [self.longitude, self.latitude]


def merge_location_groups(
    collections: Sequence[Iterable[LocationGroup]], limit: int
) -> List[LocationSuggestion]:
    """Merge grouped counts across collections; highest count first, ties by label."""
    merged: Dict[Tuple[str, Optional[str]], LocationSuggestion] = {}
    for groups in collections:
        for group in groups:
            key = (group.city, group.state)
            existing = merged.get(key)
            if existing is None:
                merged[key] = LocationSuggestion(
                    city=group.city,
                    state=group.state,
                    longitude=group.longitude,
                    latitude=group.latitude,
                    count=group.count,
                )
            else:
                merged[key] = LocationSuggestion(
                    city=existing.city,
                    state=existing.state,
                    longitude=existing.longitude,
                    latitude=existing.latitude,
                    count=existing.count + group.count,
                )
    ranked = sorted(merged.values(), key=lambda s: (-s.count, s.label))
    return ranked[:limit]
