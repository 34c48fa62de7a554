"""Response projections."""

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from tutorsearch.repositories.spatial_index_repository import SpatialHit
from tutorsearch.schemas.search import NearbyJob


def job_hit(distance_m):
    job = SimpleNamespace(
        id="01H" + "J" * 23,
        title="Physics tutor needed",
        subject="Physics",
        class_level="class-12",
        budget_min=500,
        budget_max=900,
        urgency="immediate",
        created_at=datetime(2026, 1, 15, tzinfo=timezone.utc),
    )
    return SpatialHit(job, distance_m)


@pytest.mark.parametrize(
    "distance_m, expected",
    [(2.5, 3), (3.5, 4), (1500.5, 1501), (0.49, 0), (1999.4, 1999), (None, None)],
)
def test_distance_rounds_half_up(distance_m, expected):
    payload = NearbyJob.from_hit(job_hit(distance_m)).model_dump(by_alias=True)
    assert payload["distance"] == expected
    assert payload["budget"] == {"min": 500, "max": 900}
