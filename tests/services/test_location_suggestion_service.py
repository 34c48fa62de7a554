from unittest.mock import MagicMock

import pytest

from tests.factories import make_job, make_teacher
from tutorsearch.repositories.spatial_index_repository import LocationGroup
from tutorsearch.services.location_suggestion_service import LocationSuggestionService


@pytest.fixture
def service(db):
    return LocationSuggestionService(db)


def test_counts_merge_across_teachers_and_jobs(db, service):
    for _ in range(5):
        make_teacher(db, city="Delhi", state="Delhi")
    for _ in range(3):
        make_job(db, city="Delhi", state="Delhi")

    suggestions = service.suggest("Delh")
    assert len(suggestions) == 1
    assert suggestions[0].city == "Delhi"
    assert suggestions[0].count == 8
    assert suggestions[0].label == "Delhi, Delhi"


def test_ranked_by_count(db, service):
    make_teacher(db, city="Pune", state="Maharashtra")
    for _ in range(2):
        make_job(db, city="Mumbai", state="Maharashtra")

    suggestions = service.suggest("maha")
    assert [(s.city, s.count) for s in suggestions] == [("Mumbai", 2), ("Pune", 1)]


def test_hidden_rows_still_counted(db, service):
    make_teacher(db, city="Jaipur", state="Rajasthan", verified=False)
    make_job(db, city="Jaipur", state="Rajasthan", status="closed")

    suggestions = service.suggest("jaipur")
    assert suggestions[0].count == 2


@pytest.mark.parametrize("query", [None, "", " ", "d", "  d  "])
def test_short_queries_return_nothing(db, query):
    teachers, jobs = MagicMock(), MagicMock()
    service = LocationSuggestionService(db, teacher_repository=teachers, job_repository=jobs)

    assert service.suggest(query) == []
    teachers.location_groups.assert_not_called()
    jobs.location_groups.assert_not_called()


def test_result_limited_and_teacher_coordinates_win(db):
    teachers, jobs = MagicMock(), MagicMock()
    teachers.location_groups.return_value = [
        LocationGroup(city="Delhi", state="Delhi", count=1, longitude=77.2, latitude=28.6),
    ]
    jobs.location_groups.return_value = [
        LocationGroup(city="Delhi", state="Delhi", count=4, longitude=1.0, latitude=1.0),
    ] + [
        LocationGroup(city=f"Town {i:02d}", state=None, count=1, longitude=0.0, latitude=0.0)
        for i in range(12)
    ]
    service = LocationSuggestionService(db, teacher_repository=teachers, job_repository=jobs)

    suggestions = service.suggest("  de ")
    teachers.location_groups.assert_called_once_with("de", 50)
    assert len(suggestions) == 8
    assert suggestions[0].count == 5
    assert suggestions[0].coordinates == [77.2, 28.6]
    assert suggestions[1].label == "Town 00"
