"""
HTTP tests for the search routes.

Covers the response envelope, camelCase field names, lenient query parsing
and the error surface (400 validation, 500 upstream, 504 timeout).
"""

import time
from unittest.mock import MagicMock

from fastapi.testclient import TestClient
import pytest

from tests.factories import ORIGIN, make_job, make_teacher
from tutorsearch.api.dependencies.services import get_geo_search_service
from tutorsearch.core.config import settings
from tutorsearch.core.exceptions import UpstreamQueryException
from tutorsearch.main import fastapi_app as app
from tutorsearch.services.geo_search_service import GeoSearchService

ORIGIN_QUERY = {"latitude": ORIGIN.latitude, "longitude": ORIGIN.longitude}


@pytest.fixture(params=["/api/v1/search", "/search"])
def base(request):
    return request.param


class TestTeacherSearch:
    def test_radius_search(self, client, db, base):
        make_teacher(db, first_name="Two", distance_m=2000)
        make_teacher(db, first_name="Eight", distance_m=8000, bearing=90)
        make_teacher(db, first_name="Forty", distance_m=40000)

        response = client.get(f"{base}/teachers", params={**ORIGIN_QUERY, "maxDistance": 25000})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True

        data = body["data"]
        assert [t["firstName"] for t in data["teachers"]] == ["Two", "Eight"]
        assert [t["distance"] for t in data["teachers"]] == [2000, 8000]
        buckets = {b["label"]: b["count"] for b in data["distanceBuckets"]}
        assert buckets == {"0-5 km": 1, "5-10 km": 1, "10-15 km": 0, "15-25 km": 0, "25+ km": 0}
        assert data["distanceBuckets"][0] == {"label": "0-5 km", "min": 0, "max": 5000, "count": 1}
        assert data["pagination"] == {"page": 1, "limit": 20, "total": 2, "pages": 1}
        assert data["searchParams"]["sortBy"] == "distance"
        assert data["searchParams"]["maxDistance"] == 25000

    def test_teacher_shape(self, client, db):
        make_teacher(db, first_name="Asha", last_name="Verma", rate_min=500, rate_max=900)

        teacher = client.get("/api/v1/search/teachers").json()["data"]["teachers"][0]
        for key in (
            "id",
            "name",
            "firstName",
            "lastName",
            "profilePhoto",
            "subjects",
            "classLevels",
            "teachingModes",
            "languages",
            "qualifications",
            "experienceYears",
            "rating",
            "hourlyRate",
            "isVerified",
            "location",
            "distance",
            "createdAt",
        ):
            assert key in teacher
        assert teacher["name"] == "Asha Verma"
        assert teacher["distance"] is None
        assert teacher["hourlyRate"] == {"min": 500, "max": 900}
        assert teacher["subjects"][0]["name"] == "Mathematics"
        assert len(teacher["location"]["coordinates"]) == 2

    def test_budget_filter(self, client, db):
        make_teacher(db, first_name="Affordable", rate=800)
        make_teacher(db, first_name="Premium", rate=1200)

        data = client.get(
            "/api/v1/search/teachers", params={"minBudget": 500, "maxBudget": 1000}
        ).json()["data"]
        assert [t["firstName"] for t in data["teachers"]] == ["Affordable"]

    def test_second_page(self, client, db):
        for i in range(15):
            make_teacher(db, distance_m=50 * (i + 1))

        data = client.get("/api/v1/search/teachers", params={"page": 2, "limit": 10}).json()["data"]
        assert len(data["teachers"]) == 5
        assert data["pagination"] == {"page": 2, "limit": 10, "total": 15, "pages": 2}
        assert data["distanceBuckets"] == []

    def test_malformed_numbers_are_ignored(self, client, db):
        make_teacher(db)

        response = client.get(
            "/api/v1/search/teachers",
            params={
                **ORIGIN_QUERY,
                "maxDistance": "far",
                "minRating": "great",
                "minBudget": "NaN",
                "page": "-3",
                "limit": "lots",
            },
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data["teachers"]) == 1
        assert data["pagination"]["page"] == 1
        assert data["searchParams"]["maxDistance"] == settings.teacher_default_radius_m

    def test_bracketed_list_params(self, client, db):
        make_teacher(db, first_name="Hindi", languages=("Hindi",))
        make_teacher(db, first_name="Tamil", languages=("Tamil",))

        response = client.get(
            "/api/v1/search/teachers?languages[]=Hindi&languages[]=Bengali"
        )
        assert [t["firstName"] for t in response.json()["data"]["teachers"]] == ["Hindi"]

    def test_teaching_mode_both_is_unconstrained(self, client, db):
        make_teacher(db, teaching_modes=("online",))
        make_teacher(db, teaching_modes=("offline",))

        both = client.get("/api/v1/search/teachers", params={"teachingMode": "both"}).json()
        online = client.get("/api/v1/search/teachers", params={"teachingMode": "online"}).json()
        assert both["data"]["pagination"]["total"] == 2
        assert online["data"]["pagination"]["total"] == 1

    def test_page_past_any_offset_is_empty(self, client, db):
        make_teacher(db)

        for params in ({}, ORIGIN_QUERY):
            response = client.get(
                "/search/teachers", params={**params, "page": "100000000000000000000"}
            )
            assert response.status_code == 200
            data = response.json()["data"]
            assert data["teachers"] == []
            assert data["pagination"]["total"] == 1
            assert data["pagination"]["page"] == 10**20

    def test_zero_radius_is_default_and_negative_is_empty(self, client, db):
        make_teacher(db, distance_m=1000)

        zero = client.get("/api/v1/search/teachers", params={**ORIGIN_QUERY, "maxDistance": 0})
        negative = client.get(
            "/api/v1/search/teachers", params={**ORIGIN_QUERY, "maxDistance": -100}
        )
        assert zero.json()["data"]["pagination"]["total"] == 1
        assert negative.status_code == 200
        assert negative.json()["data"]["teachers"] == []
        assert negative.json()["data"]["pagination"]["total"] == 0


class TestJobSearch:
    def test_open_jobs_with_camel_case_fields(self, client, db):
        make_job(db, title="Physics help", subject="Physics", urgency="immediate")
        make_job(db, title="Gone", status="filled")

        response = client.get("/search/jobs", params={**ORIGIN_QUERY, "subject": "phys"})
        assert response.status_code == 200
        jobs = response.json()["data"]["jobs"]
        assert [j["title"] for j in jobs] == ["Physics help"]
        job = jobs[0]
        assert job["classLevel"] == "Class 10"
        assert job["budget"] == {"type": "hourly", "min": 300, "max": 600, "currency": "INR"}
        assert job["requiredExperience"] == 0
        assert job["distance"] == 1000
        assert "expiresAt" in job

    def test_urgency_sort(self, client, db):
        make_job(db, title="Later", urgency="within-month")
        make_job(db, title="Now", urgency="immediate")

        data = client.get("/api/v1/search/jobs", params={"sortBy": "urgency"}).json()["data"]
        assert [j["title"] for j in data["jobs"]] == ["Now", "Later"]
        assert data["searchParams"]["sortBy"] == "urgency"


class TestNearby:
    def test_requires_origin(self, client, base):
        response = client.get(f"{base}/nearby")
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "VALIDATION_ERROR"
        assert body["status"] == 400
        assert "Latitude and longitude" in body["message"]

    def test_missing_origin_runs_no_query(self, db):
        repository = MagicMock()
        app.dependency_overrides[get_geo_search_service] = lambda: GeoSearchService(
            db, teacher_repository=repository, job_repository=repository
        )
        try:
            with TestClient(app) as client:
                response = client.get("/api/v1/search/nearby", params={"latitude": 28.6})
        finally:
            app.dependency_overrides.clear()
        assert response.status_code == 400
        assert repository.method_calls == []

    def test_unknown_type(self, client):
        response = client.get("/api/v1/search/nearby", params={**ORIGIN_QUERY, "type": "students"})
        assert response.status_code == 400
        assert response.json()["detail"] == {"type": "students"}

    def test_grouped_teachers(self, client, db):
        make_teacher(db, first_name="Close", last_name="One", distance_m=900)
        make_teacher(db, first_name="Further", last_name="One", distance_m=6500)
        make_teacher(db, first_name="Outside", last_name="One", distance_m=15000)

        response = client.get("/api/v1/search/nearby", params=ORIGIN_QUERY)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total"] == 2
        assert data["maxDistance"] == settings.nearby_default_radius_m
        assert data["location"] == {"latitude": ORIGIN.latitude, "longitude": ORIGIN.longitude}
        assert [b["label"] for b in data["buckets"]] == ["0-5 km", "5-10 km"]
        close = data["buckets"][0]["results"][0]
        assert close["name"] == "Close One"
        assert close["distance"] == 900
        assert "hourlyRate" in close

    def test_grouped_jobs(self, client, db):
        make_job(db, title="Nearby job", distance_m=3000)

        data = client.get(
            "/api/v1/search/nearby", params={**ORIGIN_QUERY, "type": "jobs", "maxDistance": 5000}
        ).json()["data"]
        assert data["maxDistance"] == 5000
        job = data["buckets"][0]["results"][0]
        assert job["title"] == "Nearby job"
        assert "classLevel" in job


class TestLocationSuggestions:
    @pytest.mark.parametrize("path", ["locations", "suggestions"])
    def test_merged_counts(self, client, db, base, path):
        for _ in range(5):
            make_teacher(db, city="Delhi", state="Delhi")
        for _ in range(3):
            make_job(db, city="Delhi", state="Delhi")

        response = client.get(f"{base}/{path}", params={"query": "Delh"})
        assert response.status_code == 200
        suggestions = response.json()["data"]["suggestions"]
        assert len(suggestions) == 1
        assert suggestions[0]["city"] == "Delhi"
        assert suggestions[0]["count"] == 8
        assert suggestions[0]["label"] == "Delhi, Delhi"
        assert len(suggestions[0]["coordinates"]) == 2

    def test_short_query(self, client):
        response = client.get("/api/v1/search/locations", params={"query": "D"})
        assert response.status_code == 200
        assert response.json()["data"]["suggestions"] == []

    def test_missing_query(self, client):
        response = client.get("/api/v1/search/locations")
        assert response.json()["data"]["suggestions"] == []


def test_filters(client):
    response = client.get("/api/v1/search/filters")
    assert response.status_code == 200
    data = response.json()["data"]
    assert "Mathematics" in data["subjects"]
    assert data["teachingModes"] == ["online", "offline", "both"]
    assert data["urgencyLevels"][0] == "immediate"
    assert data["experienceLevels"] == ["beginner", "intermediate", "experienced", "expert"]
    assert data["distanceBuckets"][-1] == {"label": "25+ km", "value": 50000}


class TestErrors:
    def _with_service(self, db, repository):
        app.dependency_overrides[get_geo_search_service] = lambda: GeoSearchService(
            db, teacher_repository=repository, job_repository=repository
        )

    def test_upstream_failure(self, db):
        repository = MagicMock()
        repository.page.side_effect = UpstreamQueryException("database unavailable")
        self._with_service(db, repository)
        try:
            with TestClient(app) as client:
                response = client.get("/api/v1/search/teachers")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "UPSTREAM_QUERY_ERROR"
        assert body["message"] == "Search failed. Please try again later."
        assert "database unavailable" in body["detail"]

    def test_timeout(self, db, monkeypatch):
        monkeypatch.setattr(settings, "search_request_timeout_s", 0.05)
        repository = MagicMock()
        repository.page.side_effect = lambda *args, **kwargs: time.sleep(0.5) or []
        repository.count.return_value = 0
        self._with_service(db, repository)
        try:
            with TestClient(app) as client:
                response = client.get("/api/v1/search/jobs")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 504
        body = response.json()
        assert body["code"] == "SEARCH_TIMEOUT"
        assert body["detail"]["operation"] == "search_jobs"
        # The abandoned worker finished its page query and went no further
        repository.page.assert_called_once()
        repository.count.assert_not_called()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_metrics_exposes_search_histogram(client, db):
    make_teacher(db)
    client.get("/api/v1/search/teachers", params=ORIGIN_QUERY)

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "tutorsearch_search_duration_seconds" in response.text
