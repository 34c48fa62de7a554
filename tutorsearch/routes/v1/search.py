# tutorsearch/routes/v1/search.py
"""
Search routes - API v1

Mounted at /api/v1/search and, for existing clients, at /search.

Endpoints:
    GET /teachers     → Faceted proximity search over teachers
    GET /jobs         → Faceted proximity search over job postings
    GET /nearby       → Nearest teachers or jobs grouped by distance band
    GET /locations    → City/state typeahead
    GET /suggestions  → Alias of /locations
    GET /filters      → Static filter vocabulary for the search UI

Filters are read from the raw query string rather than typed Query params:
malformed values are treated as absent instead of failing validation.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

from fastapi import APIRouter, Depends, Query, Request

from ...api.dependencies.services import (
    get_geo_search_service,
    get_location_suggestion_service,
)
from ...core.config import settings
from ...core.constants import (
    CLASS_LEVELS,
    DISTANCE_FILTER_OPTIONS,
    EXPERIENCE_BANDS,
    SUBJECTS,
    TEACHING_MODES,
    URGENCY_PRIORITY,
)
from ...core.exceptions import SearchTimeoutException
from ...schemas.search import (
    DistanceBucketCount,
    DistanceOption,
    GeoLocation,
    JobHit,
    JobSearchData,
    JobSearchResponse,
    LocationSuggestionItem,
    LocationSuggestionsData,
    LocationSuggestionsResponse,
    NearbyBucket,
    NearbyData,
    NearbyJob,
    NearbyResponse,
    NearbyTeacher,
    PaginationInfo,
    SearchFiltersData,
    SearchFiltersResponse,
    TeacherHit,
    TeacherSearchData,
    TeacherSearchResponse,
)
from ...services.base import BaseService
from ...services.geo_search_service import GeoSearchService, SearchResult
from ...services.location_suggestion_service import LocationSuggestionService
from ...services.search.metrics import record_timeout
from ...services.search.params import (
    parse_job_params,
    parse_nearby_params,
    parse_teacher_params,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# V1 router - no prefix here, added when mounting in main.py
router = APIRouter(tags=["search-v1"])


def _raw_filters(request: Request) -> Dict[str, List[str]]:
    raw: Dict[str, List[str]] = {}
    for key, value in request.query_params.multi_items():
        raw.setdefault(key, []).append(value)
    return raw


async def _run_with_timeout(operation: str, func: Callable[[], T], service: BaseService) -> T:
    """
    Run blocking search work off the event loop under the request time budget.

    On timeout the service is cancelled so it issues no further queries, and
    the worker is awaited before the 504 goes out: the request session is
    closed on teardown and must not be in use by the worker at that point.
    """
    timeout_s = settings.search_request_timeout_s
    worker = asyncio.ensure_future(asyncio.to_thread(func))
    try:
        return await asyncio.wait_for(asyncio.shield(worker), timeout=timeout_s)
    except asyncio.TimeoutError:
        service.cancel()
        record_timeout(operation)
        logger.warning("Search operation %s exceeded %.2fs", operation, timeout_s)
        await asyncio.wait({worker})
        if not worker.cancelled() and worker.exception() is not None:
            logger.info("Abandoned %s worker stopped: %r", operation, worker.exception())
        raise SearchTimeoutException(operation, timeout_s)


def _buckets(result: SearchResult) -> List[DistanceBucketCount]:
    return [DistanceBucketCount(**bucket.to_dict()) for bucket in result.buckets]


def _pagination(result: SearchResult) -> PaginationInfo:
    p = result.pagination
    return PaginationInfo(page=p.page, limit=p.limit, total=p.total, pages=p.pages)


@router.get("/teachers", response_model=TeacherSearchResponse)
async def search_teachers(
    request: Request,
    service: GeoSearchService = Depends(get_geo_search_service),
) -> TeacherSearchResponse:
    """
    Search active, verified teachers.

    Query params: subject, classLevel, teachingMode, experience, minRating,
    maxDistance, latitude, longitude, minBudget, maxBudget, gender,
    qualifications[], languages[], page, limit, sortBy.
    """
    params = parse_teacher_params(_raw_filters(request))
    result = await _run_with_timeout(
        "search_teachers", lambda: service.search_teachers(params), service
    )
    return TeacherSearchResponse(
        data=TeacherSearchData(
            teachers=[TeacherHit.from_hit(hit) for hit in result.hits],
            pagination=_pagination(result),
            distance_buckets=_buckets(result),
            search_params=result.search_params(),
        )
    )


@router.get("/jobs", response_model=JobSearchResponse)
async def search_jobs(
    request: Request,
    service: GeoSearchService = Depends(get_geo_search_service),
) -> JobSearchResponse:
    """
    Search active, unexpired job postings.

    Query params: subject, classLevel, teachingMode, urgency, maxDistance,
    latitude, longitude, minBudget, maxBudget, experience, gender, page,
    limit, sortBy.
    """
    params = parse_job_params(_raw_filters(request))
    result = await _run_with_timeout(
        "search_jobs", lambda: service.search_jobs(params), service
    )
    return JobSearchResponse(
        data=JobSearchData(
            jobs=[JobHit.from_hit(hit) for hit in result.hits],
            pagination=_pagination(result),
            distance_buckets=_buckets(result),
            search_params=result.search_params(),
        )
    )


@router.get("/nearby", response_model=NearbyResponse)
async def nearby(
    request: Request,
    service: GeoSearchService = Depends(get_geo_search_service),
) -> NearbyResponse:
    """Nearest teachers (default) or jobs around latitude/longitude, grouped by distance band."""
    params = parse_nearby_params(_raw_filters(request))
    result = await _run_with_timeout("nearby", lambda: service.nearby(params), service)

    project: Callable[[Any], Any] = (
        NearbyTeacher.from_hit if result.entity == "teachers" else NearbyJob.from_hit
    )
    buckets = [
        NearbyBucket(
            label=bucket.label,
            min=bucket.min_m,
            max=bucket.max_m,
            results=[project(hit).model_dump(by_alias=True, mode="json") for hit in members],
        )
        for bucket, members in result.groups
    ]
    return NearbyResponse(
        data=NearbyData(
            buckets=buckets,
            total=result.total,
            location=GeoLocation(
                latitude=result.origin.latitude, longitude=result.origin.longitude
            ),
            max_distance=result.radius_m,
        )
    )


async def _location_suggestions(
    query: Optional[str], service: LocationSuggestionService
) -> LocationSuggestionsResponse:
    suggestions = await _run_with_timeout(
        "suggest_locations", lambda: service.suggest(query), service
    )
    return LocationSuggestionsResponse(
        data=LocationSuggestionsData(
            suggestions=[
                LocationSuggestionItem(
                    city=s.city,
                    state=s.state,
                    coordinates=s.coordinates,
                    count=s.count,
                    label=s.label,
                )
                for s in suggestions
            ]
        )
    )


@router.get("/locations", response_model=LocationSuggestionsResponse)
async def location_suggestions(
    query: Optional[str] = Query(None, description="Partial city, state or area name"),
    service: LocationSuggestionService = Depends(get_location_suggestion_service),
) -> LocationSuggestionsResponse:
    """City/state suggestions ranked by how many teachers and jobs they hold."""
    return await _location_suggestions(query, service)


@router.get("/suggestions", response_model=LocationSuggestionsResponse)
async def location_suggestions_alias(
    query: Optional[str] = Query(None, description="Partial city, state or area name"),
    service: LocationSuggestionService = Depends(get_location_suggestion_service),
) -> LocationSuggestionsResponse:
    return await _location_suggestions(query, service)


@router.get("/filters", response_model=SearchFiltersResponse)
def search_filters() -> SearchFiltersResponse:
    """Filter vocabulary for building the search UI."""
    return SearchFiltersResponse(
        data=SearchFiltersData(
            subjects=list(SUBJECTS),
            class_levels=list(CLASS_LEVELS),
            teaching_modes=list(TEACHING_MODES),
            experience_levels=list(EXPERIENCE_BANDS),
            urgency_levels=list(URGENCY_PRIORITY),
            distance_buckets=[DistanceOption(**option) for option in DISTANCE_FILTER_OPTIONS],
        )
    )
