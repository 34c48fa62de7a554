# tutorsearch/services/geo_search_service.py
"""
Geo Search Service.

Runs the search pipeline for teachers and jobs:

    request params -> predicate -> sort selection -> page + count
        -> distance buckets -> result

One generic pipeline serves both entity types; the differences live in
``services.search.entities``. Errors from any stage propagate unchanged so
that a failure fails the whole request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import time
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import ValidationException
from ..repositories.spatial_index_repository import (
    JobIndexRepository,
    SpatialHit,
    SpatialIndexRepository,
    TeacherIndexRepository,
)
from .base import BaseService
from .search.distance_buckets import BucketCount, DistanceBucket, count_by_bucket, group_by_bucket
from .search.entities import ENTITY_CONFIGS, JOBS, TEACHERS, EntitySearchConfig
from .search.geo import GeoPoint
from .search.metrics import record_search
from .search.pager import PageRequest, Pagination
from .search.params import JobSearchParams, NearbyParams, SearchParams, TeacherSearchParams
from .search.sort_strategy import SortPlan, select_sort


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SearchResult:
    entity: str
    hits: List[SpatialHit]
    pagination: Pagination
    buckets: List[BucketCount]
    sort: SortPlan
    params: SearchParams

    def search_params(self) -> Dict[str, Any]:
        """Normalized parameters actually applied, for the response echo."""
        echo = self.params.echo()
        echo.update(
            {"sortBy": self.sort.key, "page": self.pagination.page, "limit": self.pagination.limit}
        )
        return echo


@dataclass
class NearbyResult:
    entity: str
    origin: GeoPoint
    radius_m: int
    groups: List[tuple[DistanceBucket, List[SpatialHit]]] = field(default_factory=list)
    # Hits scanned, including any beyond the last band
    total: int = 0


class GeoSearchService(BaseService):
    """Faceted proximity search over teacher profiles and job postings."""

    def __init__(
        self,
        db: Session,
        teacher_repository: Optional[SpatialIndexRepository] = None,
        job_repository: Optional[SpatialIndexRepository] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        super().__init__(db)
        self.teacher_repository = teacher_repository or TeacherIndexRepository(db)
        self.job_repository = job_repository or JobIndexRepository(db)
        self._clock = clock or _utcnow

    def _repository_for(self, config: EntitySearchConfig) -> SpatialIndexRepository:
        return self.teacher_repository if config is TEACHERS else self.job_repository

    @BaseService.measure_operation("search_teachers")
    def search_teachers(self, params: TeacherSearchParams) -> SearchResult:
        return self._search(TEACHERS, params)

    @BaseService.measure_operation("search_jobs")
    def search_jobs(self, params: JobSearchParams) -> SearchResult:
        return self._search(JOBS, params)

    def _search(self, config: EntitySearchConfig, params: SearchParams) -> SearchResult:
        started = time.perf_counter()
        repository = self._repository_for(config)
        predicate = config.build_predicate(params, self._clock())
        origin = params.origin
        sort = select_sort(config.sorts, params.sort_by, origin is not None)
        page_request = PageRequest(page=params.page, limit=params.limit)

        self.logger.debug(
            "Searching %s: conditions=%s sort=%s origin=%s radius=%s",
            config.name,
            predicate.describe(),
            sort.key,
            origin,
            params.radius_m,
        )

        if origin is not None and params.radius_m <= 0:
            # Nothing lies within a non-positive radius.
            hits: List[SpatialHit] = []
            total = 0
        else:
            radius = params.radius_m if origin is not None else None
            self.bound_query_time()
            with self.measure_operation_context(f"{config.name}_page"):
                hits = repository.page(
                    predicate, sort, page_request.skip, page_request.limit, origin, radius
                )
            with self.measure_operation_context(f"{config.name}_count"):
                total = repository.count(predicate, origin, radius)

        buckets = count_by_bucket([hit.distance_m for hit in hits]) if origin is not None else []
        record_search(
            config.name, origin is not None, time.perf_counter() - started, len(hits), total
        )
        self.log_operation(
            f"search_{config.name}", total=total, returned=len(hits), sort=sort.key
        )
        return SearchResult(
            entity=config.name,
            hits=hits,
            pagination=Pagination.for_request(page_request, total),
            buckets=buckets,
            sort=sort,
            params=params,
        )

    @BaseService.measure_operation("nearby")
    def nearby(self, params: NearbyParams) -> NearbyResult:
        """Nearest searchable entities around a required origin, grouped by distance band."""
        if params.origin is None:
            raise ValidationException(
                "Latitude and longitude are required", code="VALIDATION_ERROR"
            )
        config = ENTITY_CONFIGS.get(params.kind)
        if config is None:
            raise ValidationException(
                f"Unknown nearby type {params.kind!r}; expected 'teachers' or 'jobs'",
                code="VALIDATION_ERROR",
                details={"type": params.kind},
            )

        result = NearbyResult(entity=config.name, origin=params.origin, radius_m=params.radius_m)
        if params.radius_m <= 0:
            return result

        self.bound_query_time()
        with self.measure_operation_context(f"{config.name}_nearest"):
            hits = self._repository_for(config).nearest(
                config.searchable(self._clock()),
                params.origin,
                params.radius_m,
                settings.nearby_result_cap,
            )
        result.groups = group_by_bucket(hits, lambda hit: hit.distance_m)
        result.total = len(hits)
        return result
