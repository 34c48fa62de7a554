# tutorsearch/services/location_suggestion_service.py
"""Location typeahead, independent of the spatial search pipeline."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..repositories.spatial_index_repository import (
    JobIndexRepository,
    SpatialIndexRepository,
    TeacherIndexRepository,
)
from .base import BaseService
from .search.location_suggestions import LocationSuggestion, merge_location_groups


class LocationSuggestionService(BaseService):
    def __init__(
        self,
        db: Session,
        teacher_repository: Optional[SpatialIndexRepository] = None,
        job_repository: Optional[SpatialIndexRepository] = None,
    ):
        super().__init__(db)
        self.teacher_repository = teacher_repository or TeacherIndexRepository(db)
        self.job_repository = job_repository or JobIndexRepository(db)

    @BaseService.measure_operation("suggest_locations")
    def suggest(self, query: Optional[str]) -> List[LocationSuggestion]:
        """
        Suggest (city, state) pairs matching a partial query.

        Queries shorter than the minimum length return no suggestions rather
        than an error. Teacher rows are grouped first so their coordinates win
        when both collections contain the same pair.
        """
        text = (query or "").strip()
        if len(text) < settings.location_min_query_length:
            return []

        scan_limit = settings.location_group_scan_limit
        self.bound_query_time()
        with self.measure_operation_context("teacher_locations"):
            teacher_groups = self.teacher_repository.location_groups(text, scan_limit)
        with self.measure_operation_context("job_locations"):
            job_groups = self.job_repository.location_groups(text, scan_limit)
        return merge_location_groups(
            [teacher_groups, job_groups], settings.location_suggestion_limit
        )
