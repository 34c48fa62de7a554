# tutorsearch/schemas/search.py
"""
Response models for search endpoints.

Field names are snake_case in Python and serialized in camelCase, which is
what the web client consumes.
"""

from datetime import datetime
import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..models.teacher import (
    ATTRIBUTE_CLASS_LEVEL,
    ATTRIBUTE_LANGUAGE,
    ATTRIBUTE_QUALIFICATION,
    ATTRIBUTE_TEACHING_MODE,
)
from ..repositories.spatial_index_repository import SpatialHit


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _rounded(distance_m: Optional[float]) -> Optional[int]:
    # Halves round up: 2.5 -> 3, not to even
    return None if distance_m is None else math.floor(distance_m + 0.5)


class LocationInfo(CamelModel):
    city: Optional[str] = None
    state: Optional[str] = None
    area: Optional[str] = None
    pincode: Optional[str] = None
    country: Optional[str] = None
    coordinates: List[float] = Field(description="[longitude, latitude]")

    @classmethod
    def from_entity(cls, entity: Any) -> "LocationInfo":
        return cls(
            city=entity.city,
            state=entity.state,
            area=getattr(entity, "area", None),
            pincode=entity.pincode,
            country=entity.country,
            coordinates=[entity.longitude, entity.latitude],
        )


class SubjectInfo(CamelModel):
    name: str
    level: str
    category: str


class RatingInfo(CamelModel):
    average: float
    count: int


class RateRange(CamelModel):
    min: int
    max: int


class TeacherHit(CamelModel):
    """A teacher on a search page."""

    id: str
    name: str
    title: Optional[str] = None
    first_name: str
    last_name: str
    tagline: Optional[str] = None
    profile_photo: Optional[str] = None
    gender: Optional[str] = None
    subjects: List[SubjectInfo] = Field(default_factory=list)
    class_levels: List[str] = Field(default_factory=list)
    teaching_modes: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)
    qualifications: List[str] = Field(default_factory=list)
    experience_years: int
    rating: RatingInfo
    hourly_rate: RateRange
    is_verified: bool
    location: LocationInfo
    distance: Optional[int] = Field(
        default=None, description="Meters from the search origin, rounded; null without an origin"
    )
    created_at: datetime

    @classmethod
    def from_hit(cls, hit: SpatialHit) -> "TeacherHit":
        teacher = hit.entity
        return cls(
            id=teacher.id,
            name=teacher.display_name,
            title=teacher.title,
            first_name=teacher.first_name,
            last_name=teacher.last_name,
            tagline=teacher.tagline,
            profile_photo=teacher.profile_photo_url,
            gender=teacher.gender,
            subjects=[SubjectInfo.model_validate(s) for s in teacher.subjects],
            class_levels=teacher.values_of(ATTRIBUTE_CLASS_LEVEL),
            teaching_modes=teacher.values_of(ATTRIBUTE_TEACHING_MODE),
            languages=teacher.values_of(ATTRIBUTE_LANGUAGE),
            qualifications=teacher.values_of(ATTRIBUTE_QUALIFICATION),
            experience_years=teacher.experience_years,
            rating=RatingInfo(average=teacher.rating_average, count=teacher.rating_count),
            hourly_rate=RateRange(min=teacher.hourly_rate_min, max=teacher.hourly_rate_max),
            is_verified=teacher.is_verified,
            location=LocationInfo.from_entity(teacher),
            distance=_rounded(hit.distance_m),
            created_at=teacher.created_at,
        )


class BudgetInfo(CamelModel):
    type: str
    min: int
    max: int
    currency: str


class JobHit(CamelModel):
    """A job posting on a search page."""

    id: str
    title: str
    description: Optional[str] = None
    subject: str
    class_level: Optional[str] = None
    teaching_mode: Optional[str] = None
    urgency: Optional[str] = None
    budget: BudgetInfo
    required_experience: int
    required_gender: str
    status: str
    expires_at: datetime
    location: LocationInfo
    distance: Optional[int] = None
    created_at: datetime

    @classmethod
    def from_hit(cls, hit: SpatialHit) -> "JobHit":
        job = hit.entity
        return cls(
            id=job.id,
            title=job.title,
            description=job.description,
            subject=job.subject,
            class_level=job.class_level,
            teaching_mode=job.teaching_mode,
            urgency=job.urgency,
            budget=BudgetInfo(
                type=job.budget_type, min=job.budget_min, max=job.budget_max, currency=job.currency
            ),
            required_experience=job.required_experience_years,
            required_gender=job.required_gender,
            status=job.status,
            expires_at=job.expires_at,
            location=LocationInfo.from_entity(job),
            distance=_rounded(hit.distance_m),
            created_at=job.created_at,
        )


class PaginationInfo(CamelModel):
    page: int
    limit: int
    total: int
    pages: int


class DistanceBucketCount(CamelModel):
    label: str
    min: int
    max: int
    count: int


class TeacherSearchData(CamelModel):
    teachers: List[TeacherHit]
    pagination: PaginationInfo
    distance_buckets: List[DistanceBucketCount]
    search_params: Dict[str, Any]


class JobSearchData(CamelModel):
    jobs: List[JobHit]
    pagination: PaginationInfo
    distance_buckets: List[DistanceBucketCount]
    search_params: Dict[str, Any]


class TeacherSearchResponse(CamelModel):
    success: bool = True
    data: TeacherSearchData


class JobSearchResponse(CamelModel):
    success: bool = True
    data: JobSearchData


# Nearby: compact projections grouped by distance band


class NearbyTeacher(CamelModel):
    id: str
    name: str
    profile_photo: Optional[str] = None
    subjects: List[str] = Field(default_factory=list)
    rating: float
    hourly_rate: RateRange
    distance: Optional[int] = None

    @classmethod
    def from_hit(cls, hit: SpatialHit) -> "NearbyTeacher":
        teacher = hit.entity
        return cls(
            id=teacher.id,
            name=teacher.display_name,
            profile_photo=teacher.profile_photo_url,
            subjects=[s.name for s in teacher.subjects],
            rating=teacher.rating_average,
            hourly_rate=RateRange(min=teacher.hourly_rate_min, max=teacher.hourly_rate_max),
            distance=_rounded(hit.distance_m),
        )


class NearbyJob(CamelModel):
    id: str
    title: str
    subject: str
    class_level: Optional[str] = None
    budget: RateRange
    urgency: Optional[str] = None
    distance: Optional[int] = None
    created_at: datetime

    @classmethod
    def from_hit(cls, hit: SpatialHit) -> "NearbyJob":
        job = hit.entity
        return cls(
            id=job.id,
            title=job.title,
            subject=job.subject,
            class_level=job.class_level,
            budget=RateRange(min=job.budget_min, max=job.budget_max),
            urgency=job.urgency,
            distance=_rounded(hit.distance_m),
            created_at=job.created_at,
        )


class NearbyBucket(CamelModel):
    label: str
    min: int
    max: int
    results: List[Dict[str, Any]]


class GeoLocation(CamelModel):
    latitude: float
    longitude: float


class NearbyData(CamelModel):
    buckets: List[NearbyBucket]
    total: int
    location: GeoLocation
    max_distance: int


class NearbyResponse(CamelModel):
    success: bool = True
    data: NearbyData


# Location suggestions


class LocationSuggestionItem(CamelModel):
    city: str
    state: Optional[str] = None
    coordinates: List[float]
    count: int
    label: str


class LocationSuggestionsData(CamelModel):
    suggestions: List[LocationSuggestionItem]


class LocationSuggestionsResponse(CamelModel):
    success: bool = True
    data: LocationSuggestionsData


# Filter vocabulary


class DistanceOption(CamelModel):
    label: str
    value: int


class SearchFiltersData(CamelModel):
    subjects: List[str]
    class_levels: List[str]
    teaching_modes: List[str]
    experience_levels: List[str]
    urgency_levels: List[str]
    distance_buckets: List[DistanceOption]


class SearchFiltersResponse(CamelModel):
    success: bool = True
    data: SearchFiltersData
