# tutorsearch/services/search/params.py
"""
Lenient parsing of raw search filters.

Raw filters arrive as a map of query-string values and are attacker
controlled. Parsing never fails: anything unusable for a filter is treated
as if the filter were absent, and a numeric filter of 0 means "no
constraint".
"""
from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any, Iterable, Mapping, Optional, Tuple

from tutorsearch.core.config import settings

from .geo import GeoPoint

RawFilters = Mapping[str, Any]


def _first(raw: RawFilters, *keys: str) -> Optional[str]:
    for key in keys:
        value = raw.get(key)
        if isinstance(value, (list, tuple)):
            value = value[0] if value else None
        if value is not None:
            return str(value)
    return None


def parse_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def parse_number(value: Optional[str]) -> Optional[float]:
    """Parse a numeric filter; absent, malformed and zero values all mean no constraint."""
    if value is None:
        return None
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    if not math.isfinite(number) or number == 0:
        return None
    return number


def parse_coordinate(value: Optional[str], bound: float) -> Optional[float]:
    """Unlike other numbers, 0 is a real coordinate."""
    if value is None or not str(value).strip():
        return None
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    if not math.isfinite(number) or abs(number) > bound:
        return None
    return number


def parse_origin(raw: RawFilters) -> Optional[GeoPoint]:
    latitude = parse_coordinate(_first(raw, "latitude", "lat"), 90.0)
    longitude = parse_coordinate(_first(raw, "longitude", "lng"), 180.0)
    if latitude is None or longitude is None:
        return None
    return GeoPoint(longitude=longitude, latitude=latitude)


def parse_list(raw: RawFilters, *keys: str) -> Tuple[str, ...]:
    """Collect values from repeated, bracketed (``name[]``) and comma-separated params."""
    collected: list[str] = []
    for key in keys:
        value = raw.get(key)
        if value is None:
            continue
        items: Iterable[Any] = value if isinstance(value, (list, tuple)) else [value]
        for item in items:
            for part in str(item).split(","):
                part = part.strip()
                if part:
                    collected.append(part)
    return tuple(dict.fromkeys(collected))


def parse_page(value: Optional[str]) -> int:
    number = parse_number(value)
    if number is None or number < 1:
        return 1
    return int(number)


def parse_limit(value: Optional[str], default: int, maximum: int) -> int:
    number = parse_number(value)
    if number is None or number < 1:
        return default
    return min(int(number), maximum)


def resolve_radius(value: Optional[str], default: int, maximum: int) -> int:
    """
    Resolve the search radius in meters.

    Absent, zero or malformed values use the default; values above the
    maximum are clamped. Negative values are kept so the executor can answer
    them with an empty result.
    """
    number = parse_number(value)
    if number is None:
        return default
    return min(int(round(number)), maximum)


@dataclass(frozen=True)
class SearchParams:
    page: int = 1
    limit: int = 20
    sort_by: Optional[str] = None
    origin: Optional[GeoPoint] = None
    radius_m: int = 25000
    subject: Optional[str] = None
    class_levels: Tuple[str, ...] = ()
    teaching_modes: Tuple[str, ...] = ()
    experience: Optional[str] = None
    min_budget: Optional[float] = None
    max_budget: Optional[float] = None
    gender: Optional[str] = None

    def echo(self) -> dict[str, Any]:
        return self._common_echo()

    def _common_echo(self) -> dict[str, Any]:
        return {
            "subject": self.subject,
            "classLevel": list(self.class_levels) or None,
            "teachingMode": list(self.teaching_modes) or None,
            "experience": self.experience,
            "minBudget": self.min_budget,
            "maxBudget": self.max_budget,
            "gender": self.gender,
            "maxDistance": self.radius_m,
            "location": (
                {"latitude": self.origin.latitude, "longitude": self.origin.longitude}
                if self.origin is not None
                else None
            ),
        }


@dataclass(frozen=True)
class TeacherSearchParams(SearchParams):
    min_rating: Optional[float] = None
    qualifications: Tuple[str, ...] = ()
    languages: Tuple[str, ...] = ()

    def echo(self) -> dict[str, Any]:
        return {
            **self._common_echo(),
            "minRating": self.min_rating,
            "qualifications": list(self.qualifications) or None,
            "languages": list(self.languages) or None,
        }


@dataclass(frozen=True)
class JobSearchParams(SearchParams):
    urgency: Tuple[str, ...] = ()

    def echo(self) -> dict[str, Any]:
        return {**self._common_echo(), "urgency": list(self.urgency) or None}


@dataclass(frozen=True)
class NearbyParams:
    kind: str
    origin: Optional[GeoPoint]
    radius_m: int


def _lower(value: Optional[str]) -> Optional[str]:
    return value.lower() if value else None


def _common_kwargs(raw: RawFilters, default_radius: int) -> dict[str, Any]:
    return {
        "page": parse_page(_first(raw, "page")),
        "limit": parse_limit(
            _first(raw, "limit"), settings.search_default_limit, settings.search_max_limit
        ),
        "sort_by": _lower(parse_text(_first(raw, "sortBy"))),
        "origin": parse_origin(raw),
        "radius_m": resolve_radius(
            _first(raw, "maxDistance"), default_radius, settings.search_max_radius_m
        ),
        "subject": parse_text(_first(raw, "subject")),
        "class_levels": parse_list(raw, "classLevel", "classLevel[]"),
        "teaching_modes": tuple(
            mode.lower() for mode in parse_list(raw, "teachingMode", "teachingMode[]")
        ),
        "experience": _lower(parse_text(_first(raw, "experience"))),
        "min_budget": parse_number(_first(raw, "minBudget")),
        "max_budget": parse_number(_first(raw, "maxBudget")),
        "gender": _lower(parse_text(_first(raw, "gender"))),
    }


def parse_teacher_params(raw: RawFilters) -> TeacherSearchParams:
    return TeacherSearchParams(
        **_common_kwargs(raw, settings.teacher_default_radius_m),
        min_rating=parse_number(_first(raw, "minRating")),
        qualifications=parse_list(raw, "qualifications", "qualifications[]"),
        languages=parse_list(raw, "languages", "languages[]"),
    )


def parse_job_params(raw: RawFilters) -> JobSearchParams:
    return JobSearchParams(
        **_common_kwargs(raw, settings.job_default_radius_m),
        urgency=tuple(u.lower() for u in parse_list(raw, "urgency", "urgency[]")),
    )


def parse_nearby_params(raw: RawFilters) -> NearbyParams:
    kind = (parse_text(_first(raw, "type")) or "teachers").lower()
    return NearbyParams(
        kind=kind,
        origin=parse_origin(raw),
        radius_m=resolve_radius(
            _first(raw, "maxDistance"),
            settings.nearby_default_radius_m,
            settings.search_max_radius_m,
        ),
    )
