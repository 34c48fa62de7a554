# tutorsearch/services/search/entities.py
"""
Per-entity search configuration.

The search pipeline is the same for teachers and jobs. What differs is
captured here: the searchable field schema, the conditions that are always
applied, how request filters map onto fields, and the sort vocabulary.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Mapping, Tuple

from tutorsearch.core.constants import (
    EXPERIENCE_BANDS,
    GENDER_ANY,
    JOB_STATUS_ACTIVE,
    TEACHING_MODE_ANY,
)

from .params import JobSearchParams, SearchParams, TeacherSearchParams
from .predicates import FieldKind, Predicate, PredicateBuilder
from .sort_strategy import JOB_SORTS, TEACHER_SORTS, SortTerm

TEACHER_FIELDS: Mapping[str, FieldKind] = {
    "is_active": FieldKind.BOOLEAN,
    "is_verified": FieldKind.BOOLEAN,
    "subject": FieldKind.TEXT_COLLECTION,
    "class_level": FieldKind.TEXT_COLLECTION,
    "teaching_mode": FieldKind.TEXT_COLLECTION,
    "qualification": FieldKind.TEXT_COLLECTION,
    "language": FieldKind.TEXT_COLLECTION,
    "experience_years": FieldKind.NUMBER,
    "rating_average": FieldKind.NUMBER,
    "hourly_rate_min": FieldKind.NUMBER,
    "hourly_rate_max": FieldKind.NUMBER,
    "gender": FieldKind.TEXT,
}

JOB_FIELDS: Mapping[str, FieldKind] = {
    "status": FieldKind.TEXT,
    "expires_at": FieldKind.DATETIME,
    "subject": FieldKind.TEXT,
    "class_level": FieldKind.TEXT,
    "teaching_mode": FieldKind.TEXT,
    "urgency": FieldKind.TEXT,
    "budget_min": FieldKind.NUMBER,
    "budget_max": FieldKind.NUMBER,
    "required_experience_years": FieldKind.NUMBER,
    "required_gender": FieldKind.TEXT,
}


def _teaching_modes(modes: Tuple[str, ...]) -> Tuple[str, ...]:
    # "both" is not a stored mode; asking for it lifts the constraint entirely.
    if TEACHING_MODE_ANY in modes:
        return ()
    return modes


def _gender(gender: str | None) -> str | None:
    if gender is None or gender == GENDER_ANY:
        return None
    return gender


def _apply_common(builder: PredicateBuilder, params: SearchParams) -> None:
    builder.contains("subject", params.subject)
    builder.one_of("class_level", params.class_levels)
    builder.one_of("teaching_mode", _teaching_modes(params.teaching_modes))


def build_teacher_predicate(params: TeacherSearchParams, now: datetime) -> Predicate:
    builder = PredicateBuilder("teachers", TEACHER_FIELDS)
    builder.equals("is_active", True).equals("is_verified", True)
    _apply_common(builder, params)

    band = EXPERIENCE_BANDS.get(params.experience or "")
    if band is not None:
        builder.range("experience_years", band[0], band[1], max_exclusive=True)

    builder.range("rating_average", minimum=params.min_rating)
    # A teacher's rate range overlaps the requested budget.
    builder.range("hourly_rate_max", minimum=params.min_budget)
    builder.range("hourly_rate_min", maximum=params.max_budget)
    builder.equals("gender", _gender(params.gender))
    builder.one_of("qualification", params.qualifications)
    builder.one_of("language", params.languages)
    return builder.build()


def _job_experience(builder: PredicateBuilder, experience: str | None) -> None:
    if not experience:
        return
    band = EXPERIENCE_BANDS.get(experience)
    if band is not None:
        builder.range("required_experience_years", band[0], band[1], max_exclusive=True)
        return
    # A number means "jobs I qualify for with this many years".
    try:
        years = float(experience)
    except ValueError:
        return
    if years > 0:
        builder.range("required_experience_years", maximum=years)


def build_job_predicate(params: JobSearchParams, now: datetime) -> Predicate:
    builder = PredicateBuilder("jobs", JOB_FIELDS)
    builder.equals("status", JOB_STATUS_ACTIVE).range("expires_at", minimum=now)
    _apply_common(builder, params)
    builder.one_of("urgency", params.urgency)
    builder.range("budget_max", params.min_budget, params.max_budget)
    _job_experience(builder, params.experience)
    builder.equals("required_gender", _gender(params.gender))
    return builder.build()


@dataclass(frozen=True)
class EntitySearchConfig:
    name: str
    sorts: Mapping[str, Tuple[SortTerm, ...]]
    build_predicate: Callable[..., Predicate]
    empty_params: Callable[[], SearchParams]

    def searchable(self, now: datetime) -> Predicate:
        """Only the always-on conditions (active, verified, unexpired)."""
        return self.build_predicate(self.empty_params(), now)


TEACHERS = EntitySearchConfig(
    name="teachers",
    sorts=TEACHER_SORTS,
    build_predicate=build_teacher_predicate,
    empty_params=TeacherSearchParams,
)

JOBS = EntitySearchConfig(
    name="jobs",
    sorts=JOB_SORTS,
    build_predicate=build_job_predicate,
    empty_params=JobSearchParams,
)

ENTITY_CONFIGS: Mapping[str, EntitySearchConfig] = {TEACHERS.name: TEACHERS, JOBS.name: JOBS}
