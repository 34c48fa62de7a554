# tutorsearch/repositories/spatial_index_repository.py
"""
Spatial index repository: the persistence side of the search pipeline.

Exposes the two-call paging contract explicitly: ``count(predicate, ...)``
and ``page(predicate, sort, skip, limit, ...)`` run as separate queries, so
results may shift between them under concurrent writes.

On PostgreSQL with PostGIS the radius filter and distance run in SQL on the
geography type. Every other dialect narrows candidates with a bounding box
in SQL, then computes haversine distances, applies the radius and sorts in
process. Both paths return the same rows in the same order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from sqlalchemy import and_, case, cast, func, or_, select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.types import UserDefinedType

from ..core.config import settings
from ..core.constants import MAX_SQL_OFFSET
from ..models.job import Job
from ..models.teacher import (
    ATTRIBUTE_CLASS_LEVEL,
    ATTRIBUTE_LANGUAGE,
    ATTRIBUTE_QUALIFICATION,
    ATTRIBUTE_TEACHING_MODE,
    Teacher,
    TeacherAttribute,
    TeacherSubject,
)
from ..services.search.geo import GeoPoint, bounding_box, haversine_m
from ..services.search.predicates import (
    Condition,
    Equals,
    Predicate,
    PredicateSchemaError,
    Range,
    SetMembership,
    SubstringMatch,
)
from ..services.search.sort_strategy import DISTANCE, SortPlan
from .base_repository import BaseRepository


class Geography(UserDefinedType):
    """PostGIS geography, used only as a cast target."""

    cache_ok = True

    def get_col_spec(self, **kw: Any) -> str:
        return "geography"


@dataclass(frozen=True)
class CollectionBinding:
    """A multi-valued field stored as child rows; matches when any child row matches."""

    model: Any
    column: str
    parent_key: str
    kind: Optional[str] = None


# A plain string binds the field to a column of the entity table.
FieldBinding = Union[str, CollectionBinding]


@dataclass(frozen=True)
class SpatialHit:
    entity: Any
    distance_m: Optional[float] = None


@dataclass(frozen=True)
class LocationGroup:
    city: str
    state: Optional[str]
    count: int
    longitude: float
    latitude: float


def escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _contains_pattern(text: str) -> str:
    return f"%{escape_like(text)}%"


class SpatialIndexRepository(BaseRepository[Any]):
    """Predicate-filtered spatial queries over one entity table."""

    bindings: Mapping[str, FieldBinding] = {}
    location_columns: Tuple[str, ...] = ("city", "state")

    @property
    def uses_postgis(self) -> bool:
        return settings.postgis_enabled and self.dialect_name == "postgresql"

    # Predicate compilation

    def _condition_clause(self, column: Any, condition: Condition) -> ColumnElement[bool]:
        if isinstance(condition, Equals):
            return column == condition.value
        if isinstance(condition, Range):
            bounds = []
            if condition.minimum is not None:
                bounds.append(column >= condition.minimum)
            if condition.maximum is not None:
                if condition.max_exclusive:
                    bounds.append(column < condition.maximum)
                else:
                    bounds.append(column <= condition.maximum)
            return and_(*bounds)
        if isinstance(condition, SetMembership):
            return column.in_(condition.values)
        if isinstance(condition, SubstringMatch):
            return column.ilike(_contains_pattern(condition.text), escape="\\")
        raise PredicateSchemaError(f"Unsupported condition {condition!r}")

    def compile_predicate(self, predicate: Predicate) -> List[ColumnElement[bool]]:
        clauses: List[ColumnElement[bool]] = []
        for condition in predicate.conditions:
            binding = self.bindings.get(condition.field)
            if binding is None:
                raise PredicateSchemaError(
                    f"{self.model.__name__} has no binding for field {condition.field!r}"
                )
            if isinstance(binding, CollectionBinding):
                child = binding.model
                criteria = [
                    getattr(child, binding.parent_key) == self.model.id,
                    self._condition_clause(getattr(child, binding.column), condition),
                ]
                if binding.kind is not None:
                    criteria.append(child.kind == binding.kind)
                clauses.append(select(child.id).where(*criteria).exists())
            else:
                clauses.append(self._condition_clause(getattr(self.model, binding), condition))
        return clauses

    def _order_by(self, sort: SortPlan) -> List[Any]:
        order: List[Any] = []
        for term in sort.terms:
            column = getattr(self.model, term.field)
            expr = (
                case(dict(term.ranks), value=column, else_=term.default_rank)
                if term.ranks
                else column
            )
            order.append(expr.desc() if term.descending else expr.asc())
        order.append(self.model.id.asc())
        return order

    # PostGIS expressions

    def _geography(self, longitude: Any, latitude: Any) -> Any:
        return cast(func.ST_SetSRID(func.ST_MakePoint(longitude, latitude), 4326), Geography())

    def _distance(self, origin: GeoPoint) -> Any:
        return func.ST_Distance(
            self._geography(self.model.longitude, self.model.latitude),
            self._geography(origin.longitude, origin.latitude),
        )

    def _within(self, origin: GeoPoint, radius_m: float) -> Any:
        return func.ST_DWithin(
            self._geography(self.model.longitude, self.model.latitude),
            self._geography(origin.longitude, origin.latitude),
            radius_m,
        )

    # Portable path

    def _bounding_box(self, origin: GeoPoint, radius_m: float) -> List[ColumnElement[bool]]:
        lat_min, lat_max, lng_min, lng_max = bounding_box(origin, radius_m)
        box = [self.model.latitude.between(lat_min, lat_max)]
        if lng_min is not None and lng_max is not None:
            box.append(self.model.longitude.between(lng_min, lng_max))
        return box

    def _scan_within(
        self, clauses: Sequence[ColumnElement[bool]], origin: GeoPoint, radius_m: float
    ) -> List[SpatialHit]:
        statement = select(self.model).where(*clauses, *self._bounding_box(origin, radius_m))
        hits = []
        for entity in self._scalars(statement, "scan"):
            distance = haversine_m(origin, entity.latitude, entity.longitude)
            if distance <= radius_m:
                hits.append(SpatialHit(entity, distance))
        return hits

    @staticmethod
    def _sort_hits(hits: List[SpatialHit], sort: SortPlan) -> List[SpatialHit]:
        ordered = sorted(hits, key=lambda h: h.entity.id)
        if sort.by_distance:
            return sorted(ordered, key=lambda h: h.distance_m)
        # Stable sorts applied from the last term to the first.
        for term in reversed(sort.terms):
            ordered.sort(
                key=lambda h, t=term: t.key_of(getattr(h.entity, t.field)),
                reverse=term.descending,
            )
        return ordered

    # Collaborator interface

    def count(
        self,
        predicate: Predicate,
        origin: Optional[GeoPoint] = None,
        radius_m: Optional[float] = None,
    ) -> int:
        """Count all matches of the predicate (and radius, when an origin is given)."""
        clauses = self.compile_predicate(predicate)
        if origin is None:
            statement = select(func.count()).select_from(self.model).where(*clauses)
            return int(self._scalar(statement, "count"))

        radius = float(radius_m or 0)
        if self.uses_postgis:
            statement = (
                select(func.count())
                .select_from(self.model)
                .where(*clauses, self._within(origin, radius))
            )
            return int(self._scalar(statement, "count"))

        statement = select(self.model.latitude, self.model.longitude).where(
            *clauses, *self._bounding_box(origin, radius)
        )
        return sum(
            1
            for latitude, longitude in self._all(statement, "count")
            if haversine_m(origin, latitude, longitude) <= radius
        )

    def page(
        self,
        predicate: Predicate,
        sort: SortPlan,
        skip: int,
        limit: int,
        origin: Optional[GeoPoint] = None,
        radius_m: Optional[float] = None,
    ) -> List[SpatialHit]:
        """Return one ordered slice of matches, annotated with distance when an origin is given."""
        if skip > MAX_SQL_OFFSET:
            # No table holds this many rows
            return []
        clauses = self.compile_predicate(predicate)
        if origin is None:
            statement = (
                select(self.model)
                .where(*clauses)
                .order_by(*self._order_by(sort))
                .offset(skip)
                .limit(limit)
            )
            return [SpatialHit(entity) for entity in self._scalars(statement, "page")]

        radius = float(radius_m or 0)
        if self.uses_postgis:
            distance = self._distance(origin)
            order = [distance.asc(), self.model.id.asc()] if sort.by_distance else self._order_by(sort)
            statement = (
                select(self.model, distance.label("distance_m"))
                .where(*clauses, self._within(origin, radius))
                .order_by(*order)
                .offset(skip)
                .limit(limit)
            )
            return [SpatialHit(row[0], float(row[1])) for row in self._all(statement, "page")]

        hits = self._sort_hits(self._scan_within(clauses, origin, radius), sort)
        return hits[skip : skip + limit]

    def nearest(
        self, predicate: Predicate, origin: GeoPoint, radius_m: float, cap: int
    ) -> List[SpatialHit]:
        """Up to ``cap`` matches within the radius, nearest first."""
        return self.page(
            predicate, SortPlan(key=DISTANCE, by_distance=True), 0, cap, origin, radius_m
        )

    def location_groups(self, text: str, limit: int) -> List[LocationGroup]:
        """
        Group rows whose location columns contain ``text`` by (city, state).

        Groups are ordered by row count descending. Each group's coordinates
        come from its earliest created row (lowest ULID).
        """
        pattern = _contains_pattern(text)
        matches = or_(
            *(getattr(self.model, c).ilike(pattern, escape="\\") for c in self.location_columns)
        )
        row_count = func.count(self.model.id)
        statement = (
            select(
                self.model.city,
                self.model.state,
                row_count.label("row_count"),
                func.min(self.model.id).label("first_id"),
            )
            .where(matches, self.model.city.is_not(None))
            .group_by(self.model.city, self.model.state)
            .order_by(row_count.desc(), self.model.city, self.model.state)
            .limit(limit)
        )
        groups = self._all(statement, "group locations")
        if not groups:
            return []

        first_ids = [row.first_id for row in groups]
        points = {
            row.id: (row.longitude, row.latitude)
            for row in self._all(
                select(self.model.id, self.model.longitude, self.model.latitude).where(
                    self.model.id.in_(first_ids)
                ),
                "locate groups",
            )
        }
        return [
            LocationGroup(
                city=row.city,
                state=row.state,
                count=int(row.row_count),
                longitude=points[row.first_id][0],
                latitude=points[row.first_id][1],
            )
            for row in groups
        ]


class TeacherIndexRepository(SpatialIndexRepository):
    bindings: Mapping[str, FieldBinding] = {
        "is_active": "is_active",
        "is_verified": "is_verified",
        "experience_years": "experience_years",
        "rating_average": "rating_average",
        "hourly_rate_min": "hourly_rate_min",
        "hourly_rate_max": "hourly_rate_max",
        "gender": "gender",
        "subject": CollectionBinding(TeacherSubject, "name", "teacher_id"),
        "class_level": CollectionBinding(
            TeacherAttribute, "value", "teacher_id", ATTRIBUTE_CLASS_LEVEL
        ),
        "teaching_mode": CollectionBinding(
            TeacherAttribute, "value", "teacher_id", ATTRIBUTE_TEACHING_MODE
        ),
        "qualification": CollectionBinding(
            TeacherAttribute, "value", "teacher_id", ATTRIBUTE_QUALIFICATION
        ),
        "language": CollectionBinding(TeacherAttribute, "value", "teacher_id", ATTRIBUTE_LANGUAGE),
    }
    location_columns = ("city", "state", "area")

    def __init__(self, db: Session):
        super().__init__(db, Teacher)


class JobIndexRepository(SpatialIndexRepository):
    bindings: Mapping[str, FieldBinding] = {
        name: name
        for name in (
            "status",
            "expires_at",
            "subject",
            "class_level",
            "teaching_mode",
            "urgency",
            "budget_min",
            "budget_max",
            "required_experience_years",
            "required_gender",
        )
    }

    def __init__(self, db: Session):
        super().__init__(db, Job)
