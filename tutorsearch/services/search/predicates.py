# tutorsearch/services/search/predicates.py
"""
Typed search predicates.

A predicate is an explicit conjunction of field conditions. Each condition
names a field from a fixed per-entity schema; the builder rejects unknown
fields and condition kinds that do not fit the field (e.g. a substring match
on a number). Empty inputs are dropped rather than turned into
match-nothing conditions.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union


class FieldKind(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    # Multi-valued text field; a condition matches when any element matches
    TEXT_COLLECTION = "text_collection"


class PredicateSchemaError(ValueError):
    """A condition does not fit the entity's field schema."""


@dataclass(frozen=True)
class Equals:
    field: str
    value: Any


@dataclass(frozen=True)
class Range:
    """Inclusive bounds; max_exclusive makes the upper bound strict (used for named bands)."""

    field: str
    minimum: Optional[Union[float, datetime]] = None
    maximum: Optional[Union[float, datetime]] = None
    max_exclusive: bool = False


@dataclass(frozen=True)
class SetMembership:
    field: str
    values: Tuple[str, ...]


@dataclass(frozen=True)
class SubstringMatch:
    """Case-insensitive substring match."""

    field: str
    text: str


Condition = Union[Equals, Range, SetMembership, SubstringMatch]

_ALLOWED_KINDS: Dict[type, Tuple[FieldKind, ...]] = {
    Equals: (FieldKind.TEXT, FieldKind.NUMBER, FieldKind.BOOLEAN, FieldKind.TEXT_COLLECTION),
    Range: (FieldKind.NUMBER, FieldKind.DATETIME),
    SetMembership: (FieldKind.TEXT, FieldKind.TEXT_COLLECTION),
    SubstringMatch: (FieldKind.TEXT, FieldKind.TEXT_COLLECTION),
}


@dataclass(frozen=True)
class Predicate:
    entity: str
    conditions: Tuple[Condition, ...] = ()

    def fields(self) -> List[str]:
        return [c.field for c in self.conditions]

    def describe(self) -> List[Dict[str, Any]]:
        """Loggable form of the conditions."""
        out: List[Dict[str, Any]] = []
        for condition in self.conditions:
            entry: Dict[str, Any] = {"kind": type(condition).__name__, **condition.__dict__}
            out.append(entry)
        return out


class PredicateBuilder:
    """Accumulates validated conditions for one entity schema."""

    def __init__(self, entity: str, schema: Mapping[str, FieldKind]) -> None:
        self.entity = entity
        self.schema = schema
        self._conditions: List[Condition] = []

    def _add(self, condition: Condition) -> "PredicateBuilder":
        kind = self.schema.get(condition.field)
        if kind is None:
            raise PredicateSchemaError(f"{self.entity} has no searchable field {condition.field!r}")
        if kind not in _ALLOWED_KINDS[type(condition)]:
            raise PredicateSchemaError(
                f"{type(condition).__name__} cannot be applied to {kind.value} field "
                f"{self.entity}.{condition.field}"
            )
        self._conditions.append(condition)
        return self

    def equals(self, field: str, value: Any) -> "PredicateBuilder":
        if value is None or value == "":
            return self
        return self._add(Equals(field, value))

    def range(
        self,
        field: str,
        minimum: Optional[Union[float, datetime]] = None,
        maximum: Optional[Union[float, datetime]] = None,
        *,
        max_exclusive: bool = False,
    ) -> "PredicateBuilder":
        if minimum is None and maximum is None:
            return self
        return self._add(Range(field, minimum, maximum, max_exclusive))

    def one_of(self, field: str, values: Iterable[str]) -> "PredicateBuilder":
        cleaned = tuple(dict.fromkeys(v for v in values if v))
        if not cleaned:
            return self
        return self._add(SetMembership(field, cleaned))

    def contains(self, field: str, text: Optional[str]) -> "PredicateBuilder":
        if text is None or not text.strip():
            return self
        return self._add(SubstringMatch(field, text.strip()))

    def build(self) -> Predicate:
        return Predicate(entity=self.entity, conditions=tuple(self._conditions))
