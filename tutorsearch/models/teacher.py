# tutorsearch/models/teacher.py
"""
Teacher profile model as seen by the search engine.

Profile CRUD, document upload and rating recomputation are owned by the
profile service; this module only maps the columns the search pipeline
filters, sorts and projects on.

Attributes:
    subjects: TeacherSubject rows (name + level + category)
    attributes: TeacherAttribute rows for the multi-valued facets
        (class levels, teaching modes, languages, qualifications)

Business Rules:
    - A teacher is searchable only when both is_active and is_verified are true
    - latitude/longitude are required; rows without a point are never indexed
"""

from datetime import datetime, timezone
from typing import List

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
import ulid

from ..database import Base

ATTRIBUTE_CLASS_LEVEL = "class_level"
ATTRIBUTE_TEACHING_MODE = "teaching_mode"
ATTRIBUTE_LANGUAGE = "language"
ATTRIBUTE_QUALIFICATION = "qualification"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Teacher(Base):
    __tablename__ = "teachers"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    user_id = Column(String(26), nullable=True, unique=True)

    title = Column(String(10), nullable=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False, default="")
    tagline = Column(String(100), nullable=True)
    profile_photo_url = Column(Text, nullable=True)
    gender = Column(String(20), nullable=True)

    experience_years = Column(Integer, nullable=False, default=0)
    rating_average = Column(Float, nullable=False, default=0.0)
    rating_count = Column(Integer, nullable=False, default=0)
    hourly_rate_min = Column(Integer, nullable=False, default=0)
    hourly_rate_max = Column(Integer, nullable=False, default=0)

    is_active = Column(Boolean, nullable=False, default=True)
    is_verified = Column(Boolean, nullable=False, default=False)

    # Location (denormalized address + point)
    longitude = Column(Float, nullable=False)
    latitude = Column(Float, nullable=False)
    address = Column(Text, nullable=True)
    area = Column(String(120), nullable=True)
    city = Column(String(120), nullable=True)
    state = Column(String(120), nullable=True)
    pincode = Column(String(20), nullable=True)
    country = Column(String(80), nullable=False, default="India")

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    subjects = relationship(
        "TeacherSubject",
        back_populates="teacher",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    attributes = relationship(
        "TeacherAttribute",
        back_populates="teacher",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("longitude >= -180 AND longitude <= 180", name="ck_teachers_longitude"),
        CheckConstraint("latitude >= -90 AND latitude <= 90", name="ck_teachers_latitude"),
        CheckConstraint("experience_years >= 0", name="ck_teachers_experience_non_negative"),
        CheckConstraint("hourly_rate_min <= hourly_rate_max", name="ck_teachers_rate_range"),
        Index("idx_teachers_searchable", "is_active", "is_verified"),
        Index("idx_teachers_lat_lng", "latitude", "longitude"),
        Index("idx_teachers_rating", "rating_average"),
        Index("idx_teachers_experience", "experience_years"),
        Index("idx_teachers_rate_min", "hourly_rate_min"),
        Index("idx_teachers_city_state", "city", "state"),
    )

    @property
    def display_name(self) -> str:
        parts = [self.title, self.first_name, self.last_name]
        return " ".join(p for p in parts if p)

    def values_of(self, kind: str) -> List[str]:
        return [a.value for a in self.attributes if a.kind == kind]

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Teacher {self.id} {self.display_name}>"


class TeacherSubject(Base):
    __tablename__ = "teacher_subjects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    teacher_id = Column(
        String(26), ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(120), nullable=False)
    level = Column(String(60), nullable=False)
    category = Column(String(60), nullable=False)

    teacher = relationship("Teacher", back_populates="subjects")


class TeacherAttribute(Base):
    """One value of a multi-valued teacher facet."""

    __tablename__ = "teacher_attributes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    teacher_id = Column(
        String(26), ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    kind = Column(String(30), nullable=False)
    value = Column(String(120), nullable=False)

    teacher = relationship("Teacher", back_populates="attributes")

    __table_args__ = (Index("idx_teacher_attributes_kind_value", "kind", "value"),)
