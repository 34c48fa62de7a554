# tutorsearch/models/job.py
"""
Job posting model (a student's tutoring requirement) as seen by the search engine.

A job is searchable while status == "active" and expires_at has not passed.
"""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Float, Index, Integer, String, Text
import ulid

from ..core.constants import JOB_STATUS_ACTIVE
from ..database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Job(Base):
    __tablename__ = "jobs"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    student_id = Column(String(26), nullable=True, index=True)

    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    subject = Column(String(120), nullable=False)
    class_level = Column(String(60), nullable=True)
    teaching_mode = Column(String(20), nullable=True)
    urgency = Column(String(20), nullable=True)

    budget_type = Column(String(20), nullable=False, default="hourly")
    budget_min = Column(Integer, nullable=False, default=0)
    budget_max = Column(Integer, nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="INR")

    required_experience_years = Column(Integer, nullable=False, default=0)
    required_gender = Column(String(20), nullable=False, default="any")

    status = Column(String(20), nullable=False, default=JOB_STATUS_ACTIVE)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    longitude = Column(Float, nullable=False)
    latitude = Column(Float, nullable=False)
    address = Column(Text, nullable=True)
    city = Column(String(120), nullable=True)
    state = Column(String(120), nullable=True)
    pincode = Column(String(20), nullable=True)
    country = Column(String(80), nullable=False, default="India")

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        CheckConstraint("longitude >= -180 AND longitude <= 180", name="ck_jobs_longitude"),
        CheckConstraint("latitude >= -90 AND latitude <= 90", name="ck_jobs_latitude"),
        CheckConstraint("budget_min <= budget_max", name="ck_jobs_budget_range"),
        Index("idx_jobs_searchable", "status", "expires_at"),
        Index("idx_jobs_lat_lng", "latitude", "longitude"),
        Index("idx_jobs_budget_max", "budget_max"),
        Index("idx_jobs_city_state", "city", "state"),
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Job {self.id} {self.title!r} status={self.status}>"
