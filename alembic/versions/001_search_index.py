# alembic/versions/001_search_index.py
"""Search index schema - teachers, teacher facets, jobs

Revision ID: 001_search_index
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_search_index"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

GEOGRAPHY_EXPR = "(ST_SetSRID(ST_MakePoint(longitude, latitude), 4326)::geography)"


def _location_columns(with_area: bool) -> list:
    columns = [
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("address", sa.Text(), nullable=True),
    ]
    if with_area:
        columns.append(sa.Column("area", sa.String(120), nullable=True))
    columns += [
        sa.Column("city", sa.String(120), nullable=True),
        sa.Column("state", sa.String(120), nullable=True),
        sa.Column("pincode", sa.String(20), nullable=True),
        sa.Column("country", sa.String(80), nullable=False, server_default="India"),
    ]
    return columns


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create search index schema."""
    print("Creating search index schema...")

    bind = op.get_bind()
    dialect_name = bind.dialect.name if bind is not None else "postgresql"
    is_postgres = dialect_name == "postgresql"

    if is_postgres:
        print("Ensuring PostGIS extension...")
        op.execute("CREATE EXTENSION IF NOT EXISTS postgis")

    op.create_table(
        "teachers",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("user_id", sa.String(26), nullable=True),
        sa.Column("title", sa.String(10), nullable=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False, server_default=""),
        sa.Column("tagline", sa.String(100), nullable=True),
        sa.Column("profile_photo_url", sa.Text(), nullable=True),
        sa.Column("gender", sa.String(20), nullable=True),
        sa.Column("experience_years", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("rating_average", sa.Float(), nullable=False, server_default="0"),
        sa.Column("rating_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("hourly_rate_min", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("hourly_rate_max", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_location_columns(with_area=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
        sa.CheckConstraint("longitude >= -180 AND longitude <= 180", name="ck_teachers_longitude"),
        sa.CheckConstraint("latitude >= -90 AND latitude <= 90", name="ck_teachers_latitude"),
        sa.CheckConstraint("experience_years >= 0", name="ck_teachers_experience_non_negative"),
        sa.CheckConstraint("hourly_rate_min <= hourly_rate_max", name="ck_teachers_rate_range"),
        comment="Teacher profiles as indexed for search",
    )
    op.create_index("ix_teachers_id", "teachers", ["id"])
    op.create_index("idx_teachers_searchable", "teachers", ["is_active", "is_verified"])
    op.create_index("idx_teachers_lat_lng", "teachers", ["latitude", "longitude"])
    op.create_index("idx_teachers_rating", "teachers", ["rating_average"])
    op.create_index("idx_teachers_experience", "teachers", ["experience_years"])
    op.create_index("idx_teachers_rate_min", "teachers", ["hourly_rate_min"])
    op.create_index("idx_teachers_city_state", "teachers", ["city", "state"])

    op.create_table(
        "teacher_subjects",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("teacher_id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("level", sa.String(60), nullable=False),
        sa.Column("category", sa.String(60), nullable=False),
        sa.ForeignKeyConstraint(["teacher_id"], ["teachers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_teacher_subjects_teacher_id", "teacher_subjects", ["teacher_id"])

    op.create_table(
        "teacher_attributes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("teacher_id", sa.String(26), nullable=False),
        sa.Column("kind", sa.String(30), nullable=False),
        sa.Column("value", sa.String(120), nullable=False),
        sa.ForeignKeyConstraint(["teacher_id"], ["teachers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        comment="Multi-valued teacher facets: class levels, teaching modes, languages, qualifications",
    )
    op.create_index("ix_teacher_attributes_teacher_id", "teacher_attributes", ["teacher_id"])
    op.create_index("idx_teacher_attributes_kind_value", "teacher_attributes", ["kind", "value"])

    op.create_table(
        "jobs",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("student_id", sa.String(26), nullable=True),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("subject", sa.String(120), nullable=False),
        sa.Column("class_level", sa.String(60), nullable=True),
        sa.Column("teaching_mode", sa.String(20), nullable=True),
        sa.Column("urgency", sa.String(20), nullable=True),
        sa.Column("budget_type", sa.String(20), nullable=False, server_default="hourly"),
        sa.Column("budget_min", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("budget_max", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(3), nullable=False, server_default="INR"),
        sa.Column(
            "required_experience_years", sa.Integer(), nullable=False, server_default="0"
        ),
        sa.Column("required_gender", sa.String(20), nullable=False, server_default="any"),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        *_location_columns(with_area=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("longitude >= -180 AND longitude <= 180", name="ck_jobs_longitude"),
        sa.CheckConstraint("latitude >= -90 AND latitude <= 90", name="ck_jobs_latitude"),
        sa.CheckConstraint("budget_min <= budget_max", name="ck_jobs_budget_range"),
        comment="Student tutoring requirements as indexed for search",
    )
    op.create_index("ix_jobs_id", "jobs", ["id"])
    op.create_index("ix_jobs_student_id", "jobs", ["student_id"])
    op.create_index("idx_jobs_searchable", "jobs", ["status", "expires_at"])
    op.create_index("idx_jobs_lat_lng", "jobs", ["latitude", "longitude"])
    op.create_index("idx_jobs_budget_max", "jobs", ["budget_max"])
    op.create_index("idx_jobs_city_state", "jobs", ["city", "state"])

    if is_postgres:
        print("Creating geography GiST indexes...")
        op.execute(
            f"CREATE INDEX IF NOT EXISTS idx_teachers_geog ON teachers USING GIST ({GEOGRAPHY_EXPR})"
        )
        op.execute(
            f"CREATE INDEX IF NOT EXISTS idx_jobs_geog ON jobs USING GIST ({GEOGRAPHY_EXPR})"
        )

    print("Search index schema created")


def downgrade() -> None:
    """Drop search index schema."""
    print("Dropping search index schema...")

    bind = op.get_bind()
    dialect_name = bind.dialect.name if bind is not None else "postgresql"
    if dialect_name == "postgresql":
        op.execute("DROP INDEX IF EXISTS idx_jobs_geog")
        op.execute("DROP INDEX IF EXISTS idx_teachers_geog")

    op.drop_table("jobs")
    op.drop_table("teacher_attributes")
    op.drop_table("teacher_subjects")
    op.drop_table("teachers")
