# tutorsearch/init_db.py
"""
Create the search tables for local development.

Production schemas (including the PostGIS index) are managed by Alembic.

Usage:
    python -m tutorsearch.init_db
"""

import logging

from .database import Base, engine
from .models import Job, Teacher, TeacherAttribute, TeacherSubject  # noqa: F401

logger = logging.getLogger(__name__)


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
    logger.info("Created tables: %s", ", ".join(sorted(Base.metadata.tables)))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
