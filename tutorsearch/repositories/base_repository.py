# tutorsearch/repositories/base_repository.py
"""
Base Repository Pattern for the search service.

Provides the foundation for repository classes with:
- Session and model binding
- Dialect detection (PostGIS path vs. portable path)
- Consistent translation of SQLAlchemy failures into RepositoryException

Search never writes, so there are no create/update/delete helpers here.
"""

import logging
from typing import Any, Generic, List, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql import Executable

from ..core.exceptions import RepositoryException, UpstreamQueryException
from ..database.session_utils import get_dialect_name

# Type variable for generic model support
T = TypeVar("T")

logger = logging.getLogger(__name__)


class BaseRepository(Generic[T]):
    """
    Read-only base repository.

    Attributes:
        db: SQLAlchemy session (owned by the request)
        model: SQLAlchemy model class
    """

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    @property
    def dialect_name(self) -> str:
        return get_dialect_name(self.db)

    def _fail(self, operation: str, exc: SQLAlchemyError) -> RepositoryException:
        self.logger.error(
            "Error running %s on %s: %s", operation, self.model.__name__, exc, exc_info=True
        )
        return UpstreamQueryException(f"Failed to {operation} {self.model.__name__}: {exc}")

    def _all(self, statement: Executable, operation: str) -> List[Any]:
        try:
            return list(self.db.execute(statement).all())
        except SQLAlchemyError as e:
            raise self._fail(operation, e) from e

    def _scalars(self, statement: Executable, operation: str) -> List[Any]:
        try:
            return list(self.db.execute(statement).scalars().all())
        except SQLAlchemyError as e:
            raise self._fail(operation, e) from e

    def _scalar(self, statement: Executable, operation: str) -> Any:
        try:
            return self.db.execute(statement).scalar_one()
        except SQLAlchemyError as e:
            raise self._fail(operation, e) from e
