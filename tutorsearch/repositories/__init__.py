# tutorsearch/repositories/__init__.py
"""
Repository layer: data access for the search pipeline.
"""

from .base_repository import BaseRepository
from .spatial_index_repository import (
    JobIndexRepository,
    LocationGroup,
    SpatialHit,
    SpatialIndexRepository,
    TeacherIndexRepository,
)

__all__ = [
    "BaseRepository",
    "JobIndexRepository",
    "LocationGroup",
    "SpatialHit",
    "SpatialIndexRepository",
    "TeacherIndexRepository",
]
