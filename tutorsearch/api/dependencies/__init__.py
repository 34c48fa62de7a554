# tutorsearch/api/dependencies/__init__.py
"""FastAPI dependencies for the search API."""

from .database import get_db
from .services import get_geo_search_service, get_location_suggestion_service

__all__ = ["get_db", "get_geo_search_service", "get_location_suggestion_service"]
