# tutorsearch/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

Services are created per request around the request's session.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.geo_search_service import GeoSearchService
from ...services.location_suggestion_service import LocationSuggestionService
from .database import get_db


def get_geo_search_service(db: Session = Depends(get_db)) -> GeoSearchService:
    """Get GeoSearchService bound to the request session."""
    return GeoSearchService(db)


def get_location_suggestion_service(db: Session = Depends(get_db)) -> LocationSuggestionService:
    """Get LocationSuggestionService bound to the request session."""
    return LocationSuggestionService(db)
