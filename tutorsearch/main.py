# tutorsearch/main.py
"""
Tutor search API application.

Serves the search routes under /api/v1/search and, for existing clients,
under /search, plus /health and the Prometheus /metrics endpoint.
"""

import logging

from fastapi import APIRouter, FastAPI, Response

from .core.config import settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION
from .errors import register_error_handlers
from .monitoring.prometheus_metrics import prometheus_metrics
from .routes.v1 import search as search_v1

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(title=API_TITLE, version=API_VERSION, description=API_DESCRIPTION)

register_error_handlers(app)

# Create API v1 router
api_v1 = APIRouter(prefix="/api/v1")
api_v1.include_router(search_v1.router, prefix="/search")

app.include_router(api_v1)
# Legacy, unversioned surface used by the existing web client
app.include_router(search_v1.router, prefix="/search", tags=["search-legacy"])


@app.get("/health", tags=["health"])
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    return Response(
        content=prometheus_metrics.get_metrics(),
        media_type=prometheus_metrics.get_content_type(),
    )


logger.info("%s %s started (environment=%s)", API_TITLE, API_VERSION, settings.environment)

# Bare FastAPI instance for tools and tests that need access to routes
fastapi_app = app

__all__ = ["app", "fastapi_app"]
