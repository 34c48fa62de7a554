# tutorsearch/routes/v1/__init__.py
"""
API v1 Routes

Versioned API endpoints under /api/v1. The search router is also mounted at
/search for existing clients.
"""

from . import search

__all__ = ["search"]
