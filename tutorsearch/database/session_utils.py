"""
Dialect-aware session helpers for the search repositories.
"""

from __future__ import annotations

import logging

from sqlalchemy import text
from sqlalchemy.exc import UnboundExecutionError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def get_dialect_name(session: Session, default: str = "sqlite") -> str:
    """Dialect of the session's bind, or ``default`` for an unbound session."""
    try:
        bind = session.get_bind()
    except UnboundExecutionError:
        return default
    return getattr(bind.dialect, "name", None) or default


def apply_statement_timeout(session: Session, timeout_s: float) -> bool:
    """
    Cap every statement in the session's current transaction at ``timeout_s``.

    Only PostgreSQL supports this; other dialects are left alone and ``False``
    is returned. ``SET LOCAL`` ends with the transaction, so pooled
    connections keep their configured default.
    """
    if get_dialect_name(session) != "postgresql":
        return False
    timeout_ms = max(1, int(timeout_s * 1000))
    session.execute(text(f"SET LOCAL statement_timeout = {timeout_ms}"))
    logger.debug("statement_timeout set to %sms for this transaction", timeout_ms)
    return True
