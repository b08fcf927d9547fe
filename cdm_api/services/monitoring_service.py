"""
Health check for the CDM store: database connectivity and stored model count.
Used by the /api/health endpoint.
"""

import logging
from typing import Any

from sqlalchemy import func, text
from sqlalchemy.orm import Session

from cdm_api.models_db import MetaRecord
from cdm_api.services.graph import MODEL_KIND

logger = logging.getLogger(__name__)


def check_db(db: Session) -> tuple[bool, str]:
    """Check database connectivity. Returns (ok, message)."""
    try:
        db.execute(text("SELECT 1"))
        return True, "ok"
    except Exception as e:
        logger.warning("Database health check failed: %s", e)
        return False, str(e)


def count_models(db: Session) -> int:
    """Distinct model uuids (all versions of a model count once)."""
    return (
        db.query(func.count(func.distinct(MetaRecord.uuid)))
        .filter(MetaRecord.kind == MODEL_KIND)
        .scalar()
        or 0
    )


def get_health(db: Session) -> dict[str, Any]:
    """Return health status for /api/health."""
    db_ok, db_msg = check_db(db)
    return {
        "status": "healthy" if db_ok else "unhealthy",
        "checks": {"database": {"status": "up" if db_ok else "down", "message": db_msg}},
        "models": count_models(db) if db_ok else None,
    }
