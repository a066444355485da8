# parking_registry/routers/health.py
"""
System health check endpoint.
Returns status of backend + record store.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from parking_registry.database import get_store
from parking_registry.store import RecordStore

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(store: RecordStore = Depends(get_store)):
    result = {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "backend": "ok",
        "database": "unknown",
    }

    try:
        store.ping()
        result["database"] = "ok"
    except (SQLAlchemyError, RuntimeError) as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    return result
