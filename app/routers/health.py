"""Health check endpoint.

Reports database connectivity; an unconfigured or unreachable backend
yields 503.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from app.core.exceptions import BackendNotConfiguredError
from app.db.supabase import SupabaseBackend, get_supabase

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check(client: SupabaseBackend = Depends(get_supabase)) -> Any:
    """Return service status with a real round trip to the ``forms`` table."""
    db_status = "disconnected"

    try:
        result = client.table("forms").select("id").limit(1).execute()
        if result is not None:
            db_status = "connected"
    except BackendNotConfiguredError:
        db_status = "unconfigured"
    except Exception:
        logger.warning("Health check: Supabase connection failed", exc_info=True)

    payload: dict[str, str] = {
        "status": "ok" if db_status == "connected" else "degraded",
        "database": db_status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    if db_status != "connected":
        return JSONResponse(status_code=503, content=payload)

    return payload
