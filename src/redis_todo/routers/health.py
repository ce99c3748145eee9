from __future__ import annotations

from typing import Any, Dict, Union

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..dependencies import get_service
from ..schemas import HealthOut
from ..service import TodoService

log = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["health"])


# PUBLIC_INTERFACE
@router.get(
    "/health",
    response_model=HealthOut,
    response_model_exclude_none=True,
    summary="Health Check",
    responses={500: {"description": "Health probe failed"}},
)
def health_check(service: TodoService = Depends(get_service)) -> Union[Dict[str, Any], JSONResponse]:
    """
    Report service health and the Redis connection status.

    Returns 500 with ``{"status": "unhealthy", "error", "redis": "error"}``
    when the probe itself raises.
    """
    try:
        return service.health()
    except Exception as exc:
        log.error("Health check failed", error=str(exc))
        return JSONResponse(
            status_code=500,
            content={"status": "unhealthy", "error": str(exc), "redis": "error"},
        )
