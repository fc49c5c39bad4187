"""Health & Readiness Probes — liveness and readiness endpoints.

Invariants:
    - GET /health/ always returns 200 if the process is up (liveness)
    - GET /health/ready returns 503 unless the runtime is serving (RUNNING or SAVED)
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from blogserver.api.dependencies import get_runtime
from blogserver.core.domain_types import LifecycleState
from blogserver.services.blog_runtime import BlogRuntime

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {"status": "healthy", "service": "blogserver"}


@router.get("/ready")
def readiness_check(runtime: BlogRuntime = Depends(get_runtime)):
    """Readiness probe — entries loaded and accepting submissions."""
    state = runtime.state
    if state not in (LifecycleState.RUNNING, LifecycleState.SAVED):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "state": state.value},
        )
    return {
        "status": "ready",
        "state": state.value,
        "entries": len(runtime.store),
        "unsaved": runtime.unsaved_count,
    }
