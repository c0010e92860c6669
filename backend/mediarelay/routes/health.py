"""
MediaRelay Backend — Health Check Route
=========================================

What:  Liveness endpoint for load balancers and container health checks.
How:   Answers from process state only; the remote store is not probed, so
       the check stays cheap and never consumes remote API quota.
"""

from fastapi import APIRouter, Request

from mediarelay.schemas.upload import HealthResponse

router = APIRouter(prefix="/api", tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(request: Request) -> HealthResponse:
    return HealthResponse(ok=True, service=request.app.state.service_name)
