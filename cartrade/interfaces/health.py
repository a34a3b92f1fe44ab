"""
Health check router.

Provides a simple health endpoint for liveness/readiness probes.
Reports the configured ledger network; does not call the node.
"""

from fastapi import APIRouter

from cartrade.core.config import settings
from cartrade.interfaces.trading.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns application health status, version and ledger network.",
)
def health_check() -> HealthResponse:
    """Return current application health status."""
    return HealthResponse(
        status="ok", version=settings.version, network=settings.ethereum_network
    )
