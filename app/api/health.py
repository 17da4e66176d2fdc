"""Health check endpoint."""

from fastapi import APIRouter

from app.schemas.storefront import HealthResponse

router = APIRouter(prefix="/api")


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic liveness check."""
    return HealthResponse(status="ok")
