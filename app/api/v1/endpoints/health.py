"""Health check endpoint. No dependencies; used for liveness probes."""

from fastapi import APIRouter

from app.schemas.common import DataResponse
from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=DataResponse[HealthResponse])
def health_check() -> DataResponse[HealthResponse]:
    """Return simple ok status for liveness."""
    return DataResponse(data=HealthResponse())
