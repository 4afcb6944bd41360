"""Auth API: public school registration.

Sign-in happens against Supabase Auth directly; this API only provisions the
tenant, its main branch and the first administrator.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import get_registration_service
from app.application.services import RegistrationService
from app.core.limiter import limit_register
from app.schemas.auth import RegisterRequest, RegisterResponse
from app.schemas.common import DataResponse

router = APIRouter()


@router.post("/register", response_model=DataResponse[RegisterResponse], status_code=201)
@limit_register
async def register(
    request: Request,
    body: RegisterRequest,
    service: Annotated[RegistrationService, Depends(get_registration_service)],
):
    """Register a new school with its main branch and school admin (public endpoint)."""
    result = await service.register(body.to_command())
    return DataResponse(data=RegisterResponse.from_result(result))
