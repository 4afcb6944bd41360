"""Staff API: thin routes delegating to StaffOnboardingService."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.dependencies import get_branch_context, get_staff_onboarding_service
from app.application.dtos.branch import BranchContext
from app.application.services import StaffOnboardingService
from app.schemas.common import DataResponse
from app.schemas.staff import StaffCreateRequest, StaffResponse

router = APIRouter()


@router.post("", response_model=DataResponse[StaffResponse], status_code=201)
async def create_staff(
    body: StaffCreateRequest,
    branch: Annotated[BranchContext, Depends(get_branch_context)],
    service: Annotated[StaffOnboardingService, Depends(get_staff_onboarding_service)],
):
    """Create a staff member (login, profile, branch membership, roles, staff row)."""
    result = await service.onboard(body.to_command(), branch)
    return DataResponse(data=StaffResponse.from_result(result))
