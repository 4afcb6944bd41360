"""User API: thin routes delegating to UserOnboardingService."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.dependencies import get_branch_context, get_user_onboarding_service
from app.application.dtos.branch import BranchContext
from app.application.services import UserOnboardingService
from app.schemas.common import DataResponse
from app.schemas.user import UserCreateRequest, UserResponse

router = APIRouter()


@router.post("", response_model=DataResponse[UserResponse], status_code=201)
async def create_user(
    body: UserCreateRequest,
    branch: Annotated[BranchContext, Depends(get_branch_context)],
    service: Annotated[UserOnboardingService, Depends(get_user_onboarding_service)],
):
    """Create a user in the caller's branch; teaching roles also get a staff row."""
    result = await service.onboard(body.to_command(), branch)
    return DataResponse(data=UserResponse.from_result(result))
