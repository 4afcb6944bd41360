"""Student API: thin routes delegating to StudentOnboardingService."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.dependencies import get_branch_context, get_student_onboarding_service
from app.application.dtos.branch import BranchContext
from app.application.services import StudentOnboardingService
from app.schemas.common import DataResponse
from app.schemas.student import (
    StudentBulkImportRequest,
    StudentBulkImportResponse,
    StudentCreateRequest,
    StudentResponse,
)

router = APIRouter()


@router.post("", response_model=DataResponse[StudentResponse], status_code=201)
async def create_student(
    body: StudentCreateRequest,
    branch: Annotated[BranchContext, Depends(get_branch_context)],
    service: Annotated[StudentOnboardingService, Depends(get_student_onboarding_service)],
):
    """Enroll a student in the caller's branch (active academic year unless given)."""
    result = await service.onboard(body.to_command(), branch)
    return DataResponse(data=StudentResponse.from_result(result))


@router.post(
    "/bulk-import", response_model=DataResponse[StudentBulkImportResponse], status_code=201
)
async def bulk_import_students(
    body: StudentBulkImportRequest,
    branch: Annotated[BranchContext, Depends(get_branch_context)],
    service: Annotated[StudentOnboardingService, Depends(get_student_onboarding_service)],
):
    """Enroll many students; each row succeeds or is rolled back on its own."""
    result = await service.bulk_import(body.to_commands(), branch)
    return DataResponse(data=StudentBulkImportResponse.from_result(result))
