"""Student API schemas.

On the wire the human-readable student code is ``studentId`` (unique per
branch); the row's primary key is ``id``.
"""

from datetime import date

from pydantic import Field

from app.application.dtos.student import (
    BulkImportResult,
    StudentOnboardingCommand,
    StudentResult,
)
from app.schemas.common import CamelModel, ProfileFields


class StudentCreateRequest(ProfileFields):
    """Request body for POST /students."""

    student_id: str = Field(..., min_length=1, description="Student code, e.g. 2025-G5-A-001")
    class_id: str | None = None
    section_id: str | None = None
    blood_group: str | None = None
    medical_notes: str | None = None
    admission_date: date | None = None
    academic_year_id: str | None = None

    def to_command(self) -> StudentOnboardingCommand:
        return StudentOnboardingCommand(
            profile=self.to_profile_input(),
            student_code=self.student_id.strip(),
            class_id=self.class_id,
            section_id=self.section_id,
            blood_group=self.blood_group,
            medical_notes=self.medical_notes,
            admission_date=self.admission_date,
            academic_year_id=self.academic_year_id,
        )


class StudentResponse(CamelModel):
    id: str
    user_id: str
    branch_id: str
    student_id: str
    full_name: str
    email: str
    is_active: bool
    academic_year_id: str
    class_id: str | None = None
    section_id: str | None = None
    blood_group: str | None = None
    medical_notes: str | None = None
    admission_date: date | None = None
    phone: str | None = None

    @classmethod
    def from_result(cls, result: StudentResult) -> "StudentResponse":
        return cls(
            id=result.id,
            user_id=result.user_id,
            branch_id=result.branch_id,
            student_id=result.student_code,
            full_name=result.full_name,
            email=result.email,
            is_active=result.is_active,
            academic_year_id=result.academic_year_id,
            class_id=result.class_id,
            section_id=result.section_id,
            blood_group=result.blood_group,
            medical_notes=result.medical_notes,
            admission_date=result.admission_date,
            phone=result.phone,
        )


class StudentBulkImportRequest(CamelModel):
    """Request body for POST /students/bulk-import; every row is validated up front."""

    students: list[StudentCreateRequest]

    def to_commands(self) -> list[StudentOnboardingCommand]:
        return [student.to_command() for student in self.students]


class BulkImportRowErrorResponse(CamelModel):
    row: int
    error: str


class StudentBulkImportResponse(CamelModel):
    success: int
    errors: list[BulkImportRowErrorResponse]

    @classmethod
    def from_result(cls, result: BulkImportResult) -> "StudentBulkImportResponse":
        return cls(
            success=result.success,
            errors=[BulkImportRowErrorResponse(row=e.row, error=e.error) for e in result.errors],
        )
