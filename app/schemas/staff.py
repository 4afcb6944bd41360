"""Staff API schemas."""

from dataclasses import asdict
from datetime import date

from app.application.dtos.staff import StaffOnboardingCommand, StaffResult
from app.schemas.common import CamelModel, ProfileFields


class StaffCreateRequest(ProfileFields):
    """Request body for POST /staff (branch from header or profile)."""

    employee_id: str | None = None
    department: str | None = None
    join_date: date | None = None
    role_ids: list[str] = []

    def to_command(self) -> StaffOnboardingCommand:
        return StaffOnboardingCommand(
            profile=self.to_profile_input(),
            employee_id=self.employee_id,
            department=self.department,
            join_date=self.join_date,
            role_ids=tuple(self.role_ids),
        )


class StaffResponse(CamelModel):
    id: str
    user_id: str
    branch_id: str
    full_name: str
    email: str
    is_active: bool
    employee_id: str | None = None
    department: str | None = None
    join_date: date | None = None
    phone: str | None = None
    role_ids: list[str] = []

    @classmethod
    def from_result(cls, result: StaffResult) -> "StaffResponse":
        return cls(**asdict(result))
