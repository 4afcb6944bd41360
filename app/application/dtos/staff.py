"""DTOs for staff onboarding."""

from dataclasses import dataclass, field
from datetime import date

from app.application.dtos.user import ProfileInput


@dataclass(frozen=True)
class StaffOnboardingCommand:
    """Input for staff onboarding: profile fields, staff fields and optional role ids."""

    profile: ProfileInput
    employee_id: str | None = None
    department: str | None = None
    join_date: date | None = None
    role_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class StaffResult:
    """Staff read-model (staff row joined with profile and identity email)."""

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
    role_ids: list[str] = field(default_factory=list)
