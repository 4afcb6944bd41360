"""User API schemas."""

from dataclasses import asdict
from datetime import date

from app.application.dtos.user import OnboardedUserResult, UserOnboardingCommand
from app.schemas.common import CamelModel, ProfileFields


class UserCreateRequest(ProfileFields):
    """Request body for POST /users (branch-scoped; roles are existing role ids)."""

    role_ids: list[str] = []

    def to_command(self) -> UserOnboardingCommand:
        return UserOnboardingCommand(
            profile=self.to_profile_input(), role_ids=tuple(self.role_ids)
        )


class UserResponse(CamelModel):
    """Onboarded user (no password)."""

    id: str
    email: str
    full_name: str
    branch_id: str
    is_active: bool
    avatar_url: str | None = None
    phone: str | None = None
    address: str | None = None
    date_of_birth: date | None = None
    gender: str | None = None
    role_ids: list[str] = []
    staff_id: str | None = None

    @classmethod
    def from_result(cls, result: OnboardedUserResult) -> "UserResponse":
        return cls(**asdict(result))
