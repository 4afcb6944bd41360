"""Application DTOs (no dependency on presentation schemas)."""

from app.application.dtos.branch import BranchContext
from app.application.dtos.staff import StaffOnboardingCommand, StaffResult
from app.application.dtos.student import (
    BulkImportResult,
    BulkImportRowError,
    StudentOnboardingCommand,
    StudentResult,
)
from app.application.dtos.tenant import (
    RegisteredUser,
    RegistrationCommand,
    RegistrationResult,
)
from app.application.dtos.user import (
    AuthenticatedUser,
    IdentityAccount,
    OnboardedUserResult,
    ProfileInput,
    UserOnboardingCommand,
)

__all__ = [
    "AuthenticatedUser",
    "BranchContext",
    "BulkImportResult",
    "BulkImportRowError",
    "IdentityAccount",
    "OnboardedUserResult",
    "ProfileInput",
    "RegisteredUser",
    "RegistrationCommand",
    "RegistrationResult",
    "StaffOnboardingCommand",
    "StaffResult",
    "StudentOnboardingCommand",
    "StudentResult",
    "UserOnboardingCommand",
]
