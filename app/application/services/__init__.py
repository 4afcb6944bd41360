"""Application services: saga engine, guards and provisioning workflows."""

from app.application.services.onboarding_steps import OnboardingSteps, profile_fields
from app.application.services.registration_service import RegistrationService
from app.application.services.staff_onboarding_service import StaffOnboardingService
from app.application.services.step_executor import (
    CompensationFailure,
    CompensationLog,
    SagaStep,
    StepExecutor,
)
from app.application.services.student_onboarding_service import StudentOnboardingService
from app.application.services.uniqueness_guard import UniquenessGuard
from app.application.services.user_onboarding_service import UserOnboardingService

__all__ = [
    "CompensationFailure",
    "CompensationLog",
    "OnboardingSteps",
    "RegistrationService",
    "SagaStep",
    "StaffOnboardingService",
    "StepExecutor",
    "StudentOnboardingService",
    "UniquenessGuard",
    "UserOnboardingService",
    "profile_fields",
]
