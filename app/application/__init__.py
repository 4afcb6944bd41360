"""Application layer: ports, DTOs, the saga engine and provisioning workflows.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (relational store, identity provider).
"""

from app.application.interfaces import IIdentityProvider, IRelationalStore
from app.application.services import (
    RegistrationService,
    StaffOnboardingService,
    StepExecutor,
    StudentOnboardingService,
    UserOnboardingService,
)

__all__ = [
    "IIdentityProvider",
    "IRelationalStore",
    "RegistrationService",
    "StaffOnboardingService",
    "StepExecutor",
    "StudentOnboardingService",
    "UserOnboardingService",
]
