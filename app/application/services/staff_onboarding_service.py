"""Staff onboarding: identity account, profile, membership, roles, staff row."""

from __future__ import annotations

import logging

from app.application.dtos.branch import BranchContext
from app.application.dtos.staff import StaffOnboardingCommand, StaffResult
from app.application.interfaces import tables
from app.application.interfaces.repositories import IRelationalStore
from app.application.interfaces.services import IIdentityProvider
from app.application.services.onboarding_steps import OnboardingSteps, profile_fields
from app.application.services.step_executor import SagaContext, StepExecutor

logger = logging.getLogger(__name__)


class StaffOnboardingService:
    """Onboards a staff member into the caller's branch."""

    def __init__(
        self,
        store: IRelationalStore,
        identity: IIdentityProvider,
        executor: StepExecutor | None = None,
    ) -> None:
        self.executor = executor or StepExecutor()
        self.steps = OnboardingSteps(store, identity)

    async def onboard(self, command: StaffOnboardingCommand, branch: BranchContext) -> StaffResult:
        """Create the staff member; on any failure everything created here is removed."""
        profile = command.profile

        def staff_row(context: SagaContext) -> dict:
            return {
                "user_id": context["user_id"],
                "branch_id": context["branch_id"],
                "employee_id": command.employee_id,
                "department": command.department,
                "join_date": command.join_date,
                "is_active": profile.is_active,
            }

        saga = [
            self.steps.create_identity_account(profile.email, profile.password),
            self.steps.create_profile(profile_fields(profile)),
            self.steps.create_membership(is_primary=False),
            *self.steps.assign_roles(command.role_ids),
            self.steps.create_row("create_staff", tables.STAFF, staff_row, "staff"),
        ]
        context = await self.executor.run(
            saga, {"branch_id": branch.branch_id}, saga_name="staff_onboarding"
        )

        staff = context["staff"]
        logger.info("Onboarded staff %s (user %s) in branch %s", staff["id"], context["user_id"], branch.branch_id)
        return StaffResult(
            id=staff["id"],
            user_id=context["user_id"],
            branch_id=branch.branch_id,
            full_name=profile.full_name,
            email=context["email"],
            is_active=profile.is_active,
            employee_id=command.employee_id,
            department=command.department,
            join_date=command.join_date,
            phone=profile.phone,
            role_ids=list(context.get("role_ids", [])),
        )
