"""Generic user onboarding: account, profile, membership and caller-chosen roles.

A user given a teaching role also needs a staff row, so a minimal one is
created (join date today) unless the user already has one in the branch.
"""

from __future__ import annotations

import logging
from typing import Any

from app.application.dtos.branch import BranchContext
from app.application.dtos.user import OnboardedUserResult, UserOnboardingCommand
from app.application.interfaces import tables
from app.application.interfaces.repositories import IRelationalStore
from app.application.interfaces.services import IIdentityProvider
from app.application.services.onboarding_steps import OnboardingSteps, profile_fields
from app.application.services.step_executor import SagaContext, SagaStep, StepExecutor
from app.domain.enums import BuiltinRole
from app.shared.utils.datetime import today_utc

logger = logging.getLogger(__name__)


class UserOnboardingService:
    """Onboards a user (any non-student role) into the caller's branch."""

    def __init__(
        self,
        store: IRelationalStore,
        identity: IIdentityProvider,
        executor: StepExecutor | None = None,
    ) -> None:
        self.store = store
        self.executor = executor or StepExecutor()
        self.steps = OnboardingSteps(store, identity)

    async def onboard(self, command: UserOnboardingCommand, branch: BranchContext) -> OnboardedUserResult:
        """Create the user; on any failure everything created here is removed."""
        profile = command.profile
        saga = [
            self.steps.create_identity_account(profile.email, profile.password),
            self.steps.create_profile(profile_fields(profile)),
            self.steps.create_membership(is_primary=False),
            *self.steps.assign_roles(command.role_ids),
        ]
        if command.role_ids:
            saga.append(self._ensure_staff_record(command.role_ids))
        context = await self.executor.run(
            saga, {"branch_id": branch.branch_id}, saga_name="user_onboarding"
        )

        staff = context.get("staff")
        logger.info("Onboarded user %s in branch %s", context["user_id"], branch.branch_id)
        return OnboardedUserResult(
            id=context["user_id"],
            email=context["email"],
            full_name=profile.full_name,
            branch_id=branch.branch_id,
            is_active=profile.is_active,
            avatar_url=profile.avatar_url,
            phone=profile.phone,
            address=profile.address,
            date_of_birth=profile.date_of_birth,
            gender=profile.gender,
            role_ids=list(context.get("role_ids", [])),
            staff_id=staff["id"] if staff else None,
        )

    def _ensure_staff_record(self, role_ids: tuple[str, ...]) -> SagaStep:
        """Minimal staff row when any assigned role is a teaching role."""

        async def forward(context: SagaContext) -> dict[str, Any]:
            teaching = await self.store.select_one(
                tables.ROLES,
                {"id": list(role_ids), "name": sorted(BuiltinRole.teaching_roles())},
            )
            if teaching is None:
                return {}
            existing = await self.store.select_one(
                tables.STAFF,
                {"user_id": context["user_id"], "branch_id": context["branch_id"]},
            )
            if existing is not None:
                return {}
            staff = await self.store.insert(
                tables.STAFF,
                {
                    "user_id": context["user_id"],
                    "branch_id": context["branch_id"],
                    "employee_id": None,
                    "department": None,
                    "join_date": today_utc(),
                    "is_active": True,
                },
            )
            logger.debug("Created staff row %s for teaching role holder %s", staff["id"], context["user_id"])
            return {"staff": staff}

        async def compensate(context: SagaContext) -> None:
            # only undo a row this step created
            if context.get("staff"):
                await self.store.delete(tables.STAFF, {"id": context["staff"]["id"]})

        return SagaStep("ensure_staff_record", forward, compensate)
