"""Student onboarding: pre-checks, then account, profile, membership, student role, student row.

The pre-checks (student code free in the branch, class and section present,
academic year resolved) are read-only and run before the identity account
is created, since an account cannot be previewed.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from app.application.dtos.branch import BranchContext
from app.application.dtos.student import (
    BulkImportResult,
    BulkImportRowError,
    StudentOnboardingCommand,
    StudentResult,
)
from app.application.interfaces import tables
from app.application.interfaces.repositories import IRelationalStore
from app.application.interfaces.services import IIdentityProvider
from app.application.services.onboarding_steps import OnboardingSteps, profile_fields
from app.application.services.step_executor import SagaContext, SagaStep, StepExecutor
from app.application.services.uniqueness_guard import UniquenessGuard
from app.domain.enums import BuiltinRole
from app.domain.exceptions import DependencyNotFoundException, SchoolAdminException

logger = logging.getLogger(__name__)


class StudentOnboardingService:
    """Onboards a student into the caller's branch."""

    def __init__(
        self,
        store: IRelationalStore,
        identity: IIdentityProvider,
        executor: StepExecutor | None = None,
    ) -> None:
        self.store = store
        self.executor = executor or StepExecutor()
        self.guard = UniquenessGuard(store)
        self.steps = OnboardingSteps(store, identity)

    async def onboard(self, command: StudentOnboardingCommand, branch: BranchContext) -> StudentResult:
        """Create the student.

        Raises:
            ConflictException: Student code already used in this branch, or email taken.
            DependencyNotFoundException: Class, section or academic year missing.
            RoleNotSeededException: The student role is missing.
            DownstreamFailureException: The store or identity provider failed.
        """
        profile = command.profile

        def student_row(context: SagaContext) -> dict:
            return {
                "user_id": context["user_id"],
                "branch_id": context["branch_id"],
                "student_id": command.student_code,
                "class_id": command.class_id,
                "section_id": command.section_id,
                "blood_group": command.blood_group,
                "medical_notes": command.medical_notes,
                "admission_date": command.admission_date,
                "academic_year_id": context["academic_year_id"],
                "is_active": profile.is_active,
            }

        saga = [
            self.guard.unique_step(
                "guard_student_code",
                tables.STUDENTS,
                "student_id",
                command.student_code,
                scope={"branch_id": branch.branch_id},
                message=f"Student ID {command.student_code} already exists in this branch",
            ),
            *self._reference_checks(command, branch),
            self._resolve_academic_year(command, branch),
            self.steps.create_identity_account(profile.email, profile.password),
            self.steps.create_profile(profile_fields(profile)),
            self.steps.create_membership(is_primary=False),
            self.steps.lookup_role(BuiltinRole.STUDENT.value),
            self.steps.assign_role(),
            self.steps.create_row("create_student", tables.STUDENTS, student_row, "student"),
        ]
        context = await self.executor.run(
            saga, {"branch_id": branch.branch_id}, saga_name="student_onboarding"
        )

        student = context["student"]
        logger.info(
            "Onboarded student %s (%s) in branch %s",
            student["id"],
            command.student_code,
            branch.branch_id,
        )
        return StudentResult(
            id=student["id"],
            user_id=context["user_id"],
            branch_id=branch.branch_id,
            student_code=command.student_code,
            full_name=profile.full_name,
            email=context["email"],
            is_active=profile.is_active,
            academic_year_id=context["academic_year_id"],
            class_id=command.class_id,
            section_id=command.section_id,
            blood_group=command.blood_group,
            medical_notes=command.medical_notes,
            admission_date=command.admission_date,
            phone=profile.phone,
        )

    async def bulk_import(
        self, commands: Sequence[StudentOnboardingCommand], branch: BranchContext
    ) -> BulkImportResult:
        """Onboard each student in turn; a failed row is rolled back and reported.

        Rows run sequentially, each as its own saga. Domain errors are
        collected per row (1-based); anything else propagates and stops the
        import, leaving earlier rows in place.
        """
        success = 0
        errors: list[BulkImportRowError] = []
        for row, command in enumerate(commands, start=1):
            try:
                await self.onboard(command, branch)
            except SchoolAdminException as e:
                logger.info("Bulk import row %d rejected: %s", row, e.message)
                errors.append(BulkImportRowError(row=row, error=e.message))
            else:
                success += 1
        logger.info(
            "Bulk import into branch %s: %d created, %d failed",
            branch.branch_id,
            success,
            len(errors),
        )
        return BulkImportResult(success=success, errors=errors)

    def _reference_checks(
        self, command: StudentOnboardingCommand, branch: BranchContext
    ) -> list[SagaStep]:
        checks = []
        if command.class_id:
            checks.append(
                self.guard.exists_step(
                    "check_class",
                    tables.CLASSES,
                    {"id": command.class_id, "branch_id": branch.branch_id},
                    "class",
                    command.class_id,
                )
            )
        if command.section_id:
            checks.append(
                self.guard.exists_step(
                    "check_section",
                    tables.SECTIONS,
                    {"id": command.section_id, "branch_id": branch.branch_id},
                    "section",
                    command.section_id,
                )
            )
        return checks

    def _resolve_academic_year(
        self, command: StudentOnboardingCommand, branch: BranchContext
    ) -> SagaStep:
        """Caller-supplied year (must exist), else the tenant's active year."""

        async def forward(_context: SagaContext) -> dict[str, Any]:
            if command.academic_year_id:
                await self.guard.ensure_exists(
                    tables.ACADEMIC_YEARS,
                    {"id": command.academic_year_id},
                    "academic_year",
                    command.academic_year_id,
                )
                return {"academic_year_id": command.academic_year_id}

            tenant_id = branch.tenant_id
            if tenant_id is None:
                branch_row = await self.store.select_one(tables.BRANCHES, {"id": branch.branch_id})
                tenant_id = branch_row["tenant_id"] if branch_row else None
            active = await self.store.select_one(
                tables.ACADEMIC_YEARS, {"tenant_id": tenant_id, "is_active": True}
            )
            if active is None:
                raise DependencyNotFoundException(
                    "academic_year", "active", "No active academic year found"
                )
            return {"academic_year_id": active["id"]}

        return SagaStep("resolve_academic_year", forward)
