"""Registration: new tenant + main branch + school administrator.

The store has no transactions, so registration runs as a saga over the
StepExecutor. Any failure after the first insert removes every row and the
identity account created by this call before the error reaches the caller.
"""

from __future__ import annotations

import logging
import random

from app.application.dtos.tenant import (
    RegisteredUser,
    RegistrationCommand,
    RegistrationResult,
)
from app.application.interfaces import tables
from app.application.interfaces.repositories import IRelationalStore
from app.application.interfaces.services import IIdentityProvider
from app.application.services.onboarding_steps import OnboardingSteps
from app.application.services.step_executor import SagaContext, StepExecutor
from app.application.services.uniqueness_guard import UniquenessGuard
from app.domain.enums import BuiltinRole
from app.domain.exceptions import ValidationException
from app.domain.value_objects import BranchCode, SchoolCode

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_QUOTA_GB = 100


class RegistrationService:
    """Creates a tenant with its main branch and school administrator."""

    def __init__(
        self,
        store: IRelationalStore,
        identity: IIdentityProvider,
        executor: StepExecutor | None = None,
        storage_quota_gb: int = DEFAULT_STORAGE_QUOTA_GB,
        rng: random.Random | None = None,
    ) -> None:
        self.store = store
        self.identity = identity
        self.executor = executor or StepExecutor()
        self.storage_quota_gb = storage_quota_gb
        self.rng = rng
        self.guard = UniquenessGuard(store)
        self.steps = OnboardingSteps(store, identity)

    async def register(self, command: RegistrationCommand) -> RegistrationResult:
        """Register a school.

        Steps: guard tenant code, create tenant, guard branch code, create
        branch, create identity account, create profile (current branch set),
        create primary membership, look up the school_admin role, assign it.

        Session tokens are not issued; the administrator logs in afterwards.

        Raises:
            ValidationException: A supplied or generated code is malformed.
            ConflictException: School code, branch code or email already taken.
            RoleNotSeededException: The school_admin role is missing.
            DownstreamFailureException: The store or identity provider failed.
        """
        school_code = self._school_code(command)
        branch_code = self._branch_code(command, school_code)
        logger.info(
            "Registering school %r (code=%s, branch=%s)",
            command.school_name,
            school_code.value,
            branch_code.value,
        )

        def tenant_row(_context: SagaContext) -> dict:
            return {
                "name": command.school_name,
                "code": school_code.value,
                "domain": command.school_domain,
                "is_active": True,
            }

        def branch_row(context: SagaContext) -> dict:
            return {
                "tenant_id": context["tenant_id"],
                "name": command.branch_name,
                "code": branch_code.value,
                "address": command.branch_address,
                "phone": command.branch_phone,
                "email": command.branch_email,
                "storage_quota_gb": self.storage_quota_gb,
                "is_active": True,
            }

        saga = [
            self.guard.unique_step(
                "guard_tenant_code",
                tables.TENANTS,
                "code",
                school_code.value,
                message=f'School code "{school_code.value}" already exists. Please choose a different code.',
            ),
            self.steps.create_row(
                "create_tenant", tables.TENANTS, tenant_row, "tenant", id_key="tenant_id"
            ),
            self.guard.unique_step(
                "guard_branch_code",
                tables.BRANCHES,
                "code",
                branch_code.value,
                message=f'Branch code "{branch_code.value}" already exists. Please choose a different code.',
            ),
            self.steps.create_row(
                "create_branch", tables.BRANCHES, branch_row, "branch", id_key="branch_id"
            ),
            self.steps.create_identity_account(command.email, command.password),
            self.steps.create_profile(
                {"full_name": command.full_name, "phone": command.phone, "is_active": True},
                set_current_branch=True,
            ),
            self.steps.create_membership(is_primary=True),
            self.steps.lookup_role(BuiltinRole.SCHOOL_ADMIN.value),
            self.steps.assign_role(),
        ]
        context = await self.executor.run(saga, saga_name="registration")

        logger.info(
            "Registered tenant %s (branch %s, admin %s)",
            context["tenant_id"],
            context["branch_id"],
            context["user_id"],
        )
        return RegistrationResult(
            user=RegisteredUser(
                id=context["user_id"],
                email=context["email"],
                full_name=command.full_name,
                tenant_id=context["tenant_id"],
                branch_id=context["branch_id"],
            ),
        )

    def _school_code(self, command: RegistrationCommand) -> SchoolCode:
        try:
            if command.school_code:
                return SchoolCode(command.school_code)
            return SchoolCode.generate(command.school_name, self.rng)
        except ValueError as e:
            raise ValidationException(str(e), field="schoolCode") from e

    @staticmethod
    def _branch_code(command: RegistrationCommand, school_code: SchoolCode) -> BranchCode:
        try:
            if command.branch_code:
                return BranchCode(command.branch_code)
            return school_code.main_branch_code()
        except ValueError as e:
            raise ValidationException(str(e), field="branchCode") from e
