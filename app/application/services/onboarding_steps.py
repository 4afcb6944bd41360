"""Saga steps shared by registration and the onboarding workflows.

Every workflow threads the same context keys through its steps:
branch_id, tenant_id, user_id, email, role_id, role_ids. Each factory
returns a SagaStep whose compensation touches only the row (or account)
its forward action created.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from app.application.dtos.user import ProfileInput
from app.application.interfaces import tables
from app.application.interfaces.repositories import IRelationalStore
from app.application.interfaces.services import IIdentityProvider
from app.application.services.step_executor import SagaContext, SagaStep
from app.domain.exceptions import (
    IDENTITY_PROVIDER,
    DownstreamFailureException,
    RoleNotSeededException,
)

logger = logging.getLogger(__name__)

RowBuilder = Callable[[SagaContext], Mapping[str, Any]]


def profile_fields(profile: ProfileInput) -> dict[str, Any]:
    """Profile columns for an onboarded user (id is added by the step)."""
    return {
        "full_name": profile.full_name,
        "avatar_url": profile.avatar_url,
        "phone": profile.phone,
        "address": profile.address,
        "date_of_birth": profile.date_of_birth,
        "gender": profile.gender,
        "is_active": profile.is_active,
    }


class OnboardingSteps:
    """Factory of provisioning steps bound to one store and identity provider."""

    def __init__(self, store: IRelationalStore, identity: IIdentityProvider) -> None:
        self.store = store
        self.identity = identity

    def create_row(
        self,
        name: str,
        table: str,
        build_row: RowBuilder,
        result_key: str,
        id_key: str | None = None,
    ) -> SagaStep:
        """Insert one row; the stored row lands in context[result_key] and is deleted by id on rollback.

        When id_key is given the new row id is also exposed as context[id_key].
        """

        async def forward(context: SagaContext) -> dict[str, Any]:
            stored = await self.store.insert(table, build_row(context))
            produced: dict[str, Any] = {result_key: stored}
            if id_key:
                produced[id_key] = stored["id"]
            return produced

        async def compensate(context: SagaContext) -> None:
            await self.store.delete(table, {"id": context[result_key]["id"]})

        return SagaStep(name, forward, compensate)

    def create_identity_account(self, email: str, password: str) -> SagaStep:
        """Create the identity-provider account; context gains user_id and email."""

        async def forward(_context: SagaContext) -> dict[str, Any]:
            account = await self.identity.create_account(email, password)
            return {"user_id": account.id, "email": account.email}

        async def compensate(context: SagaContext) -> None:
            # delete_account never raises; surface a False so the rollback records it
            if not await self.identity.delete_account(context["user_id"]):
                raise DownstreamFailureException(
                    IDENTITY_PROVIDER,
                    f"Identity account {context['user_id']} could not be deleted",
                )

        return SagaStep("create_identity_account", forward, compensate)

    def create_profile(self, fields: Mapping[str, Any], set_current_branch: bool = False) -> SagaStep:
        """Create the profile keyed by the new account id."""

        async def forward(context: SagaContext) -> dict[str, Any]:
            row = {"id": context["user_id"], **fields}
            if set_current_branch:
                row["current_branch_id"] = context["branch_id"]
            await self.store.insert(tables.PROFILES, row)
            return {}

        async def compensate(context: SagaContext) -> None:
            await self.store.delete(tables.PROFILES, {"id": context["user_id"]})

        return SagaStep("create_profile", forward, compensate)

    def create_membership(self, is_primary: bool) -> SagaStep:
        """Attach the new user to context branch_id."""

        async def forward(context: SagaContext) -> dict[str, Any]:
            await self.store.insert(
                tables.USER_BRANCHES,
                {
                    "user_id": context["user_id"],
                    "branch_id": context["branch_id"],
                    "is_primary": is_primary,
                },
            )
            return {}

        async def compensate(context: SagaContext) -> None:
            await self.store.delete(
                tables.USER_BRANCHES,
                {"user_id": context["user_id"], "branch_id": context["branch_id"]},
            )

        return SagaStep("create_membership", forward, compensate)

    def lookup_role(self, role_name: str) -> SagaStep:
        """Resolve a seeded role by name into context role_id (read-only)."""

        async def forward(_context: SagaContext) -> dict[str, Any]:
            role = await self.store.select_one(tables.ROLES, {"name": role_name})
            if role is None:
                logger.error("Built-in role %s is not seeded in the roles table", role_name)
                raise RoleNotSeededException(role_name)
            return {"role_id": role["id"]}

        return SagaStep(f"lookup_role:{role_name}", forward)

    def assign_role(self, role_id: str | None = None) -> SagaStep:
        """Assign role_id (or the looked-up context role_id) to the user in the branch."""

        def resolve(context: SagaContext) -> str:
            return role_id if role_id is not None else context["role_id"]

        async def forward(context: SagaContext) -> dict[str, Any]:
            rid = resolve(context)
            await self.store.insert(
                tables.USER_ROLES,
                {"user_id": context["user_id"], "role_id": rid, "branch_id": context["branch_id"]},
            )
            return {"role_ids": [*context.get("role_ids", []), rid]}

        async def compensate(context: SagaContext) -> None:
            await self.store.delete(
                tables.USER_ROLES,
                {
                    "user_id": context["user_id"],
                    "role_id": resolve(context),
                    "branch_id": context["branch_id"],
                },
            )

        return SagaStep(f"assign_role:{role_id or 'looked_up'}", forward, compensate)

    def assign_roles(self, role_ids: tuple[str, ...] | list[str]) -> list[SagaStep]:
        """One assignment step per caller-supplied role id, duplicates dropped."""
        return [self.assign_role(rid) for rid in dict.fromkeys(role_ids)]
