"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the Supabase-backed ports, the provisioning
services, the authenticated caller and the caller's branch context. Routes
depend only on these dependencies, not on infrastructure directly; tests
override the port dependencies with in-memory fakes.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.application.dtos.branch import BranchContext
from app.application.dtos.user import AuthenticatedUser
from app.application.interfaces import tables
from app.application.interfaces.repositories import IRelationalStore
from app.application.interfaces.services import IIdentityProvider
from app.application.services import (
    RegistrationService,
    StaffOnboardingService,
    StepExecutor,
    StudentOnboardingService,
    UserOnboardingService,
)
from app.core.config import get_settings
from app.domain.exceptions import (
    AuthenticationException,
    BranchAccessException,
    DependencyNotFoundException,
    ValidationException,
)
from app.infrastructure.security.jwt import verify_token
from app.infrastructure.supabase import (
    PostgrestStore,
    SupabaseAuthAdmin,
    get_supabase_client,
)
from app.infrastructure.supabase._rest_client import SupabaseRESTClient

logger = logging.getLogger(__name__)

# One stateless executor serves every request.
_step_executor = StepExecutor()


def _get_supabase_client_or_raise() -> SupabaseRESTClient:
    """Return the Supabase client or raise 503 if not configured."""
    client = get_supabase_client()
    if client is None:
        raise HTTPException(
            status_code=503,
            detail="Supabase client is not initialized",
        )
    return client


def get_relational_store(
    client: Annotated[SupabaseRESTClient, Depends(_get_supabase_client_or_raise)],
) -> IRelationalStore:
    """Relational store port backed by PostgREST."""
    return PostgrestStore(client)


def get_identity_provider(
    client: Annotated[SupabaseRESTClient, Depends(_get_supabase_client_or_raise)],
) -> IIdentityProvider:
    """Identity provider port backed by the Supabase Auth admin API."""
    return SupabaseAuthAdmin(client)


def get_step_executor() -> StepExecutor:
    return _step_executor


StoreDep = Annotated[IRelationalStore, Depends(get_relational_store)]
IdentityDep = Annotated[IIdentityProvider, Depends(get_identity_provider)]
ExecutorDep = Annotated[StepExecutor, Depends(get_step_executor)]


def get_registration_service(
    store: StoreDep, identity: IdentityDep, executor: ExecutorDep
) -> RegistrationService:
    return RegistrationService(
        store,
        identity,
        executor,
        storage_quota_gb=get_settings().default_storage_quota_gb,
    )


def get_staff_onboarding_service(
    store: StoreDep, identity: IdentityDep, executor: ExecutorDep
) -> StaffOnboardingService:
    return StaffOnboardingService(store, identity, executor)


def get_student_onboarding_service(
    store: StoreDep, identity: IdentityDep, executor: ExecutorDep
) -> StudentOnboardingService:
    return StudentOnboardingService(store, identity, executor)


def get_user_onboarding_service(
    store: StoreDep, identity: IdentityDep, executor: ExecutorDep
) -> UserOnboardingService:
    return UserOnboardingService(store, identity, executor)


_http_bearer = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> AuthenticatedUser:
    """Return the caller from a verified Supabase access token; 401 if missing or invalid."""
    if credentials is None:
        raise AuthenticationException("No token provided")
    try:
        payload = verify_token(credentials.credentials)
    except ValueError as e:
        logger.warning("JWT validation failed: %s", e)
        raise AuthenticationException("Invalid or expired token") from e
    return AuthenticatedUser(id=payload["sub"], email=payload.get("email"))


async def get_branch_context(
    request: Request,
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    store: StoreDep,
) -> BranchContext:
    """Resolve the branch the caller acts in and verify membership.

    The branch comes from the branch header, else the caller's profile
    current_branch_id. The caller must be a member of it (user_branches).
    """
    header_name = get_settings().branch_header_name
    branch_id = (request.headers.get(header_name) or "").strip() or None
    if branch_id is None:
        profile = await store.select_one(tables.PROFILES, {"id": current_user.id})
        branch_id = profile.get("current_branch_id") if profile else None
    if not branch_id:
        raise ValidationException("Branch not selected", field=header_name)

    membership = await store.select_one(
        tables.USER_BRANCHES, {"user_id": current_user.id, "branch_id": branch_id}
    )
    if membership is None:
        raise BranchAccessException(branch_id)

    branch = await store.select_one(tables.BRANCHES, {"id": branch_id})
    if branch is None:
        raise DependencyNotFoundException("branch", branch_id, "Branch not found")
    return BranchContext(
        branch_id=branch["id"],
        tenant_id=branch.get("tenant_id"),
        user_id=current_user.id,
    )
