"""IIdentityProvider over the Supabase Auth (GoTrue) admin API."""

from __future__ import annotations

import logging

from app.application.dtos.user import IdentityAccount
from app.domain.exceptions import (
    IDENTITY_PROVIDER,
    ConflictException,
    DownstreamFailureException,
)
from app.infrastructure.supabase._rest_client import RestAPIError, SupabaseRESTClient
from app.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)

_EMAIL_TAKEN_CODES = frozenset({"email_exists", "user_already_exists"})
_EMAIL_TAKEN_PHRASES = ("already registered", "already been registered")


def _is_email_taken(error: RestAPIError) -> bool:
    if error.code in _EMAIL_TAKEN_CODES:
        return True
    message = error.message.lower()
    return any(phrase in message for phrase in _EMAIL_TAKEN_PHRASES)


class SupabaseAuthAdmin:
    """Creates, deletes and looks up identity accounts with the service-role key."""

    def __init__(self, client: SupabaseRESTClient) -> None:
        self.client = client

    @traced("identity.create_account")
    async def create_account(self, email: str, password: str) -> IdentityAccount:
        try:
            user = await self.client.auth_admin().create_user(email, password)
        except RestAPIError as e:
            if _is_email_taken(e):
                raise ConflictException(
                    "User with this email already exists", field="email", value=email
                ) from e
            logger.warning("Identity provider rejected account creation: %s", e)
            raise DownstreamFailureException(IDENTITY_PROVIDER, e.message, e.status_code) from e
        if not user.get("id"):
            raise DownstreamFailureException(IDENTITY_PROVIDER, "Failed to create user")
        return IdentityAccount(id=user["id"], email=user.get("email") or email)

    @traced("identity.delete_account")
    async def delete_account(self, account_id: str) -> bool:
        try:
            await self.client.auth_admin().delete_user(account_id)
        except RestAPIError as e:
            if e.status_code == 404:
                logger.info("Identity account %s already absent", account_id)
                return True
            logger.exception("Failed to delete identity account %s", account_id)
            return False
        logger.info("Deleted identity account %s", account_id)
        return True

    @traced("identity.get_account_by_id")
    async def get_account_by_id(self, account_id: str) -> IdentityAccount | None:
        try:
            user = await self.client.auth_admin().get_user(account_id)
        except RestAPIError as e:
            if e.status_code == 404:
                return None
            raise DownstreamFailureException(IDENTITY_PROVIDER, e.message, e.status_code) from e
        if not user.get("id"):
            return None
        return IdentityAccount(id=user["id"], email=user.get("email") or "")
