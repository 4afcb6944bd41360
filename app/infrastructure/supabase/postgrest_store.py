"""IRelationalStore over Supabase PostgREST.

Translates RestAPIError into the domain taxonomy so workflows never see
transport details: unique violations become ConflictException, foreign-key
violations DependencyNotFoundException, anything else
DownstreamFailureException.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from app.application.interfaces.repositories import Filters
from app.domain.exceptions import (
    RELATIONAL_STORE,
    ConflictException,
    DependencyNotFoundException,
    DownstreamFailureException,
    SchoolAdminException,
)
from app.infrastructure.supabase._rest_client import RestAPIError, SupabaseRESTClient
from app.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


def classify_store_error(error: RestAPIError, table: str) -> SchoolAdminException:
    """Map a PostgREST error to the domain exception the caller should see."""
    if error.code == FOREIGN_KEY_VIOLATION:
        return DependencyNotFoundException("reference", table, error.message)
    if error.code == UNIQUE_VIOLATION or error.status_code == 409:
        return ConflictException(error.message)
    logger.warning(
        "Relational store error on %s: status=%s code=%s message=%s",
        table,
        error.status_code,
        error.code,
        error.message,
    )
    return DownstreamFailureException(RELATIONAL_STORE, error.message, error.status_code)


class PostgrestStore:
    """Row-level store; each call is its own statement (no transactions)."""

    def __init__(self, client: SupabaseRESTClient) -> None:
        self.client = client

    @traced("store.insert")
    async def insert(self, table: str, row: Mapping[str, Any]) -> dict[str, Any]:
        add_span_attributes(**{"db.table": table})
        try:
            rows = await self.client.table(table).insert(row)
        except RestAPIError as e:
            raise classify_store_error(e, table) from e
        if not rows:
            raise DownstreamFailureException(
                RELATIONAL_STORE, f"Insert into {table} returned no row"
            )
        return rows[0]

    @traced("store.select_one")
    async def select_one(self, table: str, filters: Filters) -> dict[str, Any] | None:
        add_span_attributes(**{"db.table": table})
        try:
            rows = await self.client.table(table).select(filters, limit=1)
        except RestAPIError as e:
            raise classify_store_error(e, table) from e
        return rows[0] if rows else None

    @traced("store.update")
    async def update(self, table: str, filters: Filters, patch: Mapping[str, Any]) -> None:
        add_span_attributes(**{"db.table": table})
        try:
            await self.client.table(table).update(filters, patch)
        except RestAPIError as e:
            raise classify_store_error(e, table) from e

    @traced("store.delete")
    async def delete(self, table: str, filters: Filters) -> None:
        add_span_attributes(**{"db.table": table})
        try:
            await self.client.table(table).delete(filters)
        except RestAPIError as e:
            raise classify_store_error(e, table) from e
