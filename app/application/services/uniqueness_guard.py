"""Pre-flight checks on human-chosen identifiers and referenced rows.

Both checks are read-only and run before the first mutating step of an
aggregate. There is no lock between the check and the later insert; the
store's unique constraint (mapped to ConflictException) is the backstop for
two requests racing past the guard.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from app.application.interfaces.repositories import Filters, IRelationalStore
from app.application.services.step_executor import SagaContext, SagaStep
from app.domain.exceptions import ConflictException, DependencyNotFoundException

logger = logging.getLogger(__name__)


class UniquenessGuard:
    """Check-then-reject guard over the relational store."""

    def __init__(self, store: IRelationalStore) -> None:
        self.store = store

    async def ensure_unique(
        self,
        table: str,
        field: str,
        value: Any,
        scope: Mapping[str, Any] | None = None,
        message: str | None = None,
    ) -> None:
        """Raise ConflictException if a row in table already has field == value.

        Args:
            table: Table to look in.
            field: Column holding the human-chosen identifier.
            value: Identifier to check.
            scope: Extra equality filters narrowing the check (e.g. branch_id).
            message: Caller-facing message; defaults to naming field and value.
        """
        filters: dict[str, Any] = {field: value}
        if scope:
            filters.update(scope)
        existing = await self.store.select_one(table, filters)
        if existing is not None:
            logger.info("Uniqueness check failed: %s.%s=%s already taken", table, field, value)
            raise ConflictException(
                message or f"{field} '{value}' already exists",
                field=field,
                value=value,
            )

    async def ensure_exists(
        self,
        table: str,
        filters: Filters,
        resource_type: str,
        identifier: str,
    ) -> dict[str, Any]:
        """Return the row matching filters or raise DependencyNotFoundException."""
        row = await self.store.select_one(table, filters)
        if row is None:
            logger.info("Referenced %s not found: %s", resource_type, identifier)
            raise DependencyNotFoundException(resource_type, identifier)
        return row

    def unique_step(
        self,
        name: str,
        table: str,
        field: str,
        value: Any,
        scope: Mapping[str, Any] | None = None,
        message: str | None = None,
    ) -> SagaStep:
        """ensure_unique as a saga step (read-only, no compensation)."""

        async def forward(_context: SagaContext) -> None:
            await self.ensure_unique(table, field, value, scope=scope, message=message)

        return SagaStep(name, forward)

    def exists_step(
        self,
        name: str,
        table: str,
        filters: Filters,
        resource_type: str,
        identifier: str,
    ) -> SagaStep:
        """ensure_exists as a saga step (read-only, no compensation)."""

        async def forward(_context: SagaContext) -> None:
            await self.ensure_exists(table, filters, resource_type, identifier)

        return SagaStep(name, forward)
