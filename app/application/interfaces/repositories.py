"""Store interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
The relational store offers row-level operations only; there is no
multi-statement transaction, so workflows compensate failed steps themselves.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

# Filter values: a scalar means equality, a list/tuple/set means membership,
# None means IS NULL.
Filters = Mapping[str, Any]


class IRelationalStore(Protocol):
    """Protocol for the relational store (one table per collection)."""

    async def insert(self, table: str, row: Mapping[str, Any]) -> dict[str, Any]:
        """Insert one row and return it as stored (including generated id).

        Raises ConflictException on a unique-constraint violation,
        DependencyNotFoundException on a foreign-key violation and
        DownstreamFailureException on any other store error.
        """

    async def select_one(self, table: str, filters: Filters) -> dict[str, Any] | None:
        """Return the first row matching all filters, or None."""

    async def update(self, table: str, filters: Filters, patch: Mapping[str, Any]) -> None:
        """Apply patch to every row matching filters."""

    async def delete(self, table: str, filters: Filters) -> None:
        """Delete every row matching filters. Deleting nothing is not an error."""
