"""DTOs for the request's branch context."""

from dataclasses import dataclass


@dataclass(frozen=True)
class BranchContext:
    """Branch the caller is acting in, resolved from header or profile and membership-checked."""

    branch_id: str
    tenant_id: str | None
    user_id: str
