"""Domain value objects and shared value types."""

from app.domain.value_objects.core import BranchCode, SchoolCode

__all__ = [
    "BranchCode",
    "SchoolCode",
]
