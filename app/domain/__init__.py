"""Domain layer: value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import BuiltinRole, Gender
from app.domain.exceptions import (
    AuthenticationException,
    BranchAccessException,
    ConflictException,
    DependencyNotFoundException,
    DownstreamFailureException,
    RoleNotSeededException,
    SchoolAdminException,
    ValidationException,
)
from app.domain.value_objects import BranchCode, SchoolCode

__all__ = [
    # Enums
    "BuiltinRole",
    "Gender",
    # Exceptions
    "AuthenticationException",
    "BranchAccessException",
    "ConflictException",
    "DependencyNotFoundException",
    "DownstreamFailureException",
    "RoleNotSeededException",
    "SchoolAdminException",
    "ValidationException",
    # Value objects
    "BranchCode",
    "SchoolCode",
]
