"""Domain exceptions for the school administration backend.

Defines the error taxonomy raised by provisioning workflows and the ports
they call. These exceptions are independent of infrastructure concerns.
Presentation layer maps them to HTTP responses in exception handlers.
"""

from typing import Any

IDENTITY_PROVIDER = "identity_provider"
RELATIONAL_STORE = "relational_store"


class SchoolAdminException(Exception):
    """Base exception for all application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the uniform error envelope: {"error": {"code", "message"}}."""
        return {"error": {"code": self.error_code, "message": self.message}}


class ValidationException(SchoolAdminException):
    """Raised when input is malformed before any provisioning step runs."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ConflictException(SchoolAdminException):
    """Raised on a uniqueness violation (pre-flight guard or store unique constraint)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        """Initialize with message and the conflicting field/value when known.

        Args:
            message: Human-readable description shown to the caller.
            field: Optional column that collided (e.g. 'code').
            value: Optional value that collided.
        """
        details: dict[str, Any] = {}
        if field:
            details["field"] = field
            details["value"] = value
        super().__init__(message, "CONFLICT", details)


class DependencyNotFoundException(SchoolAdminException):
    """Raised when a required pre-existing row is missing (role, class, academic year)."""

    def __init__(
        self,
        resource_type: str,
        identifier: str,
        message: str | None = None,
    ) -> None:
        """Initialize with the missing resource type and identifier.

        Args:
            resource_type: Type of resource (e.g. 'role', 'class').
            identifier: Id or name that was looked up.
            message: Optional message; defaults to '<type> not found: <identifier>'.
        """
        super().__init__(
            message or f"{resource_type} not found: {identifier}",
            "DEPENDENCY_NOT_FOUND",
            {"resource_type": resource_type, "identifier": identifier},
        )


class RoleNotSeededException(DependencyNotFoundException):
    """Raised when a built-in role (e.g. school_admin) is absent from the roles table.

    Built-in roles are seeded with the database, so this is a configuration
    error rather than a normal not-found.
    """

    def __init__(self, role_name: str) -> None:
        super().__init__(
            "role",
            role_name,
            f"Role '{role_name}' not found in database",
        )


class DownstreamFailureException(SchoolAdminException):
    """Raised when the identity provider or relational store returns an unexpected error."""

    def __init__(
        self,
        dependency: str,
        message: str,
        upstream_status: int | None = None,
    ) -> None:
        """Initialize with the failing dependency and its status.

        Args:
            dependency: IDENTITY_PROVIDER or RELATIONAL_STORE.
            message: Error message reported by the dependency.
            upstream_status: HTTP status returned upstream; None for transport errors.
        """
        self.dependency = dependency
        self.upstream_status = upstream_status
        super().__init__(
            message,
            "DOWNSTREAM_FAILURE",
            {"dependency": dependency, "upstream_status": upstream_status},
        )

    @property
    def rejected_by_store(self) -> bool:
        """True when the relational store answered with a 4xx (the request itself was refused)."""
        return (
            self.dependency == RELATIONAL_STORE
            and self.upstream_status is not None
            and 400 <= self.upstream_status < 500
        )


class AuthenticationException(SchoolAdminException):
    """Raised when authentication fails (e.g. missing, invalid or expired token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        """Initialize with optional message.

        Args:
            message: Description of the authentication failure.
        """
        super().__init__(message, "AUTHENTICATION_ERROR")


class BranchAccessException(SchoolAdminException):
    """Raised when the caller is not a member of the requested branch."""

    def __init__(self, branch_id: str) -> None:
        super().__init__(
            "You do not have access to this branch",
            "BRANCH_ACCESS_DENIED",
            {"branch_id": branch_id},
        )
