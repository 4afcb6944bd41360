"""DTOs for tenant bootstrap (registration) use cases."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RegistrationCommand:
    """Input for registering a new school: tenant, main branch and its administrator.

    Optional codes are generated when omitted (school code from the name,
    branch code as '<schoolCode>-MAIN').
    """

    school_name: str
    branch_name: str
    email: str
    password: str
    full_name: str
    school_code: str | None = None
    school_domain: str | None = None
    branch_code: str | None = None
    branch_address: str | None = None
    branch_phone: str | None = None
    branch_email: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class RegisteredUser:
    """Identity summary of the administrator created by registration."""

    id: str
    email: str
    full_name: str
    tenant_id: str
    branch_id: str


@dataclass(frozen=True)
class RegistrationResult:
    """Result of registration. Tokens are always empty: the admin logs in separately."""

    user: RegisteredUser
    access_token: str = ""
    refresh_token: str = ""
