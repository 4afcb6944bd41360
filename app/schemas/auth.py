"""Auth API schemas (public school registration)."""

from typing import Any

from pydantic import EmailStr, Field, field_validator

from app.application.dtos.tenant import RegistrationCommand, RegistrationResult
from app.schemas.common import CamelModel

_TRIMMED_FIELDS = (
    "school_name",
    "school_code",
    "school_domain",
    "branch_name",
    "branch_code",
    "branch_address",
    "branch_phone",
    "branch_email",
    "full_name",
    "phone",
)


class RegisterRequest(CamelModel):
    """Request body for POST /auth/register: new school, its main branch and admin."""

    school_name: str = Field(..., min_length=1)
    school_code: str | None = None
    school_domain: str | None = None
    branch_name: str = Field(..., min_length=1)
    branch_code: str | None = None
    branch_address: str | None = None
    branch_phone: str | None = None
    branch_email: EmailStr | None = None
    email: EmailStr
    password: str = Field(..., min_length=6, description="Password (min 6 characters)")
    full_name: str = Field(..., min_length=1)
    phone: str | None = None

    @field_validator(*_TRIMMED_FIELDS, mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    def to_command(self) -> RegistrationCommand:
        return RegistrationCommand(
            school_name=self.school_name,
            branch_name=self.branch_name,
            email=str(self.email),
            password=self.password,
            full_name=self.full_name,
            school_code=self.school_code or None,
            school_domain=self.school_domain or None,
            branch_code=self.branch_code or None,
            branch_address=self.branch_address,
            branch_phone=self.branch_phone,
            branch_email=str(self.branch_email) if self.branch_email else None,
            phone=self.phone,
        )


class RegisteredUserResponse(CamelModel):
    id: str
    email: str
    full_name: str
    tenant_id: str
    branch_id: str


class RegisterResponse(CamelModel):
    """Registration result. Tokens are empty: the admin signs in separately."""

    user: RegisteredUserResponse
    access_token: str = ""
    refresh_token: str = ""

    @classmethod
    def from_result(cls, result: RegistrationResult) -> "RegisterResponse":
        user = result.user
        return cls(
            user=RegisteredUserResponse(
                id=user.id,
                email=user.email,
                full_name=user.full_name,
                tenant_id=user.tenant_id,
                branch_id=user.branch_id,
            ),
            access_token=result.access_token,
            refresh_token=result.refresh_token,
        )
