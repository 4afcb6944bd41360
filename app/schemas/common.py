"""Shared API schema bases: camelCase JSON and the {data: ...} success envelope."""

from datetime import date
from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from app.application.dtos.user import ProfileInput

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base for request/response bodies: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DataResponse(CamelModel, Generic[T]):
    """Success envelope: every 2xx body is {"data": ...}."""

    data: T


class ProfileFields(CamelModel):
    """Personal fields accepted by every onboarding endpoint."""

    email: EmailStr
    password: str = Field(..., min_length=6, description="Password (min 6 characters)")
    full_name: str = Field(..., min_length=1)
    avatar_url: str | None = None
    phone: str | None = None
    address: str | None = None
    date_of_birth: date | None = None
    gender: Literal["male", "female"] | None = None
    is_active: bool = True

    def to_profile_input(self) -> ProfileInput:
        return ProfileInput(
            email=str(self.email),
            password=self.password,
            full_name=self.full_name,
            avatar_url=self.avatar_url,
            phone=self.phone,
            address=self.address,
            date_of_birth=self.date_of_birth,
            gender=self.gender,
            is_active=self.is_active,
        )
