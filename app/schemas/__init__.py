"""Pydantic request/response schemas for the API."""

from app.schemas.auth import RegisteredUserResponse, RegisterRequest, RegisterResponse
from app.schemas.common import CamelModel, DataResponse, ProfileFields
from app.schemas.health import HealthResponse
from app.schemas.staff import StaffCreateRequest, StaffResponse
from app.schemas.student import (
    BulkImportRowErrorResponse,
    StudentBulkImportRequest,
    StudentBulkImportResponse,
    StudentCreateRequest,
    StudentResponse,
)
from app.schemas.user import UserCreateRequest, UserResponse

__all__ = [
    "BulkImportRowErrorResponse",
    "CamelModel",
    "DataResponse",
    "HealthResponse",
    "ProfileFields",
    "RegisterRequest",
    "RegisterResponse",
    "RegisteredUserResponse",
    "StaffCreateRequest",
    "StaffResponse",
    "StudentBulkImportRequest",
    "StudentBulkImportResponse",
    "StudentCreateRequest",
    "StudentResponse",
    "UserCreateRequest",
    "UserResponse",
]
