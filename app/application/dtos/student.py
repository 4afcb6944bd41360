"""DTOs for student onboarding."""

from dataclasses import dataclass
from datetime import date

from app.application.dtos.user import ProfileInput


@dataclass(frozen=True)
class StudentOnboardingCommand:
    """Input for student onboarding.

    student_code is the human-readable id (e.g. '2025-G5-A-001'), unique
    within a branch. academic_year_id defaults to the tenant's active year.
    """

    profile: ProfileInput
    student_code: str
    class_id: str | None = None
    section_id: str | None = None
    blood_group: str | None = None
    medical_notes: str | None = None
    admission_date: date | None = None
    academic_year_id: str | None = None


@dataclass(frozen=True)
class StudentResult:
    """Student read-model (student row joined with profile and identity email)."""

    id: str
    user_id: str
    branch_id: str
    student_code: str
    full_name: str
    email: str
    is_active: bool
    academic_year_id: str
    class_id: str | None = None
    section_id: str | None = None
    blood_group: str | None = None
    medical_notes: str | None = None
    admission_date: date | None = None
    phone: str | None = None


@dataclass(frozen=True)
class BulkImportRowError:
    """A rejected row of a bulk import; row is 1-based."""

    row: int
    error: str


@dataclass(frozen=True)
class BulkImportResult:
    """Outcome of a bulk import: count of created students plus per-row failures."""

    success: int
    errors: list[BulkImportRowError]
