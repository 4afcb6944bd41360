"""DTOs for identity accounts, profiles and onboarded users (no dependency on presentation schemas)."""

from dataclasses import dataclass, field
from datetime import date


@dataclass(frozen=True)
class IdentityAccount:
    """Identity-provider account (owned by the identity provider, referenced by profile id)."""

    id: str
    email: str


@dataclass(frozen=True)
class ProfileInput:
    """Personal fields shared by every onboarding workflow (write-model for profiles)."""

    email: str
    password: str
    full_name: str
    avatar_url: str | None = None
    phone: str | None = None
    address: str | None = None
    date_of_birth: date | None = None
    gender: str | None = None
    is_active: bool = True


@dataclass(frozen=True)
class UserOnboardingCommand:
    """Input for generic user onboarding (roles are caller-supplied ids)."""

    profile: ProfileInput
    role_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class OnboardedUserResult:
    """User read-model returned after onboarding."""

    id: str
    email: str
    full_name: str
    branch_id: str
    is_active: bool
    avatar_url: str | None = None
    phone: str | None = None
    address: str | None = None
    date_of_birth: date | None = None
    gender: str | None = None
    role_ids: list[str] = field(default_factory=list)
    staff_id: str | None = None


@dataclass(frozen=True)
class AuthenticatedUser:
    """Caller identity read from a verified access token."""

    id: str
    email: str | None = None
