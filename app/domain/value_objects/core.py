"""Domain value objects for the school administration backend.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import random
import re
from dataclasses import dataclass

_NON_ALNUM_RE = re.compile(r"[^A-Z0-9]")

CODE_MAX_LENGTH = 50
GENERATED_PREFIX_LENGTH = 6
MAIN_BRANCH_SUFFIX = "MAIN"
# Room for the default "<school code>-MAIN" branch code.
BRANCH_CODE_MAX_LENGTH = CODE_MAX_LENGTH + len(MAIN_BRANCH_SUFFIX) + 1


def _validate_code(value: str, field_name: str, max_length: int = CODE_MAX_LENGTH) -> None:
    """Codes are free-form: only blank or over-long values are unusable. Raises ValueError."""
    if not value or not value.strip():
        raise ValueError(f"{field_name} must be a non-empty string")
    if len(value) > max_length:
        raise ValueError(f"{field_name} must not exceed {max_length} characters")


@dataclass(frozen=True)
class SchoolCode:
    """Value object for the tenant (school) code.

    Either chosen by the registering admin or generated from the school
    name: first six ASCII alphanumerics upper-cased plus three random digits
    ('Alekaf High School' -> 'ALEKAF042'). A name with no ASCII letters or
    digits yields the digits alone ('042').
    """

    value: str

    def __post_init__(self) -> None:
        _validate_code(self.value, "School code")

    @classmethod
    def generate(cls, school_name: str, rng: random.Random | None = None) -> "SchoolCode":
        """Build a code from the school name with a three-digit random suffix."""
        rng = rng or random.Random()
        prefix = _NON_ALNUM_RE.sub("", school_name.upper())[:GENERATED_PREFIX_LENGTH]
        return cls(f"{prefix}{rng.randrange(1000):03d}")

    def main_branch_code(self) -> "BranchCode":
        """Default branch code for the first branch of this school."""
        return BranchCode(f"{self.value}-{MAIN_BRANCH_SUFFIX}")


@dataclass(frozen=True)
class BranchCode:
    """Value object for a branch code (unique across all tenants)."""

    value: str

    def __post_init__(self) -> None:
        _validate_code(self.value, "Branch code", BRANCH_CODE_MAX_LENGTH)
