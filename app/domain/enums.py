"""Domain enumerations for the school administration backend.

Enums represent fixed sets of domain values (e.g. built-in role names).
"""

from enum import Enum


class BuiltinRole(str, Enum):
    """Role names seeded with the database and looked up by name.

    Provisioning never creates roles; it only assigns existing ones.
    """

    SCHOOL_ADMIN = "school_admin"
    STUDENT = "student"
    SUBJECT_TEACHER = "subject_teacher"
    CLASS_TEACHER = "class_teacher"

    @classmethod
    def teaching_roles(cls) -> frozenset[str]:
        """Return role names that require a staff record for the user."""
        return frozenset({cls.SUBJECT_TEACHER.value, cls.CLASS_TEACHER.value})


class Gender(str, Enum):
    """Gender values accepted on profiles."""

    MALE = "male"
    FEMALE = "female"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid gender values as strings.

        Returns:
            List of enum value strings (e.g. for validation or serialization).
        """
        return [gender.value for gender in cls]
