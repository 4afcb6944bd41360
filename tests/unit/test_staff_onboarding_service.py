"""Unit tests for StaffOnboardingService."""

from datetime import date

import pytest

from app.application.dtos.branch import BranchContext
from app.application.dtos.staff import StaffOnboardingCommand
from app.application.dtos.user import ProfileInput
from app.application.services.staff_onboarding_service import StaffOnboardingService
from app.domain.exceptions import (
    RELATIONAL_STORE,
    ConflictException,
    DependencyNotFoundException,
    DownstreamFailureException,
)

BRANCH = BranchContext(branch_id="branch-1", tenant_id="tenant-1", user_id="caller")


def _command(**overrides) -> StaffOnboardingCommand:
    fields = {
        "profile": ProfileInput(
            email="teacher@alekaf.test",
            password="secret123",
            full_name="Tom Teacher",
            phone="+256700000001",
        ),
        "employee_id": "EMP-7",
        "department": "Science",
        "join_date": date(2025, 1, 6),
    }
    fields.update(overrides)
    return StaffOnboardingCommand(**fields)


async def test_onboard_creates_staff_with_roles(store, identity, journal) -> None:
    result = await StaffOnboardingService(store, identity).onboard(
        _command(role_ids=("role-subject_teacher", "role-class_teacher")), BRANCH
    )

    staff = store.all("staff")[0]
    assert staff["id"] == result.id
    assert staff["user_id"] == result.user_id
    assert staff["employee_id"] == "EMP-7"
    assert staff["join_date"] == date(2025, 1, 6)
    assert result.role_ids == ["role-subject_teacher", "role-class_teacher"]
    assert result.email == "teacher@alekaf.test"
    assert result.phone == "+256700000001"
    assert {r["role_id"] for r in store.all("user_roles")} == {
        "role-subject_teacher",
        "role-class_teacher",
    }
    assert journal == [
        "create_account",
        "insert:profiles",
        "insert:user_branches",
        "insert:user_roles",
        "insert:user_roles",
        "insert:staff",
    ]


async def test_duplicate_role_ids_are_assigned_once(store, identity) -> None:
    result = await StaffOnboardingService(store, identity).onboard(
        _command(role_ids=("role-class_teacher", "role-class_teacher")), BRANCH
    )
    assert result.role_ids == ["role-class_teacher"]
    assert len(store.all("user_roles")) == 1


async def test_onboard_without_roles_or_join_date(store, identity) -> None:
    result = await StaffOnboardingService(store, identity).onboard(
        _command(join_date=None), BRANCH
    )
    assert result.role_ids == []
    assert store.all("staff")[0]["join_date"] is None
    assert store.all("user_roles") == []


async def test_taken_email_creates_nothing(store, identity) -> None:
    identity.accounts["existing"] = "teacher@alekaf.test"

    with pytest.raises(ConflictException):
        await StaffOnboardingService(store, identity).onboard(_command(), BRANCH)

    assert store.mutations() == []


async def test_unknown_role_id_rolls_back_everything(store, identity, journal) -> None:
    store.fail(
        "insert",
        "user_roles",
        DependencyNotFoundException("reference", "user_roles", "role does not exist"),
    )

    with pytest.raises(DependencyNotFoundException):
        await StaffOnboardingService(store, identity).onboard(
            _command(role_ids=("role-unknown",)), BRANCH
        )

    assert identity.accounts == {}
    assert journal[-3:] == ["delete:user_branches", "delete:profiles", "delete_account"]


async def test_staff_insert_failure_deletes_account(store, identity, journal) -> None:
    store.fail("insert", "staff", DownstreamFailureException(RELATIONAL_STORE, "down", 503))

    with pytest.raises(DownstreamFailureException):
        await StaffOnboardingService(store, identity).onboard(
            _command(role_ids=("role-subject_teacher",)), BRANCH
        )

    assert identity.accounts == {}
    for table in ("profiles", "user_branches", "user_roles", "staff"):
        assert store.all(table) == [], table
    assert journal[-4:] == [
        "delete:user_roles",
        "delete:user_branches",
        "delete:profiles",
        "delete_account",
    ]
