"""Unit tests for RegistrationService (tenant bootstrap saga) against in-memory fakes."""

import logging
import random

import pytest

from app.application.dtos.tenant import RegistrationCommand
from app.application.services.registration_service import RegistrationService
from app.domain.exceptions import (
    IDENTITY_PROVIDER,
    RELATIONAL_STORE,
    ConflictException,
    DownstreamFailureException,
    RoleNotSeededException,
    SchoolAdminException,
    ValidationException,
)

CREATED_TABLES = ("tenants", "branches", "profiles", "user_branches", "user_roles")


def _command(**overrides) -> RegistrationCommand:
    fields = {
        "school_name": "Alekaf High School",
        "branch_name": "Main Campus",
        "email": "admin@alekaf.test",
        "password": "secret123",
        "full_name": "Ada Admin",
        "school_code": "ALEKAF001",
    }
    fields.update(overrides)
    return RegistrationCommand(**fields)


def _store_down(message: str = "store unavailable") -> DownstreamFailureException:
    return DownstreamFailureException(RELATIONAL_STORE, message, 503)


async def test_register_creates_tenant_branch_admin(store, identity, journal) -> None:
    result = await RegistrationService(store, identity).register(_command(phone="+256700000000"))

    tenant = store.all("tenants")[0]
    branch = store.all("branches")[0]
    assert tenant["code"] == "ALEKAF001"
    assert tenant["is_active"] is True
    assert branch["code"] == "ALEKAF001-MAIN"
    assert branch["tenant_id"] == tenant["id"]
    assert branch["storage_quota_gb"] == 100

    user = result.user
    assert user.tenant_id == tenant["id"]
    assert user.branch_id == branch["id"]
    assert user.email == "admin@alekaf.test"
    assert user.full_name == "Ada Admin"
    assert identity.accounts == {user.id: "admin@alekaf.test"}

    profile = store.all("profiles")[0]
    assert profile["id"] == user.id
    assert profile["current_branch_id"] == branch["id"]
    assert profile["phone"] == "+256700000000"
    assert store.all("user_branches")[0]["is_primary"] is True
    assert store.all("user_roles") == [
        {
            "id": store.all("user_roles")[0]["id"],
            "user_id": user.id,
            "role_id": "role-school_admin",
            "branch_id": branch["id"],
        }
    ]
    assert journal == [
        "insert:tenants",
        "insert:branches",
        "create_account",
        "insert:profiles",
        "insert:user_branches",
        "insert:user_roles",
    ]


async def test_register_returns_empty_tokens(store, identity) -> None:
    result = await RegistrationService(store, identity).register(_command())
    assert result.access_token == ""
    assert result.refresh_token == ""


async def test_register_generates_codes_when_omitted(store, identity) -> None:
    service = RegistrationService(store, identity, rng=random.Random(7))
    await service.register(_command(school_code=None))

    code = store.all("tenants")[0]["code"]
    assert code.startswith("ALEKAF")
    assert len(code) == 9
    assert code[6:].isdigit()
    assert store.all("branches")[0]["code"] == f"{code}-MAIN"


async def test_register_uses_given_branch_code_and_quota(store, identity) -> None:
    service = RegistrationService(store, identity, storage_quota_gb=25)
    await service.register(_command(branch_code="ALEKAF001-EAST"))

    branch = store.all("branches")[0]
    assert branch["code"] == "ALEKAF001-EAST"
    assert branch["storage_quota_gb"] == 25


async def test_non_latin_school_name_gets_digit_only_code(store, identity) -> None:
    service = RegistrationService(store, identity, rng=random.Random(7))
    await service.register(_command(school_name="مدرسة النور", school_code=None))

    code = store.all("tenants")[0]["code"]
    assert len(code) == 3
    assert code.isdigit()
    assert store.all("branches")[0]["code"] == f"{code}-MAIN"


async def test_free_form_school_code_is_accepted(store, identity) -> None:
    await RegistrationService(store, identity).register(_command(school_code="ALE_KAF1"))

    assert store.all("tenants")[0]["code"] == "ALE_KAF1"
    assert store.all("branches")[0]["code"] == "ALE_KAF1-MAIN"


async def test_overlong_school_code_is_rejected_before_any_call(store, identity) -> None:
    with pytest.raises(ValidationException) as exc_info:
        await RegistrationService(store, identity).register(_command(school_code="A" * 51))

    assert exc_info.value.details == {"field": "schoolCode"}
    assert store.calls == []
    assert identity.calls == []


async def test_existing_school_code_short_circuits(store, identity) -> None:
    """A taken tenant code fails at the guard with zero mutating calls."""
    store.seed("tenants", {"code": "ALEKAF001", "name": "Existing"})

    with pytest.raises(ConflictException) as exc_info:
        await RegistrationService(store, identity).register(_command())

    assert exc_info.value.message == (
        'School code "ALEKAF001" already exists. Please choose a different code.'
    )
    assert store.mutations() == []
    assert identity.calls == []


async def test_registering_the_same_code_twice_conflicts(store, identity) -> None:
    service = RegistrationService(store, identity)
    await service.register(_command())
    mutations_after_first = len(store.mutations())

    with pytest.raises(ConflictException):
        await service.register(_command(email="second@alekaf.test"))

    assert len(store.mutations()) == mutations_after_first
    assert len(store.all("branches")) == 1
    assert len(store.all("profiles")) == 1
    assert len(identity.accounts) == 1


async def test_existing_branch_code_removes_new_tenant(store, identity, journal) -> None:
    store.seed("branches", {"code": "ALEKAF001-MAIN", "tenant_id": "other"})

    with pytest.raises(ConflictException, match='Branch code "ALEKAF001-MAIN" already exists'):
        await RegistrationService(store, identity).register(_command())

    assert journal == ["insert:tenants", "delete:tenants"]
    assert store.all("tenants") == []


async def test_taken_email_rolls_back_tenant_and_branch(store, identity, journal) -> None:
    identity.accounts["existing"] = "admin@alekaf.test"

    with pytest.raises(ConflictException, match="User with this email already exists"):
        await RegistrationService(store, identity).register(_command())

    assert store.all("tenants") == []
    assert store.all("branches") == []
    assert journal[-2:] == ["delete:branches", "delete:tenants"]


def _fail_tenant(store, identity):
    store.fail("insert", "tenants", _store_down())


def _fail_branch(store, identity):
    store.fail("insert", "branches", _store_down())


def _fail_identity(store, identity):
    identity.create_error = DownstreamFailureException(IDENTITY_PROVIDER, "auth down", 500)


def _fail_profile(store, identity):
    store.fail("insert", "profiles", _store_down())


def _fail_membership(store, identity):
    store.fail("insert", "user_branches", _store_down())


def _unseed_admin_role(store, identity):
    store.rows["roles"] = [r for r in store.rows["roles"] if r["name"] != "school_admin"]


def _fail_role_assignment(store, identity):
    store.fail("insert", "user_roles", _store_down())


FULL_UNDO = [
    "delete:user_branches",
    "delete:profiles",
    "delete_account",
    "delete:branches",
    "delete:tenants",
]


@pytest.mark.parametrize(
    ("inject", "expected_error", "expected_undo"),
    [
        (_fail_tenant, DownstreamFailureException, []),
        (_fail_branch, DownstreamFailureException, ["delete:tenants"]),
        (_fail_identity, DownstreamFailureException, ["delete:branches", "delete:tenants"]),
        (_fail_profile, DownstreamFailureException, FULL_UNDO[2:]),
        (_fail_membership, DownstreamFailureException, FULL_UNDO[1:]),
        (_unseed_admin_role, RoleNotSeededException, FULL_UNDO),
        (_fail_role_assignment, DownstreamFailureException, FULL_UNDO),
    ],
    ids=["tenant", "branch", "identity", "profile", "membership", "role_lookup", "role_assignment"],
)
async def test_failure_at_any_step_leaves_nothing_behind(
    store, identity, journal, inject, expected_error, expected_undo
) -> None:
    """Every row and the account created before the failing step are removed, newest first."""
    inject(store, identity)

    with pytest.raises(expected_error):
        await RegistrationService(store, identity).register(_command())

    for table in CREATED_TABLES:
        assert store.all(table) == [], table
    assert identity.accounts == {}
    assert [entry for entry in journal if entry.startswith("delete")] == expected_undo


async def test_role_assignment_failure_surfaces_single_error(store, identity) -> None:
    store.fail("insert", "user_roles", _store_down("insert rejected"))

    with pytest.raises(SchoolAdminException) as exc_info:
        await RegistrationService(store, identity).register(_command())

    assert isinstance(exc_info.value, DownstreamFailureException)
    assert exc_info.value.message == "insert rejected"
    assert any(op == "delete_account" for op, _ in identity.calls)


async def test_compensation_failure_keeps_original_error(store, identity, journal) -> None:
    """A failing profile delete does not hide the forward error or stop the rollback."""
    store.fail("insert", "user_roles", _store_down("role assignment failed"))
    store.fail("delete", "profiles", _store_down("profile delete failed"))

    with pytest.raises(DownstreamFailureException, match="role assignment failed"):
        await RegistrationService(store, identity).register(_command())

    assert [entry for entry in journal if entry.startswith("delete")] == FULL_UNDO
    assert store.all("tenants") == []
    assert store.all("branches") == []
    assert identity.accounts == {}
    assert len(store.all("profiles")) == 1


async def test_identity_delete_failure_is_logged(store, identity, caplog) -> None:
    identity.delete_succeeds = False
    store.fail("insert", "profiles", _store_down("profile insert failed"))

    with caplog.at_level(logging.ERROR, logger="app.application.services.step_executor"):
        with pytest.raises(DownstreamFailureException, match="profile insert failed"):
            await RegistrationService(store, identity).register(_command())

    assert any(
        "create_identity_account" in record.getMessage() for record in caplog.records
    )
    assert store.all("tenants") == []


async def test_retry_after_rollback_succeeds(store, identity) -> None:
    """Re-submitting the same input after a fully compensated failure succeeds."""
    service = RegistrationService(store, identity)
    store.fail("insert", "user_roles", _store_down())
    with pytest.raises(DownstreamFailureException):
        await service.register(_command())

    store.clear_failure("insert", "user_roles")
    result = await service.register(_command())

    assert [t["id"] for t in store.all("tenants")] == [result.user.tenant_id]
    assert [b["id"] for b in store.all("branches")] == [result.user.branch_id]
    assert list(identity.accounts) == [result.user.id]
