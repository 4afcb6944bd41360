"""Tests for POST /auth/register (public school registration)."""

from httpx import AsyncClient

from app.domain.exceptions import IDENTITY_PROVIDER, DownstreamFailureException

REGISTER_URL = "/api/v1/auth/register"


def _payload(**overrides) -> dict:
    body = {
        "schoolName": "Alekaf High School",
        "schoolCode": "ALEKAF001",
        "branchName": "Main Campus",
        "email": "admin@alekaf.test",
        "password": "secret123",
        "fullName": "Ada Admin",
    }
    body.update(overrides)
    return body


async def test_register_returns_201_with_user_and_empty_tokens(client: AsyncClient, store) -> None:
    response = await client.post(REGISTER_URL, json=_payload())

    assert response.status_code == 201
    data = response.json()["data"]
    tenant = store.all("tenants")[0]
    branch = store.all("branches")[0]
    assert data["user"]["email"] == "admin@alekaf.test"
    assert data["user"]["fullName"] == "Ada Admin"
    assert data["user"]["tenantId"] == tenant["id"]
    assert data["user"]["branchId"] == branch["id"]
    assert data["accessToken"] == ""
    assert data["refreshToken"] == ""


async def test_register_trims_fields_and_lowercases_email(client: AsyncClient, store, identity) -> None:
    response = await client.post(
        REGISTER_URL,
        json=_payload(schoolName="  Alekaf High School  ", email=" Admin@Alekaf.Test "),
    )

    assert response.status_code == 201
    assert store.all("tenants")[0]["name"] == "Alekaf High School"
    assert list(identity.accounts.values()) == ["admin@alekaf.test"]


async def test_register_duplicate_school_code_returns_409(client: AsyncClient) -> None:
    assert (await client.post(REGISTER_URL, json=_payload())).status_code == 201

    response = await client.post(REGISTER_URL, json=_payload(email="other@alekaf.test"))

    assert response.status_code == 409
    assert response.json() == {
        "error": {
            "code": "CONFLICT",
            "message": 'School code "ALEKAF001" already exists. Please choose a different code.',
        }
    }


async def test_register_missing_school_name_returns_400(client: AsyncClient) -> None:
    body = _payload()
    del body["schoolName"]

    response = await client.post(REGISTER_URL, json=body)

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert "schoolName" in error["message"]


async def test_register_short_password_returns_400(client: AsyncClient, store) -> None:
    response = await client.post(REGISTER_URL, json=_payload(password="12345"))
    assert response.status_code == 400
    assert store.all("tenants") == []


async def test_register_non_latin_school_name_without_code_returns_201(
    client: AsyncClient, store
) -> None:
    body = _payload(schoolName="مدرسة النور")
    del body["schoolCode"]

    response = await client.post(REGISTER_URL, json=body)

    assert response.status_code == 201
    assert store.all("tenants")[0]["code"].isdigit()


async def test_register_overlong_school_code_returns_400(client: AsyncClient) -> None:
    response = await client.post(REGISTER_URL, json=_payload(schoolCode="A" * 51))
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_register_missing_admin_role_returns_404(client: AsyncClient, store, identity) -> None:
    store.rows["roles"] = []

    response = await client.post(REGISTER_URL, json=_payload())

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "DEPENDENCY_NOT_FOUND"
    assert store.all("tenants") == []
    assert identity.accounts == {}


async def test_register_identity_outage_returns_502(client: AsyncClient, store, identity) -> None:
    identity.create_error = DownstreamFailureException(IDENTITY_PROVIDER, "auth down", 503)

    response = await client.post(REGISTER_URL, json=_payload())

    assert response.status_code == 502
    assert response.json()["error"] == {"code": "DOWNSTREAM_FAILURE", "message": "auth down"}
    assert store.all("tenants") == []
    assert store.all("branches") == []
