"""Pytest configuration and fixtures for school-admin.

Required settings are given test values before app.main is imported, so the
app builds without a real Supabase project. API tests replace the store and
identity provider with the in-memory fakes through dependency overrides.
"""

import os
import time

os.environ.setdefault("SUPABASE_URL", "http://supabase.test")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("TELEMETRY_ENABLED", "false")
os.environ.setdefault("RATE_LIMIT_REGISTER", "1000/minute")

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt

from app.api.v1.dependencies import get_identity_provider, get_relational_store
from app.core.config import get_settings
from app.main import app
from fakes import FakeIdentityProvider, InMemoryStore


@pytest.fixture
def journal() -> list[str]:
    """Mutations of the store and identity provider, interleaved in call order."""
    return []


@pytest.fixture
def store(journal: list[str]) -> InMemoryStore:
    """Empty in-memory store with the built-in roles seeded."""
    fake = InMemoryStore(journal=journal)
    fake.seed_builtin_roles()
    return fake


@pytest.fixture
def identity(journal: list[str]) -> FakeIdentityProvider:
    return FakeIdentityProvider(journal=journal)


@pytest.fixture
async def client(store: InMemoryStore, identity: FakeIdentityProvider) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI) wired to the fakes."""
    app.dependency_overrides[get_relational_store] = lambda: store
    app.dependency_overrides[get_identity_provider] = lambda: identity
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


def make_token(user_id: str, email: str = "caller@example.com", expires_in: int = 3600) -> str:
    """Supabase-style access token signed with the test JWT secret."""
    settings = get_settings()
    claims = {
        "sub": user_id,
        "email": email,
        "aud": settings.supabase_jwt_audience,
        "role": "authenticated",
        "exp": int(time.time()) + expires_in,
    }
    return jwt.encode(
        claims,
        settings.supabase_jwt_secret.get_secret_value(),
        algorithm=settings.jwt_algorithm,
    )


@pytest.fixture
def branch_member(store: InMemoryStore) -> dict[str, str]:
    """A caller who belongs to a seeded branch; returns ids and auth headers."""
    tenant = store.seed("tenants", {"name": "Alekaf High", "code": "ALEKAF001", "is_active": True})
    branch = store.seed(
        "branches", {"tenant_id": tenant["id"], "name": "Main", "code": "ALEKAF001-MAIN"}
    )
    user_id = "caller-1"
    store.seed("profiles", {"id": user_id, "full_name": "Caller", "current_branch_id": branch["id"]})
    store.seed("user_branches", {"user_id": user_id, "branch_id": branch["id"], "is_primary": True})
    return {
        "user_id": user_id,
        "tenant_id": tenant["id"],
        "branch_id": branch["id"],
        "token": make_token(user_id),
    }


@pytest.fixture
def token_factory():
    """make_token as a fixture, for tests that need custom claims or expiry."""
    return make_token
