"""Thin Supabase REST client (PostgREST tables + GoTrue admin), no supabase-py.

Both APIs are plain HTTP authenticated with the service-role key, so one
shared httpx.AsyncClient serves them. All calls are async and never block
the event loop.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic_core import to_jsonable_python

from app.infrastructure.supabase._filters import encode_filters


class RestAPIError(Exception):
    """Non-2xx response or transport failure from a Supabase API.

    status_code is None for transport errors (timeout, connection refused).
    code is the API's own error code when the body carries one
    (SQLSTATE such as '23505' for PostgREST, 'email_exists' for GoTrue).
    """

    def __init__(self, status_code: int | None, message: str, code: str | None = None) -> None:
        self.status_code = status_code
        self.message = message
        self.code = code
        super().__init__(f"[{status_code}] {code or '-'}: {message}")


def _error_from_response(resp: httpx.Response) -> RestAPIError:
    try:
        payload = resp.json()
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        return RestAPIError(resp.status_code, resp.text or resp.reason_phrase)
    code = payload.get("error_code") or payload.get("code")
    message = (
        payload.get("message")
        or payload.get("msg")
        or payload.get("error_description")
        or payload.get("error")
        or resp.reason_phrase
    )
    return RestAPIError(resp.status_code, str(message), str(code) if code is not None else None)


async def _request_async(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    headers: Mapping[str, str],
    params: Mapping[str, str] | None = None,
    body: Any = None,
) -> Any:
    """Perform one request; return decoded JSON (None for an empty body).

    Raises:
        RestAPIError: Non-2xx status or transport error.
    """
    try:
        resp = await client.request(
            method,
            url,
            headers=dict(headers),
            params=params,
            json=to_jsonable_python(body) if body is not None else None,
        )
    except httpx.HTTPError as e:
        raise RestAPIError(None, f"{type(e).__name__}: {e}") from e
    if resp.status_code >= 400:
        raise _error_from_response(resp)
    raw = resp.content
    return json.loads(raw.decode()) if raw else None


class TableReference:
    """Reference to one PostgREST table (/rest/v1/<table>)."""

    def __init__(self, client: SupabaseRESTClient, table: str) -> None:
        self._client = client
        self._url = f"{client.rest_url}/{table}"

    async def insert(self, row: Mapping[str, Any]) -> list[dict[str, Any]]:
        """Insert one row and return the stored representation."""
        out = await _request_async(
            self._client.http,
            "POST",
            self._url,
            headers=self._client.headers(prefer="return=representation"),
            body=row,
        )
        return out or []

    async def select(
        self, filters: Mapping[str, Any], *, columns: str = "*", limit: int | None = None
    ) -> list[dict[str, Any]]:
        """Rows matching all filters."""
        params = {"select": columns, **encode_filters(filters)}
        if limit is not None:
            params["limit"] = str(limit)
        out = await _request_async(
            self._client.http,
            "GET",
            self._url,
            headers=self._client.headers(),
            params=params,
        )
        return out or []

    async def update(self, filters: Mapping[str, Any], patch: Mapping[str, Any]) -> None:
        await _request_async(
            self._client.http,
            "PATCH",
            self._url,
            headers=self._client.headers(prefer="return=minimal"),
            params=encode_filters(filters),
            body=patch,
        )

    async def delete(self, filters: Mapping[str, Any]) -> None:
        """Delete matching rows. Matching nothing is not an error."""
        await _request_async(
            self._client.http,
            "DELETE",
            self._url,
            headers=self._client.headers(prefer="return=minimal"),
            params=encode_filters(filters),
        )


class AuthAdminReference:
    """GoTrue admin user endpoints (/auth/v1/admin/users)."""

    def __init__(self, client: SupabaseRESTClient) -> None:
        self._client = client
        self._url = f"{client.auth_url}/admin/users"

    async def create_user(self, email: str, password: str) -> dict[str, Any]:
        """Create a confirmed email/password user and return the user object."""
        out = await _request_async(
            self._client.http,
            "POST",
            self._url,
            headers=self._client.headers(),
            body={"email": email, "password": password, "email_confirm": True},
        )
        out = out or {}
        return out.get("user", out)

    async def get_user(self, user_id: str) -> dict[str, Any]:
        out = await _request_async(
            self._client.http,
            "GET",
            f"{self._url}/{user_id}",
            headers=self._client.headers(),
        )
        out = out or {}
        return out.get("user", out)

    async def delete_user(self, user_id: str) -> None:
        await _request_async(
            self._client.http,
            "DELETE",
            f"{self._url}/{user_id}",
            headers=self._client.headers(),
        )


class SupabaseRESTClient:
    """Lightweight Supabase client over REST (service-role key)."""

    def __init__(
        self,
        url: str,
        service_key: str,
        *,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        base = url.rstrip("/")
        self.rest_url = f"{base}/rest/v1"
        self.auth_url = f"{base}/auth/v1"
        self._service_key = service_key
        self.http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self.http.aclose()

    def headers(self, prefer: str | None = None) -> dict[str, str]:
        headers = {
            "apikey": self._service_key,
            "Authorization": f"Bearer {self._service_key}",
            "Content-Type": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def table(self, table: str) -> TableReference:
        return TableReference(self, table)

    def auth_admin(self) -> AuthAdminReference:
        return AuthAdminReference(self)
