"""Supabase Auth (GoTrue) client for sign-up, sign-in, user lookup and sign-out."""

import logging
from typing import Any

import httpx

from newsdesk.services.types import IdentityUser, SignInResult
from newsdesk.supabase_env import get_anon_key, get_service_role_key, get_supabase_url

logger = logging.getLogger(__name__)

_TIMEOUT_SECONDS = 10


class IdentityError(Exception):
    """Raised when the identity service rejects a request or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _to_user(payload: dict[str, Any]) -> IdentityUser:
    return IdentityUser(id=str(payload["id"]), email=payload.get("email"))


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(payload, dict):
        for key in ("error_description", "msg", "message", "error"):
            if payload.get(key):
                return str(payload[key])
    return f"HTTP {response.status_code}"


class IdentityClient:
    """Thin wrapper around the ``/auth/v1`` REST endpoints."""

    def __init__(self, base_url: str | None = None, api_key: str | None = None) -> None:
        self._base_url = base_url
        self._api_key = api_key

    def _request(
        self,
        method: str,
        path: str,
        *,
        bearer: str | None = None,
        api_key: str | None = None,
        params: dict[str, str] | None = None,
        json: object | None = None,
    ) -> httpx.Response:
        key = api_key or self._api_key or get_anon_key()
        headers = {"apikey": key, "Authorization": f"Bearer {bearer or key}"}
        url = f"{self._base_url or get_supabase_url()}/auth/v1{path}"
        try:
            return httpx.request(
                method, url, headers=headers, params=params, json=json, timeout=_TIMEOUT_SECONDS
            )
        except httpx.HTTPError as exc:
            raise IdentityError(f"Identity service unreachable: {exc}") from exc

    def sign_up(self, email: str, password: str) -> IdentityUser:
        """Register a new account. Raises IdentityError if the service refuses."""
        response = self._request("POST", "/signup", json={"email": email, "password": password})
        if response.is_error:
            raise IdentityError(_error_message(response), response.status_code)
        payload = response.json()
        # With email confirmation off the user is nested in a session payload.
        user = payload.get("user") or payload
        return _to_user(user)

    def sign_in(self, email: str, password: str) -> SignInResult:
        """Exchange email + password for a session. Raises IdentityError on bad credentials."""
        response = self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if response.is_error:
            raise IdentityError(_error_message(response), response.status_code)
        payload = response.json()
        return SignInResult(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token"),
            expires_in=payload.get("expires_in"),
            user=_to_user(payload["user"]),
        )

    def get_user(self, access_token: str, admin: bool = False) -> IdentityUser | None:
        """Return the user owning *access_token*, or None if the token is invalid or expired.

        With *admin* the lookup is made with the service-role key.
        """
        api_key = get_service_role_key() if admin else None
        response = self._request("GET", "/user", bearer=access_token, api_key=api_key)
        if response.status_code in (401, 403):
            return None
        if response.is_error:
            raise IdentityError(_error_message(response), response.status_code)
        return _to_user(response.json())

    def sign_out(self, access_token: str) -> None:
        response = self._request("POST", "/logout", bearer=access_token)
        # An already-expired token is as good as signed out.
        if response.is_error and response.status_code not in (401, 403, 404):
            raise IdentityError(_error_message(response), response.status_code)

    def delete_user(self, user_id: str) -> None:
        """Delete *user_id* with the service-role key. Raises IdentityError on failure."""
        response = self._request(
            "DELETE", f"/admin/users/{user_id}", api_key=get_service_role_key()
        )
        if response.is_error:
            raise IdentityError(_error_message(response), response.status_code)
        logger.info("deleted identity user %s", user_id)

    def health(self) -> None:
        response = self._request("GET", "/health")
        if response.is_error:
            raise IdentityError(_error_message(response), response.status_code)
