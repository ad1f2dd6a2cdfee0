"""NoteRowStore backed by the Supabase PostgREST gateway."""

import logging
from datetime import datetime
from typing import Any

import httpx

from newsdesk.services.note_store import (
    StorageError,
    StorageErrorKind,
    classify_storage_error,
    dump_notes,
    load_notes,
)
from newsdesk.services.types import NoteRow
from newsdesk.supabase_env import get_anon_key, get_service_role_key, get_supabase_url

logger = logging.getLogger(__name__)

_TABLE = "user_notes"
_TIMEOUT_SECONDS = 10


class SupabaseNoteRowStore:
    """Reads and writes ``user_notes`` rows through ``/rest/v1``.

    With an *access_token* requests run as that user (row-level security
    applies). Without one they run with the service-role key.
    """

    def __init__(
        self,
        access_token: str | None = None,
        base_url: str | None = None,
        api_key: str | None = None,
    ) -> None:
        self._access_token = access_token
        self._base_url = base_url
        self._api_key = api_key

    def _headers(self) -> dict[str, str]:
        if self._api_key:
            api_key = self._api_key
        elif self._access_token:
            api_key = get_anon_key()
        else:
            api_key = get_service_role_key()
        bearer = self._access_token or api_key
        return {
            "apikey": api_key,
            "Authorization": f"Bearer {bearer}",
            "Content-Type": "application/json",
            "Prefer": "return=minimal",
        }

    def _request(
        self,
        method: str,
        params: dict[str, str],
        json: object | None = None,
    ) -> httpx.Response:
        url = f"{self._base_url or get_supabase_url()}/rest/v1/{_TABLE}"
        try:
            response = httpx.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers(),
                timeout=_TIMEOUT_SECONDS,
            )
        except httpx.HTTPError as exc:
            raise StorageError(StorageErrorKind.OTHER, str(exc)) from exc
        if response.is_error:
            raise _storage_error_from_response(response)
        return response

    def fetch(self, user_id: str) -> NoteRow | None:
        response = self._request("GET", {"select": "*", "user_id": f"eq.{user_id}", "limit": "1"})
        records: list[dict[str, Any]] = response.json()
        if not records:
            return None
        record = records[0]
        return NoteRow(
            user_id=record["user_id"],
            user_email=record.get("user_email"),
            notes=load_notes(record.get("notes")),
            updated_at=_parse_timestamp(record.get("updated_at")),
        )

    def upsert(self, row: NoteRow, exists: bool) -> None:
        updated_at = row["updated_at"]
        body = {
            "user_email": row["user_email"],
            "notes": dump_notes(row["notes"]),
            "updated_at": updated_at.isoformat() if updated_at is not None else None,
        }
        if exists:
            self._request("PATCH", {"user_id": f"eq.{row['user_id']}"}, json=body)
        else:
            self._request("POST", {}, json={"user_id": row["user_id"], **body})

    def delete(self, user_id: str) -> None:
        self._request("DELETE", {"user_id": f"eq.{user_id}"})
        logger.info("deleted user_notes row for user %s", user_id)

    def ping(self) -> None:
        self._request("GET", {"select": "user_id", "limit": "1"})


def _storage_error_from_response(response: httpx.Response) -> StorageError:
    code: str | None = None
    message = response.text or f"HTTP {response.status_code}"
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        code = payload.get("code")
        message = payload.get("message") or message
    return StorageError(classify_storage_error(code, message), message, code)


def _parse_timestamp(raw: object) -> datetime | None:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    return None
