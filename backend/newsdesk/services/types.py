"""Shared typed return types for backend services."""

from datetime import datetime
from typing import TypedDict

from newsdesk.schemas.note import Note


class NoteRow(TypedDict):
    user_id: str
    user_email: str | None
    notes: list[Note]
    # None when the backend returned no timestamp.
    updated_at: datetime | None


class SaveResult(TypedDict):
    note: Note
    inserted: bool


class IdentityUser(TypedDict):
    id: str
    email: str | None


class SignInResult(TypedDict):
    access_token: str
    refresh_token: str | None
    expires_in: int | None
    user: IdentityUser


class ProxiedImage(TypedDict):
    content: bytes
    content_type: str
    cache_control: str
