"""FastAPI dependencies wiring sessions, stores and services per request."""

import os
from collections.abc import Generator

from fastapi import Depends
from starlette.requests import Request

from newsdesk.db import get_session
from newsdesk.services.account import AccountService
from newsdesk.services.identity import IdentityClient
from newsdesk.services.note_store import NoteRowStore, SqlNoteRowStore
from newsdesk.services.notes import NotesService
from newsdesk.services.session import SessionEvent, SessionState
from newsdesk.services.supabase_store import SupabaseNoteRowStore
from newsdesk.services.types import IdentityUser

SESSION_TOKEN_KEY = "access_token"


def notes_backend() -> str:
    backend = os.environ.get("NOTES_BACKEND", "sql").strip().lower()
    if backend not in ("sql", "supabase"):
        raise RuntimeError(f"NOTES_BACKEND must be 'sql' or 'supabase', got {backend!r}")
    return backend


def bearer_token(request: Request) -> str | None:
    header = request.headers.get("authorization", "")
    if not header.lower().startswith("bearer "):
        return None
    return header[7:].strip() or None


def get_identity_client() -> IdentityClient:
    return IdentityClient()


def get_session_state(
    request: Request,
    identity: IdentityClient = Depends(get_identity_client),
) -> SessionState:
    """Build the caller's session from the bearer header or the session cookie."""
    token = bearer_token(request) or request.session.get(SESSION_TOKEN_KEY)
    state = SessionState(identity, access_token=token)

    def _sync_cookie(event: SessionEvent, user: IdentityUser | None) -> None:
        if event == "SIGNED_IN":
            request.session[SESSION_TOKEN_KEY] = state.access_token
        else:
            request.session.pop(SESSION_TOKEN_KEY, None)

    state.subscribe(_sync_cookie)
    return state


def _sql_store() -> Generator[NoteRowStore, None, None]:
    sessions = get_session()
    db = next(sessions)
    try:
        yield SqlNoteRowStore(db)
    finally:
        sessions.close()


def get_row_store(
    state: SessionState = Depends(get_session_state),
) -> Generator[NoteRowStore, None, None]:
    if notes_backend() == "supabase":
        yield SupabaseNoteRowStore(access_token=state.access_token)
        return
    yield from _sql_store()


def get_admin_row_store() -> Generator[NoteRowStore, None, None]:
    """Row store that bypasses row-level security; used for account deletion."""
    if notes_backend() == "supabase":
        yield SupabaseNoteRowStore()
        return
    yield from _sql_store()


def get_notes_service(
    store: NoteRowStore = Depends(get_row_store),
    state: SessionState = Depends(get_session_state),
) -> NotesService:
    return NotesService(store, state)


def get_account_service(
    identity: IdentityClient = Depends(get_identity_client),
    store: NoteRowStore = Depends(get_admin_row_store),
) -> AccountService:
    return AccountService(identity, store)
