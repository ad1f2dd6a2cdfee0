"""Shared pytest fixtures."""

import copy
from unittest.mock import MagicMock

import pytest

from newsdesk.services.session import SessionState
from newsdesk.services.types import IdentityUser, NoteRow


class InMemoryNoteRowStore:
    """Dict-backed NoteRowStore that records every call."""

    def __init__(self) -> None:
        self.rows: dict[str, NoteRow] = {}
        self.calls: list[str] = []

    def fetch(self, user_id: str) -> NoteRow | None:
        self.calls.append("fetch")
        row = self.rows.get(user_id)
        return copy.deepcopy(row) if row is not None else None

    def upsert(self, row: NoteRow, exists: bool) -> None:
        self.calls.append("update" if exists else "insert")
        self.rows[row["user_id"]] = copy.deepcopy(row)

    def delete(self, user_id: str) -> None:
        self.calls.append("delete")
        self.rows.pop(user_id, None)

    def ping(self) -> None:
        self.calls.append("ping")


@pytest.fixture()
def user() -> IdentityUser:
    return IdentityUser(id="user-1", email="reader@example.com")


@pytest.fixture()
def row_store() -> InMemoryNoteRowStore:
    return InMemoryNoteRowStore()


@pytest.fixture()
def signed_in_session(user: IdentityUser) -> MagicMock:
    """Mock SessionState whose require_user() returns *user*."""
    session = MagicMock(spec=SessionState)
    session.require_user.return_value = user
    session.current_user.return_value = user
    return session


@pytest.fixture()
def mock_identity() -> MagicMock:
    """Mock Supabase identity client."""
    return MagicMock()
