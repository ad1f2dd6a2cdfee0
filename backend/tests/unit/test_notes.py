"""Unit tests for NotesService."""

from unittest.mock import MagicMock

import pytest

from conftest import InMemoryNoteRowStore
from newsdesk.schemas.note import NoteCreateRequest
from newsdesk.services.identity import IdentityClient
from newsdesk.services.note_store import StorageError, StorageErrorKind
from newsdesk.services.notes import NotesService
from newsdesk.services.session import SessionState, UnauthenticatedError


def _request(title: str = "A", content: str = "first") -> NoteCreateRequest:
    return NoteCreateRequest(
        article_title=title,
        article_url=f"https://example.com/{title}",
        article_date="2026-01-01T00:00:00Z",
        source_name="Example News",
        content=content,
    )


def _signed_out_session() -> SessionState:
    identity = MagicMock(spec=IdentityClient)
    return SessionState(identity, access_token=None)


class TestNotesServiceSave:
    def test_first_save_inserts_row(
        self, row_store: InMemoryNoteRowStore, signed_in_session: MagicMock
    ) -> None:
        result = NotesService(row_store, signed_in_session).save_note(_request())

        assert result["inserted"] is True
        assert row_store.calls == ["fetch", "insert"]
        row = row_store.rows["user-1"]
        assert row["user_email"] == "reader@example.com"
        assert [n.content for n in row["notes"]] == ["first"]

    def test_second_save_updates_row_and_prepends(
        self, row_store: InMemoryNoteRowStore, signed_in_session: MagicMock
    ) -> None:
        svc = NotesService(row_store, signed_in_session)
        svc.save_note(_request("A", "first"))
        result = svc.save_note(_request("B", "second"))

        assert result["inserted"] is False
        assert row_store.calls[-1] == "update"
        assert [n.content for n in svc.get_user_notes()] == ["second", "first"]

    def test_save_adds_exactly_one_note_with_unique_id(
        self, row_store: InMemoryNoteRowStore, signed_in_session: MagicMock
    ) -> None:
        svc = NotesService(row_store, signed_in_session)
        for i in range(3):
            svc.save_note(_request(str(i), f"note {i}"))
        before = svc.get_user_notes()

        created = svc.save_note(_request("new", "fresh"))["note"]
        after = svc.get_user_notes()

        assert len(after) == len(before) + 1
        assert created.id not in {n.id for n in before}
        assert len({n.id for n in after}) == len(after)
        assert after[0].content == "fresh"

    def test_snapshots_article_fields(
        self, row_store: InMemoryNoteRowStore, signed_in_session: MagicMock
    ) -> None:
        note = NotesService(row_store, signed_in_session).save_note(
            _request("Big Story Today!", "hmm")
        )["note"]

        assert note.article_title == "Big Story Today!"
        assert note.article_slug == "big-story-today"
        assert note.article_url == "https://example.com/Big Story Today!"
        assert note.source_name == "Example News"
        assert note.created_at.tzinfo is not None

    def test_storage_error_on_write_propagates(self, signed_in_session: MagicMock) -> None:
        store = MagicMock()
        store.fetch.return_value = None
        store.upsert.side_effect = StorageError(StorageErrorKind.OTHER, "permission denied")

        with pytest.raises(StorageError, match="permission denied"):
            NotesService(store, signed_in_session).save_note(_request())

    def test_relation_missing_on_save_read_propagates(self, signed_in_session: MagicMock) -> None:
        store = MagicMock()
        store.fetch.side_effect = StorageError(
            StorageErrorKind.RELATION_MISSING, "relation does not exist", "42P01"
        )

        with pytest.raises(StorageError):
            NotesService(store, signed_in_session).save_note(_request())
        store.upsert.assert_not_called()


class TestNotesServiceGet:
    def test_no_row_returns_empty_list(
        self, row_store: InMemoryNoteRowStore, signed_in_session: MagicMock
    ) -> None:
        assert NotesService(row_store, signed_in_session).get_user_notes() == []

    def test_relation_missing_returns_empty_list(self, signed_in_session: MagicMock) -> None:
        store = MagicMock()
        store.fetch.side_effect = StorageError(
            StorageErrorKind.RELATION_MISSING, "Could not find the table in the schema cache", "PGRST205"
        )

        assert NotesService(store, signed_in_session).get_user_notes() == []

    def test_other_storage_error_propagates(self, signed_in_session: MagicMock) -> None:
        store = MagicMock()
        store.fetch.side_effect = StorageError(StorageErrorKind.OTHER, "connection refused")

        with pytest.raises(StorageError, match="connection refused"):
            NotesService(store, signed_in_session).get_user_notes()

    def test_get_note_by_id(
        self, row_store: InMemoryNoteRowStore, signed_in_session: MagicMock
    ) -> None:
        svc = NotesService(row_store, signed_in_session)
        created = svc.save_note(_request())["note"]

        assert svc.get_note(created.id) == created
        assert svc.get_note("missing") is None


class TestNotesServiceUpdate:
    def test_updates_only_matching_note(
        self, row_store: InMemoryNoteRowStore, signed_in_session: MagicMock
    ) -> None:
        svc = NotesService(row_store, signed_in_session)
        first = svc.save_note(_request("A", "first"))["note"]
        second = svc.save_note(_request("B", "second"))["note"]

        svc.update_note(second.id, "edited")

        notes = svc.get_user_notes()
        assert [n.content for n in notes] == ["edited", "first"]
        assert notes[1] == first
        assert notes[0].model_dump(exclude={"content"}) == second.model_dump(exclude={"content"})

    def test_refreshes_updated_at(
        self, row_store: InMemoryNoteRowStore, signed_in_session: MagicMock
    ) -> None:
        svc = NotesService(row_store, signed_in_session)
        note = svc.save_note(_request())["note"]
        saved_at = row_store.rows["user-1"]["updated_at"]

        svc.update_note(note.id, "later")

        assert row_store.rows["user-1"]["updated_at"] >= saved_at

    def test_unknown_id_is_noop(
        self, row_store: InMemoryNoteRowStore, signed_in_session: MagicMock
    ) -> None:
        svc = NotesService(row_store, signed_in_session)
        svc.save_note(_request())
        before = svc.get_user_notes()

        svc.update_note("does-not-exist", "edited")

        assert svc.get_user_notes() == before

    def test_without_row_writes_nothing(
        self, row_store: InMemoryNoteRowStore, signed_in_session: MagicMock
    ) -> None:
        NotesService(row_store, signed_in_session).update_note("any", "edited")

        assert row_store.calls == ["fetch"]
        assert row_store.rows == {}


class TestNotesServiceDelete:
    def test_removes_only_matching_note(
        self, row_store: InMemoryNoteRowStore, signed_in_session: MagicMock
    ) -> None:
        svc = NotesService(row_store, signed_in_session)
        first = svc.save_note(_request("A", "first"))["note"]
        second = svc.save_note(_request("B", "second"))["note"]

        svc.delete_note(first.id)

        assert svc.get_user_notes() == [second]
        assert "user-1" in row_store.rows

    def test_unknown_id_is_noop(
        self, row_store: InMemoryNoteRowStore, signed_in_session: MagicMock
    ) -> None:
        svc = NotesService(row_store, signed_in_session)
        svc.save_note(_request())
        before = svc.get_user_notes()

        svc.delete_note("does-not-exist")

        assert svc.get_user_notes() == before


class TestNotesServiceUpdateDeleteErrors:
    @pytest.mark.parametrize("kind", list(StorageErrorKind))
    @pytest.mark.parametrize(
        "call",
        [
            lambda svc: svc.update_note("n1", "edited"),
            lambda svc: svc.delete_note("n1"),
        ],
        ids=["update", "delete"],
    )
    def test_read_error_propagates_without_write(
        self, signed_in_session: MagicMock, kind: StorageErrorKind, call: object
    ) -> None:
        store = MagicMock()
        store.fetch.side_effect = StorageError(kind, "boom")

        with pytest.raises(StorageError) as excinfo:
            call(NotesService(store, signed_in_session))  # type: ignore[operator]

        assert excinfo.value.kind is kind
        store.upsert.assert_not_called()

    @pytest.mark.parametrize(
        "call",
        [
            lambda svc: svc.update_note("n1", "edited"),
            lambda svc: svc.delete_note("n1"),
        ],
        ids=["update", "delete"],
    )
    def test_write_error_propagates(
        self, row_store: InMemoryNoteRowStore, signed_in_session: MagicMock, call: object
    ) -> None:
        NotesService(row_store, signed_in_session).save_note(_request())
        store = MagicMock()
        store.fetch.return_value = row_store.rows["user-1"]
        store.upsert.side_effect = StorageError(StorageErrorKind.OTHER, "permission denied")

        with pytest.raises(StorageError, match="permission denied"):
            call(NotesService(store, signed_in_session))  # type: ignore[operator]


class TestNotesServiceScenario:
    def test_save_save_update_delete(
        self, row_store: InMemoryNoteRowStore, signed_in_session: MagicMock
    ) -> None:
        svc = NotesService(row_store, signed_in_session)

        first = svc.save_note(_request("A", "first"))["note"]
        assert [n.content for n in svc.get_user_notes()] == ["first"]

        second = svc.save_note(_request("B", "second"))["note"]
        assert [n.content for n in svc.get_user_notes()] == ["second", "first"]

        svc.update_note(second.id, "edited")
        assert [n.content for n in svc.get_user_notes()] == ["edited", "first"]

        svc.delete_note(first.id)
        assert [n.content for n in svc.get_user_notes()] == ["edited"]


class TestNotesServiceUnauthenticated:
    @pytest.mark.parametrize(
        "call",
        [
            lambda svc: svc.save_note(_request()),
            lambda svc: svc.get_user_notes(),
            lambda svc: svc.update_note("id", "x"),
            lambda svc: svc.delete_note("id"),
        ],
    )
    def test_raises_without_touching_storage(self, call: object) -> None:
        store = MagicMock()
        svc = NotesService(store, _signed_out_session())

        with pytest.raises(UnauthenticatedError):
            call(svc)  # type: ignore[operator]

        assert store.mock_calls == []

    def test_invalid_token_is_unauthenticated(self) -> None:
        identity = MagicMock(spec=IdentityClient)
        identity.get_user.return_value = None
        store = MagicMock()
        svc = NotesService(store, SessionState(identity, access_token="expired"))

        with pytest.raises(UnauthenticatedError):
            svc.get_user_notes()
        store.fetch.assert_not_called()
