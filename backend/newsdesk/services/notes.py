"""Notes service: per-user article notes kept as one JSON array per user row."""

import logging
import uuid
from datetime import UTC, datetime

from newsdesk.schemas.note import Note, NoteCreateRequest
from newsdesk.services.note_store import NoteRowStore, StorageError
from newsdesk.services.session import SessionState
from newsdesk.services.types import IdentityUser, NoteRow, SaveResult

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(tz=UTC)


def _new_note_id(existing: list[Note]) -> str:
    taken = {n.id for n in existing}
    note_id = str(uuid.uuid4())
    while note_id in taken:
        note_id = str(uuid.uuid4())
    return note_id


class NotesService:
    """CRUD over the signed-in user's notes.

    Every call resolves the user first and raises UnauthenticatedError before
    any storage access. Writes are a plain read-modify-write of the user's
    row with no version check: when two writes race, the last one wins.
    """

    def __init__(self, store: NoteRowStore, session: SessionState) -> None:
        self._store = store
        self._session = session

    def _write(self, user: IdentityUser, notes: list[Note], exists: bool) -> None:
        row = NoteRow(
            user_id=user["id"],
            user_email=user["email"],
            notes=notes,
            updated_at=_now().replace(tzinfo=None),
        )
        self._store.upsert(row, exists=exists)

    def save_note(self, note: NoteCreateRequest) -> SaveResult:
        """Prepend a new note to the user's collection, creating the row if needed.

        Content is taken as given; blank content is rejected by the request schema.
        """
        user = self._session.require_user()
        row = self._store.fetch(user["id"])
        existing = row["notes"] if row is not None else []

        created = Note(
            id=_new_note_id(existing),
            article_title=note.article_title,
            article_slug=note.article_slug,
            article_url=note.article_url,
            article_date=note.article_date,
            source_name=note.source_name,
            content=note.content,
            created_at=_now(),
        )
        self._write(user, [created, *existing], exists=row is not None)
        logger.info("saved note %s for user %s (%d total)", created.id, user["id"], len(existing) + 1)
        return SaveResult(note=created, inserted=row is None)

    def get_user_notes(self) -> list[Note]:
        """Return the user's notes in stored order (newest first).

        A missing row, or a missing user_notes table, reads as no notes.
        """
        user = self._session.require_user()
        try:
            row = self._store.fetch(user["id"])
        except StorageError as exc:
            if exc.relation_missing:
                logger.warning("user_notes relation missing; returning no notes: %s", exc)
                return []
            raise
        return row["notes"] if row is not None else []

    def get_note(self, note_id: str) -> Note | None:
        for note in self.get_user_notes():
            if note.id == note_id:
                return note
        return None

    def update_note(self, note_id: str, content: str) -> None:
        """Replace the content of *note_id*. Unknown ids leave the notes unchanged."""
        user = self._session.require_user()
        row = self._store.fetch(user["id"])
        if row is None:
            return
        notes = [
            n.model_copy(update={"content": content}) if n.id == note_id else n
            for n in row["notes"]
        ]
        self._write(user, notes, exists=True)
        logger.info("updated note %s for user %s", note_id, user["id"])

    def delete_note(self, note_id: str) -> None:
        """Remove *note_id* from the collection. Unknown ids leave the notes unchanged."""
        user = self._session.require_user()
        row = self._store.fetch(user["id"])
        if row is None:
            return
        notes = [n for n in row["notes"] if n.id != note_id]
        self._write(user, notes, exists=True)
        logger.info(
            "deleted note %s for user %s (%d removed)",
            note_id,
            user["id"],
            len(row["notes"]) - len(notes),
        )
