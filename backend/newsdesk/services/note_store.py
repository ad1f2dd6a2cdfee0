"""Row store for user notes, the storage boundary of the notes service.

Each user owns one ``user_notes`` row whose ``notes`` column holds the whole
collection as a JSON array. A store only reads and writes whole rows; every
list manipulation happens in NotesService.
"""

import enum
import logging
from typing import Any, Protocol

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session

from newsdesk.models.user_notes import UserNotes
from newsdesk.schemas.note import Note
from newsdesk.services.types import NoteRow

logger = logging.getLogger(__name__)

# 42P01: Postgres undefined_table. PGRST205: PostgREST cannot find the table
# in its schema cache.
_RELATION_MISSING_CODES = frozenset({"42P01", "PGRST205"})
_RELATION_MISSING_MESSAGES = ("schema cache", "no such table")


class StorageErrorKind(enum.Enum):
    RELATION_MISSING = "relation_missing"
    OTHER = "other"


class StorageError(Exception):
    """Raised when a row store read or write fails."""

    def __init__(self, kind: StorageErrorKind, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.code = code

    @property
    def relation_missing(self) -> bool:
        return self.kind is StorageErrorKind.RELATION_MISSING


def classify_storage_error(code: str | None, message: str | None) -> StorageErrorKind:
    """Map a backend error code / message onto the closed StorageErrorKind set."""
    if code in _RELATION_MISSING_CODES:
        return StorageErrorKind.RELATION_MISSING
    lowered = (message or "").lower()
    if any(fragment in lowered for fragment in _RELATION_MISSING_MESSAGES):
        return StorageErrorKind.RELATION_MISSING
    return StorageErrorKind.OTHER


class NoteRowStore(Protocol):
    def fetch(self, user_id: str) -> NoteRow | None: ...

    def upsert(self, row: NoteRow, exists: bool) -> None: ...

    def delete(self, user_id: str) -> None: ...

    def ping(self) -> None: ...


def dump_notes(notes: list[Note]) -> list[dict[str, Any]]:
    return [n.model_dump(mode="json") for n in notes]


def load_notes(raw: object) -> list[Note]:
    """Parse the stored JSON array; anything that is not a list reads as empty."""
    if not isinstance(raw, list):
        return []
    return [Note.model_validate(item) for item in raw]


def _storage_error_from_dbapi(exc: DBAPIError) -> StorageError:
    orig = exc.orig
    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate.
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    message = str(orig) if orig is not None else str(exc)
    return StorageError(classify_storage_error(code, message), message, code)


class SqlNoteRowStore:
    """NoteRowStore backed by the ``user_notes`` table through a SQLAlchemy session."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def fetch(self, user_id: str) -> NoteRow | None:
        try:
            record = self._db.query(UserNotes).filter(UserNotes.user_id == user_id).first()
        except DBAPIError as exc:
            self._db.rollback()
            raise _storage_error_from_dbapi(exc) from exc
        if record is None:
            return None
        return NoteRow(
            user_id=record.user_id,
            user_email=record.user_email,
            notes=load_notes(record.notes),
            updated_at=record.updated_at,
        )

    def upsert(self, row: NoteRow, exists: bool) -> None:
        """Write *row* back: UPDATE when *exists*, INSERT otherwise.

        No version check is made; a concurrent writer's changes are overwritten.
        """
        values = {
            "user_email": row["user_email"],
            "notes": dump_notes(row["notes"]),
            "updated_at": row["updated_at"],
        }
        try:
            if exists:
                (
                    self._db.query(UserNotes)
                    .filter(UserNotes.user_id == row["user_id"])
                    .update(values, synchronize_session=False)
                )
            else:
                self._db.add(UserNotes(user_id=row["user_id"], **values))
            self._db.commit()
        except DBAPIError as exc:
            self._db.rollback()
            raise _storage_error_from_dbapi(exc) from exc

    def delete(self, user_id: str) -> None:
        try:
            self._db.query(UserNotes).filter(UserNotes.user_id == user_id).delete()
            self._db.commit()
        except DBAPIError as exc:
            self._db.rollback()
            raise _storage_error_from_dbapi(exc) from exc
        logger.info("deleted user_notes row for user %s", user_id)

    def ping(self) -> None:
        try:
            self._db.execute(text("SELECT 1")).scalar_one()
        except DBAPIError as exc:
            self._db.rollback()
            raise _storage_error_from_dbapi(exc) from exc
