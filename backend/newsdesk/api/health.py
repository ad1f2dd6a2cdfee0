"""Service health endpoints."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from newsdesk.api.deps import get_admin_row_store
from newsdesk.services.note_store import NoteRowStore, StorageError

router = APIRouter()


@router.get("")
def health() -> dict[str, str]:
    return {"status": "ok", "message": "Notes API is available"}


@router.get("/db", response_model=None)
def health_db(store: NoteRowStore = Depends(get_admin_row_store)) -> dict[str, str] | JSONResponse:
    """Run a trivial query against the notes backend."""
    try:
        store.ping()
    except StorageError as exc:
        # A missing table still means the database answered.
        if not exc.relation_missing:
            return JSONResponse(status_code=503, content={"status": "down", "error": str(exc)})
    return {"status": "up"}
