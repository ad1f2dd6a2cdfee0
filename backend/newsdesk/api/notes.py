"""Notes API router."""

from fastapi import APIRouter, Depends, HTTPException

from newsdesk.api.deps import get_notes_service
from newsdesk.schemas.note import Note, NoteCreateRequest, NoteListResponse, NoteUpdateRequest
from newsdesk.services.notes import NotesService

router = APIRouter()


@router.get("")
def list_notes(svc: NotesService = Depends(get_notes_service)) -> NoteListResponse:
    notes = svc.get_user_notes()
    return NoteListResponse(notes=notes, total=len(notes))


@router.post("", status_code=201)
def create_note(
    body: NoteCreateRequest,
    svc: NotesService = Depends(get_notes_service),
) -> dict[str, Note]:
    result = svc.save_note(body)
    return {"note": result["note"]}


@router.get("/{note_id}")
def get_note(
    note_id: str,
    svc: NotesService = Depends(get_notes_service),
) -> dict[str, Note]:
    note = svc.get_note(note_id)
    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")
    return {"note": note}


@router.patch("/{note_id}", status_code=204)
def update_note(
    note_id: str,
    body: NoteUpdateRequest,
    svc: NotesService = Depends(get_notes_service),
) -> None:
    svc.update_note(note_id, body.content)


@router.delete("/{note_id}", status_code=204)
def delete_note(
    note_id: str,
    svc: NotesService = Depends(get_notes_service),
) -> None:
    svc.delete_note(note_id)
