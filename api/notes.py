"""Notes router: the logged-in user's free-form daily notes."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query

from api.common import load_owned, validate_payload
from core.logger import get_logger
from core.session import RequestContext, require_context
from schemas.common import MessageResponse
from schemas.note_schema import NoteCreate, NoteRecord, NoteUpdate

logger = get_logger("api.notes")
router = APIRouter(prefix="/api/notes", tags=["notes"])


@router.get("", response_model=List[NoteRecord])
def list_notes(
    category: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1, le=1000),
    ctx: RequestContext = Depends(require_context),
):
    return ctx.store.notes.list_by_user(ctx.user_id, limit=limit, category=category)


@router.post("", response_model=NoteRecord, status_code=201)
def create_note(payload: NoteCreate, ctx: RequestContext = Depends(require_context)):
    fields = payload.model_dump()
    fields["user_id"] = ctx.user_id
    note = ctx.store.notes.create(fields)
    logger.info("Note id=%s created for user id=%s", note.id, ctx.user_id)
    return note


@router.put("/{note_id}", response_model=NoteRecord)
def update_note(
    note_id: int,
    payload: Dict[str, Any] = Body(...),
    ctx: RequestContext = Depends(require_context),
):
    load_owned(ctx.store.notes, note_id, ctx.user_id, "update")
    changes = validate_payload(NoteUpdate, payload).model_dump(exclude_unset=True)
    return ctx.store.notes.update(note_id, changes)


@router.delete("/{note_id}", response_model=MessageResponse)
def delete_note(note_id: int, ctx: RequestContext = Depends(require_context)):
    load_owned(ctx.store.notes, note_id, ctx.user_id, "delete")
    ctx.store.notes.delete(note_id)
    logger.info("Note id=%s deleted by user id=%s", note_id, ctx.user_id)
    return MessageResponse(message="Note deleted successfully")
