"""
Admin API routes for moderating notes.

Every route here requires the admin secret, sent as the
`x-admin-password` header, the `password` query parameter or the
`password` body field.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from notepool.config import Settings
from notepool.database import Note
from notepool.deps import get_app_settings, read_payload
from notepool.exceptions import NotFoundError
from notepool.models import (
    AdminDataResponse, AdminNoteResponse, FeedbackResponse, NoteIdRequest,
    OkResponse, ToggleHiddenRequest, UpdateTagsRequest, parse_payload,
)
from notepool.moderation import require_admin
from notepool.note_service import NoteService, get_note_service


router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)


# =============================================================================
# Listing
# =============================================================================


@router.get("/data", response_model=AdminDataResponse)
def admin_data(service: NoteService = Depends(get_note_service)) -> AdminDataResponse:
    """All notes, hidden ones included, plus all feedback. Newest first."""
    notes, feedback = service.list_all()
    return AdminDataResponse(
        notes=[_note_to_admin(n) for n in notes],
        feedback=[FeedbackResponse.model_validate(f) for f in feedback],
    )


# =============================================================================
# Mutations
# =============================================================================


@router.post("/toggleHidden", response_model=OkResponse)
def toggle_hidden(
    payload: Dict[str, Any] = Depends(read_payload),
    service: NoteService = Depends(get_note_service),
) -> OkResponse:
    """Set a note's hidden flag to the given value."""
    request = parse_payload(ToggleHiddenRequest, payload)
    service.set_hidden(request.note_id, request.hidden)
    return OkResponse()


@router.post("/delete", response_model=OkResponse)
def delete_note(
    payload: Dict[str, Any] = Depends(read_payload),
    service: NoteService = Depends(get_note_service),
) -> OkResponse:
    """Delete a note permanently."""
    request = parse_payload(NoteIdRequest, payload)
    service.delete_note(request.note_id)
    return OkResponse()


@router.post("/updateTags", response_model=OkResponse)
def update_tags(
    payload: Dict[str, Any] = Depends(read_payload),
    service: NoteService = Depends(get_note_service),
    settings: Settings = Depends(get_app_settings),
) -> OkResponse:
    """Replace a note's tags. Only available when tags are enabled."""
    if not settings.tags_enabled:
        raise NotFoundError()
    request = parse_payload(UpdateTagsRequest, payload)
    service.update_tags(request.note_id, request.tags)
    return OkResponse()


@router.post("/resetReports", response_model=OkResponse)
def reset_reports(
    payload: Dict[str, Any] = Depends(read_payload),
    service: NoteService = Depends(get_note_service),
    settings: Settings = Depends(get_app_settings),
) -> OkResponse:
    """Zero a note's report counter. Does not unhide it."""
    if not settings.report_reset_enabled:
        raise NotFoundError()
    request = parse_payload(NoteIdRequest, payload)
    service.reset_reports(request.note_id)
    return OkResponse()


# =============================================================================
# Helper Functions
# =============================================================================


def _note_to_admin(note: Note) -> AdminNoteResponse:
    """Convert database Note to the admin response model."""
    return AdminNoteResponse(
        id=note.id,
        title=note.title or "",
        message=note.message,
        tags=note.tag_list,
        likes=note.likes,
        reportcount=note.reportcount,
        hidden=note.hidden,
        created_at=note.created_at,
    )
