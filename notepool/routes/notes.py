"""
Public API routes: submitting, browsing and reacting to notes.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from notepool.database import Note
from notepool.deps import read_payload
from notepool.models import (
    CountResponse, FeedbackRequest, NoteIdRequest, OkResponse,
    PublicNoteResponse, ReportResponse, SubmitNoteRequest, parse_payload,
)
from notepool.note_service import NoteService, get_note_service


router = APIRouter(tags=["Notes"])


# =============================================================================
# Submit
# =============================================================================


@router.post("/submit", response_model=OkResponse)
def submit_note(
    payload: Dict[str, Any] = Depends(read_payload),
    service: NoteService = Depends(get_note_service),
) -> OkResponse:
    """
    Submit a new anonymous note.

    The message is required and limited to 500 words. Tags may be sent
    as a list or as one comma-separated string.
    """
    request = parse_payload(SubmitNoteRequest, payload)
    service.submit_note(request)
    return OkResponse()


# =============================================================================
# Browse
# =============================================================================


@router.get("/random", response_model=PublicNoteResponse)
def random_note(
    tag: Optional[str] = Query(default=None, description='Label to filter on, or "all"'),
    service: NoteService = Depends(get_note_service),
) -> PublicNoteResponse:
    """
    Get one visible note at random.

    Never fails on an empty pool: a placeholder note with a null id is
    returned instead.
    """
    note = service.random_note(tag)
    if note is None:
        return PublicNoteResponse.placeholder()
    return _note_to_public(note)


@router.get("/count", response_model=CountResponse)
def count_notes(service: NoteService = Depends(get_note_service)) -> CountResponse:
    """Number of visible notes."""
    return CountResponse(total=service.count_visible())


# =============================================================================
# React
# =============================================================================


@router.post("/like", response_model=OkResponse)
def like_note(
    payload: Dict[str, Any] = Depends(read_payload),
    service: NoteService = Depends(get_note_service),
) -> OkResponse:
    """Add a like to a note."""
    request = parse_payload(NoteIdRequest, payload)
    service.like(request.note_id)
    return OkResponse()


@router.post("/report", response_model=ReportResponse)
def report_note(
    payload: Dict[str, Any] = Depends(read_payload),
    service: NoteService = Depends(get_note_service),
) -> ReportResponse:
    """
    Report a note.

    The third report hides the note from /random and /count until a
    moderator unhides it.
    """
    request = parse_payload(NoteIdRequest, payload)
    reportcount, hidden = service.report(request.note_id)
    return ReportResponse(reportcount=reportcount, hidden=hidden)


# =============================================================================
# Feedback
# =============================================================================


@router.post("/feedback", response_model=OkResponse)
def submit_feedback(
    payload: Dict[str, Any] = Depends(read_payload),
    service: NoteService = Depends(get_note_service),
) -> OkResponse:
    """Leave free-text feedback about the site."""
    request = parse_payload(FeedbackRequest, payload)
    service.add_feedback(request.message)
    return OkResponse()


# =============================================================================
# Helper Functions
# =============================================================================


def _note_to_public(note: Note) -> PublicNoteResponse:
    """Convert database Note to the public response model."""
    return PublicNoteResponse(
        id=note.id,
        title=note.title or "",
        message=note.message,
        tags=note.tag_list,
        likes=note.likes,
        created_at=note.created_at,
    )
