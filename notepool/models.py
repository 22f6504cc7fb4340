"""
Pydantic models for Anonymous Notes API requests and responses.

Request models accept loosely typed input (JSON or form fields) and
coerce it: strings are trimmed, ids parsed, flags turned into booleans.
"""

from datetime import datetime
from typing import Any, List, Optional, Type, TypeVar

from pydantic import (
    BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError,
    field_validator,
)

from notepool.exceptions import ValidationError


MAX_TAG_LENGTH = 50
MAX_NOTE_ID = 2**63 - 1  # signed 64-bit, the widest integer key the stores hold

FALSE_STRINGS = ("false", "0", "off", "no", "n", "f")

PLACEHOLDER_TITLE = "No notes yet"
PLACEHOLDER_MESSAGE = "Be the first to leave something kind."

ModelT = TypeVar("ModelT", bound=BaseModel)


def _as_text(v: Any) -> str:
    """Coerce a scalar form/JSON value to trimmed text."""
    if v is None or v is False:
        return ""
    if isinstance(v, list):
        v = v[0] if v else ""
    return str(v).strip()


def normalize_tags(v: Any) -> List[str]:
    """
    Turn raw tag input into a de-duplicated list of labels.

    Accepts a list of strings or a single comma-separated string.
    Blank labels are dropped and the first occurrence of each label wins.
    """
    if v is None or v == "":
        return []
    if isinstance(v, str):
        v = v.split(",")
    if not isinstance(v, (list, tuple, set)):
        raise ValueError("Invalid tags")

    tags: List[str] = []
    for raw in v:
        tag = _as_text(raw)
        if not tag:
            continue
        if len(tag) > MAX_TAG_LENGTH:
            raise ValueError("Tag too long")
        if tag not in tags:
            tags.append(tag)
    return tags


def parse_payload(model: Type[ModelT], payload: dict) -> ModelT:
    """
    Validate a request payload, raising the service ValidationError.

    The first pydantic error becomes the plain-text reason sent back.
    """
    try:
        return model.model_validate(payload)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        ctx_error = first.get("ctx", {}).get("error")
        if ctx_error is not None:
            reason = str(ctx_error)
        elif first.get("loc"):
            reason = f"Invalid {first['loc'][-1]}"
        else:
            reason = "Invalid request"
        raise ValidationError(reason) from exc


# =============================================================================
# Request Models
# =============================================================================


class NoteIdRequest(BaseModel):
    """Any request that targets a single note by id."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    note_id: Optional[int] = Field(
        default=None,
        alias="noteId",
        validate_default=True,
        description="ID of the target note",
    )

    @field_validator("note_id", mode="before")
    @classmethod
    def require_note_id(cls, v):
        if isinstance(v, list):
            v = v[0] if v else None
        if isinstance(v, str):
            v = v.strip()
        if v in (None, "", 0, False):
            raise ValueError("Missing noteId")
        if isinstance(v, float) and not v.is_integer():
            raise ValueError("Invalid noteId")
        return v

    @field_validator("note_id")
    @classmethod
    def bound_note_id(cls, v):
        if v is not None and not 1 <= v <= MAX_NOTE_ID:
            raise ValueError("Invalid noteId")
        return v


class SubmitNoteRequest(BaseModel):
    """Request to submit a new anonymous note."""

    model_config = ConfigDict(extra="ignore")

    title: str = Field(default="", max_length=200)
    message: str = Field(default="", validate_default=True)
    tags: List[str] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def trim_title(cls, v):
        return _as_text(v)

    @field_validator("message", mode="before")
    @classmethod
    def trim_message(cls, v):
        message = _as_text(v)
        if not message:
            raise ValueError("Missing message")
        return message

    @field_validator("tags", mode="before")
    @classmethod
    def clean_tags(cls, v):
        return normalize_tags(v)


class FeedbackRequest(BaseModel):
    """Free-text feedback. No length bound."""

    model_config = ConfigDict(extra="ignore")

    message: str = Field(default="", validate_default=True)

    @field_validator("message", mode="before")
    @classmethod
    def trim_message(cls, v):
        message = _as_text(v)
        if not message:
            raise ValueError("Missing message")
        return message


class ToggleHiddenRequest(NoteIdRequest):
    """Set a note's hidden flag explicitly (admin only)."""

    hidden: bool = False

    @field_validator("hidden", mode="before")
    @classmethod
    def coerce_hidden(cls, v):
        if isinstance(v, list):
            v = v[-1] if v else None
        if isinstance(v, str):
            v = v.strip().lower()
            return bool(v) and v not in FALSE_STRINGS
        return bool(v)


class UpdateTagsRequest(NoteIdRequest):
    """Replace a note's tag collection wholesale (admin only)."""

    tags: List[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def clean_tags(cls, v):
        return normalize_tags(v)


# =============================================================================
# Response Models
# =============================================================================


class OkResponse(BaseModel):
    ok: bool = True


class ReportResponse(OkResponse):
    reportcount: int
    hidden: bool


class CountResponse(BaseModel):
    total: int


class PublicNoteResponse(BaseModel):
    """A note as shown to the public. Moderation fields are left out."""

    id: Optional[int] = None
    title: str
    message: str
    tags: List[str] = Field(default_factory=list)
    likes: int = 0
    created_at: Optional[datetime] = None

    @classmethod
    def placeholder(cls) -> "PublicNoteResponse":
        """Shown when no visible note matches."""
        return cls(
            id=None,
            title=PLACEHOLDER_TITLE,
            message=PLACEHOLDER_MESSAGE,
            tags=[],
            likes=0,
            created_at=None,
        )


class AdminNoteResponse(PublicNoteResponse):
    """A note with every column, for moderators."""

    id: int
    reportcount: int = 0
    hidden: bool = False


class FeedbackResponse(BaseModel):
    id: int
    message: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AdminDataResponse(BaseModel):
    notes: List[AdminNoteResponse]
    feedback: List[FeedbackResponse]


class HealthResponse(BaseModel):
    ok: bool
