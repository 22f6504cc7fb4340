"""
Note service: every read and write the API performs against the store.

Each operation is one statement (two for the admin listing) and commits
on its own. SQLAlchemy errors are rolled back and re-raised as
StoreError so routes never see driver exceptions.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple

from fastapi import Depends
from sqlalchemy import case, delete, func, select, text, true, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from notepool.config import Settings
from notepool.database import Feedback, Note, NoteTag, get_db
from notepool.deps import get_app_settings
from notepool.exceptions import NotFoundError, StoreError, ValidationError
from notepool.models import SubmitNoteRequest
from notepool.moderation import word_count


logger = logging.getLogger(__name__)

ALL_TAGS = "all"


class NoteService:
    """
    Service for the anonymous note pool.

    Holds no state of its own besides the session and the settings the
    app was started with; a new instance is built per request.
    """

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    @contextmanager
    def _store_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError(f"{operation} failed: {exc}") from exc

    # =========================================================================
    # Public operations
    # =========================================================================

    def submit_note(self, request: SubmitNoteRequest) -> Note:
        """
        Store a new note.

        Raises:
            ValidationError: title required but empty, or message too long
        """
        if self.settings.require_title and not request.title:
            raise ValidationError("Missing title or message")
        if word_count(request.message) > self.settings.max_message_words:
            raise ValidationError("Message too long")

        note = Note(
            title=request.title,
            message=request.message,
            likes=0,
            reportcount=0,
            hidden=False,
        )
        if self.settings.tags_enabled:
            note.tags = [NoteTag(tag=tag) for tag in request.tags]

        with self._store_errors("Submit"):
            self.db.add(note)
            self.db.commit()
            self.db.refresh(note)

        logger.info(f"Note {note.id} submitted with {len(note.tags)} tag(s)")
        return note

    def random_note(self, tag: Optional[str] = None) -> Optional[Note]:
        """
        Pick one visible note uniformly at random.

        Args:
            tag: Only consider notes carrying this label. None, "" and
                "all" mean no filter.

        Returns:
            The note, or None when nothing qualifies
        """
        stmt = select(Note).where(Note.hidden.is_(False))

        tag = (tag or "").strip()
        if self.settings.tags_enabled and tag and tag != ALL_TAGS:
            tagged = select(NoteTag.note_id).where(NoteTag.tag == tag)
            stmt = stmt.where(Note.id.in_(tagged))

        stmt = stmt.order_by(func.random()).limit(1)

        with self._store_errors("Random"):
            return self.db.scalars(stmt).first()

    def count_visible(self) -> int:
        """Number of notes that are not hidden."""
        with self._store_errors("Count"):
            total = self.db.scalar(
                select(func.count(Note.id)).where(Note.hidden.is_(False))
            )
        return total or 0

    def like(self, note_id: int) -> bool:
        """
        Add one like to a note.

        An unknown id is a silent no-op unless `strict_likes` is set.

        Returns:
            Whether a note was updated
        """
        stmt = (
            update(Note)
            .where(Note.id == note_id)
            .values(likes=Note.likes + 1)
            .execution_options(synchronize_session=False)
        )
        with self._store_errors("Like"):
            result = self.db.execute(stmt)
            self.db.commit()

        if result.rowcount == 0:
            if self.settings.strict_likes:
                raise NotFoundError()
            return False
        return True

    def report(self, note_id: int) -> Tuple[int, bool]:
        """
        Add one report to a note, hiding it at the report threshold.

        The increment and the hide happen in one conditional UPDATE so
        concurrent reports cannot skip the transition.

        Returns:
            (new reportcount, hidden)

        Raises:
            NotFoundError: no note with this id
        """
        threshold = self.settings.report_threshold
        new_count = Note.reportcount + 1
        stmt = (
            update(Note)
            .where(Note.id == note_id)
            .values(
                reportcount=new_count,
                hidden=case((new_count >= threshold, true()), else_=Note.hidden),
            )
            .returning(Note.reportcount, Note.hidden)
            .execution_options(synchronize_session=False)
        )

        with self._store_errors("Report"):
            row = self.db.execute(stmt).first()
            self.db.commit()

        if row is None:
            raise NotFoundError()

        reportcount, hidden = int(row[0]), bool(row[1])
        if reportcount == threshold:
            logger.info(f"Note {note_id} hidden after {reportcount} reports")
        return reportcount, hidden

    def add_feedback(self, message: str) -> Feedback:
        """Store a piece of site feedback."""
        feedback = Feedback(message=message)
        with self._store_errors("Feedback"):
            self.db.add(feedback)
            self.db.commit()
            self.db.refresh(feedback)
        return feedback

    def ping(self) -> None:
        """Round-trip a trivial query. Raises StoreError on failure."""
        with self._store_errors("Health check"):
            self.db.execute(text("SELECT 1"))

    # =========================================================================
    # Admin operations
    # =========================================================================

    def list_all(self) -> Tuple[List[Note], List[Feedback]]:
        """Every note (hidden included) and every feedback, newest first."""
        notes_stmt = select(Note).order_by(
            Note.created_at.desc().nulls_last(), Note.id.desc()
        )
        feedback_stmt = select(Feedback).order_by(
            Feedback.created_at.desc().nulls_last(), Feedback.id.desc()
        )
        with self._store_errors("Admin listing"):
            notes = list(self.db.scalars(notes_stmt).all())
            feedback = list(self.db.scalars(feedback_stmt).all())
        return notes, feedback

    def set_hidden(self, note_id: int, hidden: bool) -> bool:
        """Set the hidden flag directly. Returns whether a note matched."""
        stmt = (
            update(Note)
            .where(Note.id == note_id)
            .values(hidden=hidden)
            .execution_options(synchronize_session=False)
        )
        with self._store_errors("Toggle hidden"):
            result = self.db.execute(stmt)
            self.db.commit()

        logger.info(f"Admin set hidden={hidden} on note {note_id} ({result.rowcount} row)")
        return result.rowcount > 0

    def reset_reports(self, note_id: int) -> bool:
        """Zero the report counter. The hidden flag is left alone."""
        stmt = (
            update(Note)
            .where(Note.id == note_id)
            .values(reportcount=0)
            .execution_options(synchronize_session=False)
        )
        with self._store_errors("Reset reports"):
            result = self.db.execute(stmt)
            self.db.commit()

        logger.info(f"Admin reset reports on note {note_id} ({result.rowcount} row)")
        return result.rowcount > 0

    def update_tags(self, note_id: int, tags: List[str]) -> bool:
        """Replace a note's tags wholesale. Unknown ids are a no-op."""
        with self._store_errors("Update tags"):
            exists = self.db.scalar(select(Note.id).where(Note.id == note_id))
            if exists is None:
                return False

            self.db.execute(
                delete(NoteTag)
                .where(NoteTag.note_id == note_id)
                .execution_options(synchronize_session=False)
            )
            self.db.add_all([NoteTag(note_id=note_id, tag=tag) for tag in tags])
            self.db.commit()

        logger.info(f"Admin set tags {tags} on note {note_id}")
        return True

    def delete_note(self, note_id: int) -> bool:
        """Delete a note and its tags. Unknown ids are a no-op."""
        with self._store_errors("Delete"):
            note = self.db.get(Note, note_id)
            if note is None:
                return False
            self.db.delete(note)
            self.db.commit()

        logger.info(f"Admin deleted note {note_id}")
        return True


def get_note_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> NoteService:
    """Per-request service bound to the request's session."""
    return NoteService(db, settings)
