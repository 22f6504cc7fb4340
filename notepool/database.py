"""
Database models and session management for the Anonymous Notes API.

Uses SQLAlchemy with SQLite for local runs and tests.
PostgreSQL is used in production (TLS on, peer verification off).
"""

from datetime import datetime, UTC
from typing import List, Optional

from fastapi import Request
from sqlalchemy import (
    Integer, String, Text, DateTime, Boolean, ForeignKey, Index,
    UniqueConstraint, create_engine, event
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import (
    DeclarativeBase, relationship, sessionmaker, Mapped, mapped_column
)

from notepool.config import Settings


# =============================================================================
# Database Setup
# =============================================================================


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def _connect_args(database_url: str, settings: Settings) -> dict:
    if database_url.startswith("sqlite"):
        return {"check_same_thread": False}
    if database_url.startswith("postgresql"):
        return {"sslmode": settings.database_sslmode}
    return {}


def get_engine(settings: Settings) -> Engine:
    """Create database engine."""
    engine = create_engine(
        settings.database_url,
        connect_args=_connect_args(settings.database_url, settings),
        echo=settings.debug,
        pool_pre_ping=True,
    )

    if engine.dialect.name == "sqlite":
        # SQLite ignores ON DELETE CASCADE unless asked per connection
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    """Build the session factory bound to an engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request):
    """Dependency to get database session."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def init_db(engine: Engine):
    """Initialize database tables."""
    Base.metadata.create_all(bind=engine)


# =============================================================================
# Database Models
# =============================================================================


class Note(Base):
    """
    A single anonymous note.

    Likes and reports are plain counters on the row. Once the report
    counter reaches the threshold the note is hidden from public reads,
    but stays in storage for moderators.
    """

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    # Note content
    title: Mapped[str] = mapped_column(String(200), default="", nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)

    # Counters
    likes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    reportcount: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Moderation
    hidden: Mapped[bool] = mapped_column(
        Boolean, default=False, index=True, nullable=False
    )

    # Timestamps
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, default=lambda: datetime.now(UTC)
    )

    # Relationships
    tags: Mapped[List["NoteTag"]] = relationship(
        "NoteTag",
        back_populates="note",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="NoteTag.id",
        lazy="selectin",
    )

    __table_args__ = (
        Index('ix_notes_hidden_created', 'hidden', 'created_at'),
    )

    @property
    def tag_list(self) -> List[str]:
        return [t.tag for t in self.tags]


class NoteTag(Base):
    """A label attached to a note. A note carries each label at most once."""

    __tablename__ = "note_tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    note_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("notes.id", ondelete="CASCADE"), index=True, nullable=False
    )
    tag: Mapped[str] = mapped_column(String(50), index=True, nullable=False)

    note: Mapped["Note"] = relationship("Note", back_populates="tags")

    __table_args__ = (
        UniqueConstraint('note_id', 'tag', name='uq_note_tag'),
    )


class Feedback(Base):
    """Free-text feedback about the site. Unrelated to any note."""

    __tablename__ = "feedback"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, default=lambda: datetime.now(UTC)
    )
