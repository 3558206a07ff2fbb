"""
iNote Backend - Note SQLAlchemy Model
=====================================

What:  ORM model for the `notes` table.
Who:   NoteRepository for CRUD; Alembic for schema management.

Table Design:
    - Integer identity primary key, assigned on insert and never changed
    - title VARCHAR(255) and content TEXT, both required
    - user_id: owning user, nullable so ownerless notes stay valid
    - created_at set once on insert; updated_at refreshed on every write
    - Index on created_at for the created-between range query
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inote.database import Base, utcnow

if TYPE_CHECKING:
    from inote.models.user import User


class Note(Base):
    """
    A titled text note, optionally owned by a user.

    Lifecycle:
        1. Inserted by NoteRepository.save() (id, created_at, updated_at assigned)
        2. title/content overwritten by NoteRepository.update(); updated_at refreshed
        3. Removed by NoteRepository.delete_by_id()
    """

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    # RESTRICT: a user who still owns notes cannot be deleted
    user_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )

    # ── Timestamps (naive UTC) ────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    user: Mapped[Optional["User"]] = relationship(back_populates="notes", lazy="raise")

    __table_args__ = (
        Index("idx_notes_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Note(id={self.id}, title='{self.title}', "
            f"user_id={self.user_id}, created_at='{self.created_at}')>"
        )
