"""
iNote Backend - Note Repository
===============================

What:  Query and mutation methods for the `notes` table.
Who:   NoteService, one instance per request session.

Query plans:
    find_by_id                  → primary key lookup
    find_by_title               → WHERE title = :title (exact match)
    find_by_user                → WHERE user_id = :user_id (indexed)
    find_by_created_at_between  → WHERE created_at BETWEEN :start AND :end
                                  (idx_notes_created_at)
All multi-row queries are ordered by id, i.e. insertion order.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from inote.database import utcnow
from inote.models.note import Note
from inote.schemas.note import NoteUpdate

logger = logging.getLogger(__name__)


class NoteRepository:
    """Persistence gateway for Note rows."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_all(self) -> List[Note]:
        result = await self.session.execute(select(Note).order_by(Note.id))
        notes = list(result.scalars().all())
        logger.info("Fetched all notes: %d found", len(notes))
        return notes

    async def find_by_id(self, note_id: int) -> Optional[Note]:
        note = await self.session.get(Note, note_id)
        if note is None:
            logger.warning("Note %s not found", note_id)
        return note

    async def find_by_title(self, title: str) -> List[Note]:
        result = await self.session.execute(
            select(Note).where(Note.title == title).order_by(Note.id)
        )
        notes = list(result.scalars().all())
        logger.info("Notes with title '%s': %d found", title, len(notes))
        return notes

    async def find_by_user(self, user_id: int) -> List[Note]:
        result = await self.session.execute(
            select(Note).where(Note.user_id == user_id).order_by(Note.id)
        )
        notes = list(result.scalars().all())
        logger.info("Notes owned by user %s: %d found", user_id, len(notes))
        return notes

    async def find_by_created_at_between(
        self, start: datetime, end: datetime
    ) -> List[Note]:
        """Notes created in [start, end], both ends inclusive."""
        result = await self.session.execute(
            select(Note)
            .where(Note.created_at.between(start, end))
            .order_by(Note.id)
        )
        notes = list(result.scalars().all())
        logger.info("Notes created between %s and %s: %d found", start, end, len(notes))
        return notes

    async def save(self, note: Note) -> Note:
        """
        Insert `note` when it has no id, otherwise merge it onto the stored row.

        Returns the persistent instance with id and timestamps populated.
        """
        if note.id is None:
            self.session.add(note)
            await self.session.flush()
            logger.info("Inserted note %s", note.id)
            return note

        merged = await self.session.merge(note)
        await self.session.flush()
        logger.info("Merged note %s", merged.id)
        return merged

    async def update(self, note_id: int, data: NoteUpdate) -> Optional[Note]:
        """
        Overwrite title and content of an existing note.

        Returns None when the note does not exist. id, owner and created_at
        are left untouched; updated_at is always refreshed.
        """
        note = await self.find_by_id(note_id)
        if note is None:
            logger.warning("Note %s not found for update", note_id)
            return None

        note.title = data.title
        note.content = data.content
        note.updated_at = utcnow()
        await self.session.flush()
        logger.info("Updated note %s", note_id)
        return note

    async def delete_by_id(self, note_id: int) -> None:
        """Delete the note if it exists; absent ids are logged and ignored."""
        note = await self.find_by_id(note_id)
        if note is None:
            logger.warning("Note %s not found for deletion", note_id)
            return

        await self.session.delete(note)
        await self.session.flush()
        logger.info("Deleted note %s", note_id)
