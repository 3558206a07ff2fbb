"""
iNote Backend - Note Service
============================

What:  Business rules for notes: read-through caching, not-found results,
       owner validation, field-level updates.
Who:   Notes route handlers. One instance per application, holding the
       "notes" cache region.

Read flow:
    cache hit → return
    cache miss → NoteRepository query → NoteResponse snapshots → cache put

Write flow (inside the service lock):
    NoteRepository write → commit → put ("id", id) / evict, drop query keys
"""

import logging
from datetime import datetime
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from inote.exceptions import ValidationError
from inote.models.note import Note
from inote.repositories import NoteRepository, UserRepository
from inote.result import Found, NotFound, Result
from inote.schemas.note import NoteCreate, NoteResponse, NoteUpdate
from inote.services.base import ALL_KEY, CachedEntityService, id_key

logger = logging.getLogger(__name__)


def _snapshot(notes: List[Note]) -> tuple:
    return tuple(NoteResponse.model_validate(note) for note in notes)


class NoteService(CachedEntityService):
    """
    Note operations over a request session.

    Single-entity operations return `Found`/`NotFound`. Collection lookups
    return a list that may be empty; deciding whether an empty list is an
    HTTP error is left to the routes.
    """

    resource = "note"

    # ── Reads ─────────────────────────────────────────────────────────────

    async def find_all(self, db: AsyncSession) -> List[NoteResponse]:
        async def load():
            return _snapshot(await NoteRepository(db).find_all())

        notes = await self._cached(ALL_KEY, load)
        logger.info("Listing %d notes", len(notes))
        return list(notes)

    async def find_by_id(self, db: AsyncSession, note_id: int) -> Result[NoteResponse]:
        async def load():
            note = await NoteRepository(db).find_by_id(note_id)
            return NoteResponse.model_validate(note) if note is not None else None

        note = await self._cached(id_key(note_id), load)
        if note is None:
            logger.warning("Note %s not found", note_id)
            return NotFound(self.resource, note_id)
        return Found(note)

    async def find_by_title(self, db: AsyncSession, title: str) -> List[NoteResponse]:
        async def load():
            return _snapshot(await NoteRepository(db).find_by_title(title))

        return list(await self._cached(("title", title), load))

    async def find_by_user(self, db: AsyncSession, user_id: int) -> List[NoteResponse]:
        async def load():
            return _snapshot(await NoteRepository(db).find_by_user(user_id))

        return list(await self._cached(("user", user_id), load))

    async def find_by_created_at_between(
        self, db: AsyncSession, start: datetime, end: datetime
    ) -> List[NoteResponse]:
        async def load():
            return _snapshot(await NoteRepository(db).find_by_created_at_between(start, end))

        return list(await self._cached(("created_between", start, end), load))

    # ── Writes ────────────────────────────────────────────────────────────

    async def save(self, db: AsyncSession, data: NoteCreate) -> NoteResponse:
        """
        Create a note.

        Raises:
            ValidationError: `user_id` refers to a user that does not exist
            ConflictError / DatabaseError: the insert failed
        """
        async with self._write(db, "create") as pending:
            if data.user_id is not None and await UserRepository(db).find_by_id(data.user_id) is None:
                raise ValidationError(
                    message=f"User '{data.user_id}' does not exist",
                    field="user_id",
                )

            note = await NoteRepository(db).save(
                Note(title=data.title, content=data.content, user_id=data.user_id)
            )
            created = NoteResponse.model_validate(note)
            pending.refresh(created.id, created)

        logger.info("Note %s created", created.id)
        return created

    async def update(
        self, db: AsyncSession, note_id: int, data: NoteUpdate
    ) -> Result[NoteResponse]:
        """Replace title and content of an existing note."""
        async with self._write(db, "update") as pending:
            note = await NoteRepository(db).update(note_id, data)
            if note is None:
                return NotFound(self.resource, note_id)
            updated = NoteResponse.model_validate(note)
            pending.refresh(note_id, updated)

        logger.info("Note %s updated", note_id)
        return Found(updated)

    async def delete_by_id(self, db: AsyncSession, note_id: int) -> Result[int]:
        async with self._write(db, "delete") as pending:
            repository = NoteRepository(db)
            if await repository.find_by_id(note_id) is None:
                return NotFound(self.resource, note_id)
            await repository.delete_by_id(note_id)
            pending.forget(note_id)

        logger.info("Note %s deleted", note_id)
        return Found(note_id)
