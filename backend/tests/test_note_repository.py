"""
iNote Backend - Note Repository Tests
=====================================

What:  Query and mutation behaviour of NoteRepository against SQLite.
"""

from datetime import datetime, timedelta

import pytest

from inote.models.note import Note
from inote.models.user import User
from inote.repositories import NoteRepository
from inote.schemas.note import NoteUpdate


async def _add(session, title, content="body", user_id=None, created_at=None):
    note = Note(title=title, content=content, user_id=user_id)
    if created_at is not None:
        note.created_at = created_at
    saved = await NoteRepository(session).save(note)
    await session.commit()
    return saved


class TestNoteRepositoryQueries:

    @pytest.mark.asyncio
    async def test_save_assigns_id_and_timestamps(self, db_session):
        note = await _add(db_session, "First")
        assert note.id == 1
        assert note.created_at is not None
        assert note.updated_at is not None

    @pytest.mark.asyncio
    async def test_find_all_orders_by_id(self, db_session):
        await _add(db_session, "b")
        await _add(db_session, "a")
        notes = await NoteRepository(db_session).find_all()
        assert [n.title for n in notes] == ["b", "a"]

    @pytest.mark.asyncio
    async def test_find_by_id_absent_returns_none(self, db_session):
        assert await NoteRepository(db_session).find_by_id(99) is None

    @pytest.mark.asyncio
    async def test_find_by_title_is_exact_match(self, db_session):
        await _add(db_session, "Groceries")
        await _add(db_session, "Groceries list")
        await _add(db_session, "groceries")

        notes = await NoteRepository(db_session).find_by_title("Groceries")

        assert [n.title for n in notes] == ["Groceries"]

    @pytest.mark.asyncio
    async def test_find_by_user(self, db_session):
        owner = User(username="ann", email="ann@example.com", password="pw")
        db_session.add(owner)
        await db_session.flush()
        await _add(db_session, "mine", user_id=owner.id)
        await _add(db_session, "nobody's")

        notes = await NoteRepository(db_session).find_by_user(owner.id)

        assert [n.title for n in notes] == ["mine"]

    @pytest.mark.asyncio
    async def test_created_between_is_inclusive(self, db_session):
        start = datetime(2024, 3, 1, 0, 0, 0)
        end = datetime(2024, 3, 31, 23, 59, 59)
        await _add(db_session, "before", created_at=start - timedelta(seconds=1))
        await _add(db_session, "at start", created_at=start)
        await _add(db_session, "at end", created_at=end)
        await _add(db_session, "after", created_at=end + timedelta(seconds=1))

        notes = await NoteRepository(db_session).find_by_created_at_between(start, end)

        assert [n.title for n in notes] == ["at start", "at end"]


class TestNoteRepositoryWrites:

    @pytest.mark.asyncio
    async def test_update_changes_fields_and_keeps_identity(self, db_session):
        note = await _add(db_session, "Draft", "v1", created_at=datetime(2024, 1, 1))
        created_at = note.created_at

        updated = await NoteRepository(db_session).update(
            note.id, NoteUpdate(title="Final", content="v2")
        )
        await db_session.commit()

        assert updated.id == note.id
        assert updated.title == "Final"
        assert updated.content == "v2"
        assert updated.created_at == created_at
        assert updated.updated_at > created_at

    @pytest.mark.asyncio
    async def test_update_absent_returns_none(self, db_session):
        result = await NoteRepository(db_session).update(5, NoteUpdate(title="t", content="c"))
        assert result is None

    @pytest.mark.asyncio
    async def test_save_with_id_merges_onto_existing_row(self, db_session):
        note = await _add(db_session, "Old")
        merged = await NoteRepository(db_session).save(
            Note(id=note.id, title="New", content="body")
        )
        await db_session.commit()

        assert merged.id == note.id
        assert len(await NoteRepository(db_session).find_all()) == 1
        assert (await NoteRepository(db_session).find_by_id(note.id)).title == "New"

    @pytest.mark.asyncio
    async def test_delete_by_id(self, db_session):
        note = await _add(db_session, "Doomed")
        repository = NoteRepository(db_session)

        await repository.delete_by_id(note.id)
        await db_session.commit()

        assert await repository.find_by_id(note.id) is None

    @pytest.mark.asyncio
    async def test_delete_absent_is_noop(self, db_session):
        await _add(db_session, "Survivor")
        await NoteRepository(db_session).delete_by_id(42)
        assert len(await NoteRepository(db_session).find_all()) == 1
