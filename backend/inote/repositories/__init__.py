"""
iNote Backend - Repository Layer
================================

What:  Persistence gateway for Note and User rows.
How:   Each repository wraps one request-scoped AsyncSession and issues one
       query or statement per operation. "Not found" is reported as None,
       never as an exception. Repositories flush but never commit; the
       calling service owns the transaction boundary.

Repository Inventory:
    - NoteRepository: notes CRUD plus title/owner/date-range lookups
    - UserRepository: users CRUD plus username/email/role/registration lookups
"""

from inote.repositories.note_repository import NoteRepository
from inote.repositories.user_repository import UserRepository

__all__ = ["NoteRepository", "UserRepository"]
