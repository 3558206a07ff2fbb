# Services package init
"""
iNote Backend - Services Layer
==============================

What:  Business logic between routes (HTTP) and repositories (persistence).
How:   Services are built once per application with their cache region and
       receive the request's AsyncSession on every call.

Service Inventory:
    - CachedEntityService: cache key conventions, write lock, error translation
    - NoteService: notes CRUD and lookups over the "notes" region
    - UserService: users CRUD and lookups over the "users" region
"""

from inote.services.note_service import NoteService
from inote.services.user_service import UserService

__all__ = ["NoteService", "UserService"]
