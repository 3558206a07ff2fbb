"""ORM models. Importing this package registers every table with Base.metadata."""

from inote.models.note import Note
from inote.models.user import Role, User

__all__ = ["Note", "Role", "User"]
