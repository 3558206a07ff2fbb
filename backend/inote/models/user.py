"""
iNote Backend - User SQLAlchemy Model
=====================================

What:  ORM model for the `users` table and the Role enumeration.
Who:   UserRepository for CRUD; NoteService to verify note owners.

Constraints:
    - username VARCHAR(50), unique
    - email VARCHAR(100), unique
    - role stored by name (USER, ADMIN), defaults to USER
    - password stored as given
"""

import enum
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, Enum, Integer, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inote.database import Base, utcnow

if TYPE_CHECKING:
    from inote.models.note import Note


class Role(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"

    @classmethod
    def parse(cls, value: str) -> "Role":
        """Case-insensitive lookup by name; raises ValueError for unknown roles."""
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(
                f"Unknown role '{value}'. Must be one of: {[r.name for r in cls]}"
            ) from None


class User(Base):
    """A registered user. Owns zero or more notes."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(String(50), nullable=False)

    email: Mapped[str] = mapped_column(String(100), nullable=False)

    password: Mapped[str] = mapped_column(String(255), nullable=False)

    role: Mapped[Role] = mapped_column(
        Enum(Role, name="user_role", native_enum=False, length=20),
        nullable=False,
        default=Role.USER,
        server_default=text("'USER'"),
    )

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

    last_login: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Inverse side only; never loaded implicitly in async code. Deletes leave
    # the notes rows to the foreign key (RESTRICT).
    notes: Mapped[List["Note"]] = relationship(
        back_populates="user",
        lazy="raise",
        passive_deletes="all",
    )

    __table_args__ = (
        UniqueConstraint("username", name="uq_users_username"),
        UniqueConstraint("email", name="uq_users_email"),
    )

    def __repr__(self) -> str:
        # password deliberately left out
        return f"<User(id={self.id}, username='{self.username}', role={self.role.name if self.role else None})>"
