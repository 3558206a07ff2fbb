"""
iNote Backend - User Repository
===============================

What:  Query and mutation methods for the `users` table.
Who:   UserService (CRUD and lookups) and NoteService (owner checks).
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from inote.database import utcnow
from inote.models.note import Note
from inote.models.user import Role, User
from inote.schemas.user import UserUpdate

logger = logging.getLogger(__name__)


class UserRepository:
    """Persistence gateway for User rows."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_all(self) -> List[User]:
        result = await self.session.execute(select(User).order_by(User.id))
        users = list(result.scalars().all())
        logger.info("Fetched all users: %d found", len(users))
        return users

    async def find_by_id(self, user_id: int) -> Optional[User]:
        user = await self.session.get(User, user_id)
        if user is None:
            logger.warning("User %s not found", user_id)
        return user

    async def find_by_username(self, username: str) -> List[User]:
        result = await self.session.execute(
            select(User).where(User.username == username).order_by(User.id)
        )
        users = list(result.scalars().all())
        logger.info("Users named '%s': %d found", username, len(users))
        return users

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(
            select(User).where(User.email == email).limit(1)
        )
        user = result.scalars().first()
        if user is None:
            logger.warning("User with email '%s' not found", email)
        return user

    async def find_by_role(self, role: Role) -> List[User]:
        result = await self.session.execute(
            select(User).where(User.role == role).order_by(User.id)
        )
        users = list(result.scalars().all())
        logger.info("Users with role %s: %d found", role.name, len(users))
        return users

    async def find_by_created_at_after(self, date: datetime) -> List[User]:
        """Users registered strictly after `date`."""
        result = await self.session.execute(
            select(User).where(User.created_at > date).order_by(User.id)
        )
        users = list(result.scalars().all())
        logger.info("Users registered after %s: %d found", date, len(users))
        return users

    async def count_notes(self, user_id: int) -> int:
        result = await self.session.execute(
            select(func.count(Note.id)).where(Note.user_id == user_id)
        )
        return result.scalar() or 0

    async def save(self, user: User) -> User:
        """Insert when `user.id` is unset, merge otherwise."""
        if user.id is None:
            self.session.add(user)
            await self.session.flush()
            logger.info("Inserted user %s", user.id)
            return user

        merged = await self.session.merge(user)
        await self.session.flush()
        logger.info("Merged user %s", merged.id)
        return merged

    async def update(self, user_id: int, data: UserUpdate) -> Optional[User]:
        """
        Overwrite username, email and password (and role, when given).

        Returns None when the user does not exist.
        """
        user = await self.find_by_id(user_id)
        if user is None:
            logger.warning("User %s not found for update", user_id)
            return None

        user.username = data.username
        user.email = data.email
        user.password = data.password
        if data.role is not None:
            user.role = data.role
        user.updated_at = utcnow()
        await self.session.flush()
        logger.info("Updated user %s", user_id)
        return user

    async def delete_by_id(self, user_id: int) -> None:
        user = await self.find_by_id(user_id)
        if user is None:
            logger.warning("User %s not found for deletion", user_id)
            return

        await self.session.delete(user)
        await self.session.flush()
        logger.info("Deleted user %s", user_id)
