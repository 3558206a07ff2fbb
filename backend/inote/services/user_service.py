"""
iNote Backend - User Service
============================

What:  Business rules for users: read-through caching over the "users"
       region, not-found results, uniqueness conflicts, delete protection
       for users who still own notes.
Who:   Users route handlers.
"""

import logging
from datetime import datetime
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from inote.exceptions import ConflictError
from inote.models.user import Role, User
from inote.repositories import UserRepository
from inote.result import Found, NotFound, Result
from inote.schemas.user import UserCreate, UserResponse, UserUpdate
from inote.services.base import ALL_KEY, CachedEntityService, id_key

logger = logging.getLogger(__name__)


def _snapshot(users: List[User]) -> tuple:
    return tuple(UserResponse.model_validate(user) for user in users)


class UserService(CachedEntityService):
    """User operations over a request session."""

    resource = "user"

    # ── Reads ─────────────────────────────────────────────────────────────

    async def find_all(self, db: AsyncSession) -> List[UserResponse]:
        async def load():
            return _snapshot(await UserRepository(db).find_all())

        users = await self._cached(ALL_KEY, load)
        logger.info("Listing %d users", len(users))
        return list(users)

    async def find_by_id(self, db: AsyncSession, user_id: int) -> Result[UserResponse]:
        async def load():
            user = await UserRepository(db).find_by_id(user_id)
            return UserResponse.model_validate(user) if user is not None else None

        user = await self._cached(id_key(user_id), load)
        if user is None:
            return NotFound(self.resource, user_id)
        return Found(user)

    async def find_by_username(self, db: AsyncSession, username: str) -> List[UserResponse]:
        async def load():
            return _snapshot(await UserRepository(db).find_by_username(username))

        return list(await self._cached(("username", username), load))

    async def find_by_email(self, db: AsyncSession, email: str) -> Result[UserResponse]:
        async def load():
            user = await UserRepository(db).find_by_email(email)
            return UserResponse.model_validate(user) if user is not None else None

        user = await self._cached(("email", email), load)
        if user is None:
            return NotFound(self.resource, email)
        return Found(user)

    async def find_by_role(self, db: AsyncSession, role: Role) -> List[UserResponse]:
        async def load():
            return _snapshot(await UserRepository(db).find_by_role(role))

        return list(await self._cached(("role", role.name), load))

    async def find_by_created_at_after(
        self, db: AsyncSession, date: datetime
    ) -> List[UserResponse]:
        async def load():
            return _snapshot(await UserRepository(db).find_by_created_at_after(date))

        return list(await self._cached(("created_after", date), load))

    # ── Writes ────────────────────────────────────────────────────────────

    async def save(self, db: AsyncSession, data: UserCreate) -> UserResponse:
        """
        Register a user.

        Raises:
            ConflictError: username or email already taken
        """
        async with self._write(db, "create") as pending:
            user = await UserRepository(db).save(
                User(
                    username=data.username,
                    email=data.email,
                    password=data.password,
                    role=data.role,
                )
            )
            created = UserResponse.model_validate(user)
            pending.refresh(created.id, created)

        logger.info("User %s created", created.id)
        return created

    async def update(
        self, db: AsyncSession, user_id: int, data: UserUpdate
    ) -> Result[UserResponse]:
        async with self._write(db, "update") as pending:
            user = await UserRepository(db).update(user_id, data)
            if user is None:
                return NotFound(self.resource, user_id)
            updated = UserResponse.model_validate(user)
            pending.refresh(user_id, updated)

        logger.info("User %s updated", user_id)
        return Found(updated)

    async def delete_by_id(self, db: AsyncSession, user_id: int) -> Result[int]:
        """
        Delete a user who owns no notes.

        Raises:
            ConflictError: the user still owns notes
        """
        async with self._write(db, "delete") as pending:
            repository = UserRepository(db)
            if await repository.find_by_id(user_id) is None:
                return NotFound(self.resource, user_id)

            owned = await repository.count_notes(user_id)
            if owned:
                raise ConflictError(
                    message=f"User '{user_id}' still owns {owned} note(s) and cannot be deleted",
                    context={"user_id": user_id, "notes": owned},
                )

            await repository.delete_by_id(user_id)
            pending.forget(user_id)

        logger.info("User %s deleted", user_id)
        return Found(user_id)
