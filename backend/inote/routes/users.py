"""
iNote Backend - Users Route Handlers
====================================

What:  HTTP endpoints for users under {API_PREFIX}/users.

Route Inventory:
    GET    /users                              list all
    GET    /users/{id}                         single or 404
    GET    /users/search/username/{username}   list or 404
    GET    /users/search/email/{email}         single or 404
    GET    /users/search/role/{role}           list, 404, or 400 for unknown role
    GET    /users/search/createdAfter/{date}   list, 404, or 400 for a bad date
    POST   /users                              created user (409 on duplicates)
    PUT    /users/{id}                         updated user or 404
    DELETE /users/{id}                         204, 404, or 409 while notes remain
"""

import logging
import time
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from inote.config import settings
from inote.database import get_db_session
from inote.dependencies import get_user_service, parse_datetime, parse_role
from inote.result import Found, NotFound
from inote.schemas.common import ErrorResponse
from inote.schemas.user import UserCreate, UserResponse, UserUpdate
from inote.services import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{settings.api_prefix}/users", tags=["Users"])

_NOT_FOUND = {404: {"description": "No matching user"}}
_BAD_REQUEST = {400: {"model": ErrorResponse}}
_CONFLICT = {409: {"model": ErrorResponse}}


@router.get("", response_model=List[UserResponse], summary="List all users")
async def get_all_users(
    db: AsyncSession = Depends(get_db_session),
    service: UserService = Depends(get_user_service),
):
    logger.info("get_all_users - start")
    started = time.perf_counter()
    users = await service.find_all(db)
    logger.info("get_all_users - duration %.1fms", (time.perf_counter() - started) * 1000)
    logger.info("get_all_users - end, count=%d", len(users))
    return users


@router.get("/{user_id}", response_model=UserResponse, responses=_NOT_FOUND, summary="Get a user")
async def get_user_by_id(
    user_id: int,
    db: AsyncSession = Depends(get_db_session),
    service: UserService = Depends(get_user_service),
):
    logger.info("get_user_by_id - start, user_id=%s", user_id)
    match await service.find_by_id(db, user_id):
        case Found(value=user):
            logger.info("get_user_by_id - end, user_id=%s", user.id)
            return user
        case NotFound() as missing:
            logger.warning("get_user_by_id - %s", missing.message)
            return Response(status_code=404)


@router.get(
    "/search/username/{username}",
    response_model=List[UserResponse],
    responses=_NOT_FOUND,
    summary="Users with an exact username",
)
async def get_users_by_username(
    username: str,
    db: AsyncSession = Depends(get_db_session),
    service: UserService = Depends(get_user_service),
):
    logger.info("get_users_by_username - start, username=%r", username)
    users = await service.find_by_username(db, username)
    if not users:
        logger.warning("get_users_by_username - no users named %r", username)
        return Response(status_code=404)
    logger.info("get_users_by_username - end, count=%d", len(users))
    return users


@router.get(
    "/search/email/{email}",
    response_model=UserResponse,
    responses=_NOT_FOUND,
    summary="User with an exact email",
)
async def get_user_by_email(
    email: str,
    db: AsyncSession = Depends(get_db_session),
    service: UserService = Depends(get_user_service),
):
    logger.info("get_user_by_email - start, email=%r", email)
    match await service.find_by_email(db, email):
        case Found(value=user):
            logger.info("get_user_by_email - end, user_id=%s", user.id)
            return user
        case NotFound() as missing:
            logger.warning("get_user_by_email - %s", missing.message)
            return Response(status_code=404)


@router.get(
    "/search/role/{role}",
    response_model=List[UserResponse],
    responses={**_NOT_FOUND, **_BAD_REQUEST},
    summary="Users with a role (case-insensitive)",
)
async def get_users_by_role(
    role: str,
    db: AsyncSession = Depends(get_db_session),
    service: UserService = Depends(get_user_service),
):
    logger.info("get_users_by_role - start, role=%r", role)
    parsed = parse_role(role)
    users = await service.find_by_role(db, parsed)
    if not users:
        logger.warning("get_users_by_role - no users with role %s", parsed.name)
        return Response(status_code=404)
    logger.info("get_users_by_role - end, count=%d", len(users))
    return users


@router.get(
    "/search/createdAfter/{date}",
    response_model=List[UserResponse],
    responses={**_NOT_FOUND, **_BAD_REQUEST},
    summary="Users registered after an ISO-8601 date-time",
)
async def get_users_created_after(
    date: str,
    db: AsyncSession = Depends(get_db_session),
    service: UserService = Depends(get_user_service),
):
    logger.info("get_users_created_after - start, date=%r", date)
    parsed = parse_datetime(date)
    users = await service.find_by_created_at_after(db, parsed)
    if not users:
        logger.warning("get_users_created_after - nobody registered after %s", parsed)
        return Response(status_code=404)
    logger.info("get_users_created_after - end, count=%d", len(users))
    return users


@router.post("", response_model=UserResponse, responses=_CONFLICT, summary="Register a user")
async def add_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db_session),
    service: UserService = Depends(get_user_service),
):
    logger.info("add_user - start, username=%r", payload.username)
    user = await service.save(db, payload)
    logger.info("add_user - end, user_id=%s", user.id)
    return user


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    responses={**_NOT_FOUND, **_CONFLICT},
    summary="Update a user",
)
async def update_user(
    user_id: int,
    payload: UserUpdate,
    db: AsyncSession = Depends(get_db_session),
    service: UserService = Depends(get_user_service),
):
    logger.info("update_user - start, user_id=%s", user_id)
    match await service.update(db, user_id, payload):
        case Found(value=user):
            logger.info("update_user - end, user_id=%s", user.id)
            return user
        case NotFound() as missing:
            logger.warning("update_user - %s", missing.message)
            return Response(status_code=404)


@router.delete(
    "/{user_id}",
    status_code=204,
    response_class=Response,
    responses={**_NOT_FOUND, **_CONFLICT},
    summary="Delete a user",
)
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(get_db_session),
    service: UserService = Depends(get_user_service),
):
    logger.info("delete_user - start, user_id=%s", user_id)
    match await service.delete_by_id(db, user_id):
        case Found():
            logger.info("delete_user - end, user_id=%s", user_id)
            return Response(status_code=204)
        case NotFound() as missing:
            logger.warning("delete_user - %s", missing.message)
            return Response(status_code=404)
