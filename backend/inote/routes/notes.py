"""
iNote Backend - Notes Route Handlers
====================================

What:  HTTP endpoints for notes under {API_PREFIX}/notes.
How:   Parse path/query/body, call NoteService, map the result:

    list found / single Found      → 200 with body
    filtered lookup empty          → 404, no body
    NotFound                       → 404, no body
    create                         → 200 with created note
    delete Found                   → 204, no body
    bad date parameter             → 400 (ValidationError handler)

Each handler logs entry and exit; the list-all handler also logs duration.
"""

import logging
import time
from datetime import datetime
from typing import List, Tuple

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from inote.config import settings
from inote.database import get_db_session
from inote.dependencies import created_between_range, get_note_service
from inote.result import Found, NotFound
from inote.schemas.common import ErrorResponse
from inote.schemas.note import NoteCreate, NoteResponse, NoteUpdate
from inote.services import NoteService

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{settings.api_prefix}/notes", tags=["Notes"])

_NOT_FOUND = {404: {"description": "No matching note"}}


@router.get("", response_model=List[NoteResponse], summary="List all notes")
async def get_all_notes(
    db: AsyncSession = Depends(get_db_session),
    service: NoteService = Depends(get_note_service),
):
    logger.info("get_all_notes - start")
    started = time.perf_counter()
    notes = await service.find_all(db)
    logger.info("get_all_notes - duration %.1fms", (time.perf_counter() - started) * 1000)
    logger.info("get_all_notes - end, count=%d", len(notes))
    return notes


@router.get(
    "/created-between",
    response_model=List[NoteResponse],
    responses={**_NOT_FOUND, 400: {"model": ErrorResponse}},
    summary="Notes created within a day range (inclusive)",
)
async def get_notes_created_between(
    date_range: Tuple[datetime, datetime] = Depends(created_between_range),
    db: AsyncSession = Depends(get_db_session),
    service: NoteService = Depends(get_note_service),
):
    start, end = date_range
    logger.info("get_notes_created_between - start, %s .. %s", start, end)
    notes = await service.find_by_created_at_between(db, start, end)
    if not notes:
        logger.warning("get_notes_created_between - no notes between %s and %s", start, end)
        return Response(status_code=404)
    logger.info("get_notes_created_between - end, count=%d", len(notes))
    return notes


@router.get(
    "/title/{title}",
    response_model=List[NoteResponse],
    responses=_NOT_FOUND,
    summary="Notes whose title matches exactly",
)
async def get_notes_by_title(
    title: str,
    db: AsyncSession = Depends(get_db_session),
    service: NoteService = Depends(get_note_service),
):
    logger.info("get_notes_by_title - start, title=%r", title)
    notes = await service.find_by_title(db, title)
    if not notes:
        logger.warning("get_notes_by_title - no notes titled %r", title)
        return Response(status_code=404)
    logger.info("get_notes_by_title - end, count=%d", len(notes))
    return notes


@router.get(
    "/user/{user_id}",
    response_model=List[NoteResponse],
    responses=_NOT_FOUND,
    summary="Notes owned by a user",
)
async def get_notes_by_user(
    user_id: int,
    db: AsyncSession = Depends(get_db_session),
    service: NoteService = Depends(get_note_service),
):
    logger.info("get_notes_by_user - start, user_id=%s", user_id)
    notes = await service.find_by_user(db, user_id)
    if not notes:
        logger.warning("get_notes_by_user - user %s owns no notes", user_id)
        return Response(status_code=404)
    logger.info("get_notes_by_user - end, count=%d", len(notes))
    return notes


@router.get("/{note_id}", response_model=NoteResponse, responses=_NOT_FOUND, summary="Get a note")
async def get_note_by_id(
    note_id: int,
    db: AsyncSession = Depends(get_db_session),
    service: NoteService = Depends(get_note_service),
):
    logger.info("get_note_by_id - start, note_id=%s", note_id)
    match await service.find_by_id(db, note_id):
        case Found(value=note):
            logger.info("get_note_by_id - end, note_id=%s", note.id)
            return note
        case NotFound() as missing:
            logger.warning("get_note_by_id - %s", missing.message)
            return Response(status_code=404)


@router.post(
    "",
    response_model=NoteResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Create a note",
)
async def add_note(
    payload: NoteCreate,
    db: AsyncSession = Depends(get_db_session),
    service: NoteService = Depends(get_note_service),
):
    logger.info("add_note - start, title=%r", payload.title)
    note = await service.save(db, payload)
    logger.info("add_note - end, note_id=%s", note.id)
    return note


@router.put("/{note_id}", response_model=NoteResponse, responses=_NOT_FOUND, summary="Update a note")
async def update_note(
    note_id: int,
    payload: NoteUpdate,
    db: AsyncSession = Depends(get_db_session),
    service: NoteService = Depends(get_note_service),
):
    logger.info("update_note - start, note_id=%s", note_id)
    match await service.update(db, note_id, payload):
        case Found(value=note):
            logger.info("update_note - end, note_id=%s", note.id)
            return note
        case NotFound() as missing:
            logger.warning("update_note - %s", missing.message)
            return Response(status_code=404)


@router.delete(
    "/{note_id}",
    status_code=204,
    response_class=Response,
    responses=_NOT_FOUND,
    summary="Delete a note",
)
async def delete_note(
    note_id: int,
    db: AsyncSession = Depends(get_db_session),
    service: NoteService = Depends(get_note_service),
):
    logger.info("delete_note - start, note_id=%s", note_id)
    match await service.delete_by_id(db, note_id):
        case Found():
            logger.info("delete_note - end, note_id=%s", note_id)
            return Response(status_code=204)
        case NotFound() as missing:
            logger.warning("delete_note - %s", missing.message)
            return Response(status_code=404)
