"""Schedules API router."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from studynotes.config import get_review_settings
from studynotes.models import NoteSchedule, ScheduleCreate, ScheduleResponse
from studynotes.repositories import (
    ScheduleAlreadyExistsError,
    ScheduleNotFoundError,
    get_schedule_repository,
)
from studynotes.routers.dependencies import get_user_id
from studynotes.srs import InvalidRatingError, get_due_cache, initial_state
from studynotes.srs.time import utc_now

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/schedules", tags=["schedules"])

UserId = Annotated[str, Depends(get_user_id)]


@router.post("", response_model=ScheduleResponse, status_code=status.HTTP_201_CREATED)
async def create_schedule(schedule_create: ScheduleCreate, user_id: UserId) -> ScheduleResponse:
    """Register a note with the scheduler. It is first due one day from now."""
    settings = get_review_settings()
    difficulty = schedule_create.difficulty
    if difficulty is None:
        difficulty = settings.initial_difficulty
    confidence = schedule_create.confidenceLevel
    if confidence is None:
        confidence = settings.initial_confidence

    try:
        state = initial_state(utc_now(), difficulty=difficulty, confidence_level=confidence)
    except InvalidRatingError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    repo = get_schedule_repository()
    try:
        schedule = repo.create(NoteSchedule.from_state(user_id, schedule_create.noteId, state))
    except ScheduleAlreadyExistsError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Note {schedule_create.noteId} is already scheduled",
        )

    get_due_cache().invalidate(user_id)
    logger.info("Schedule created: user=%s, note=%s, due=%s", user_id, schedule.noteId, schedule.nextReviewDate)
    return ScheduleResponse.from_document(schedule)


@router.get("/{note_id}", response_model=ScheduleResponse)
async def get_schedule(note_id: str, user_id: UserId) -> ScheduleResponse:
    """Get the schedule of a note."""
    repo = get_schedule_repository()
    try:
        schedule = repo.get_by_note(note_id, user_id)
    except ScheduleNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Schedule for note {note_id} not found",
        )
    return ScheduleResponse.from_document(schedule)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_schedule(note_id: str, user_id: UserId) -> None:
    """Stop scheduling a note. Its review log entries are kept."""
    repo = get_schedule_repository()
    try:
        repo.delete(note_id, user_id)
    except ScheduleNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Schedule for note {note_id} not found",
        )
    get_due_cache().invalidate(user_id)
