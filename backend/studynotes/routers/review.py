"""Review (SRS) API router."""

from __future__ import annotations

import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from studynotes.config import get_review_settings
from studynotes.models import (
    ConfidenceReviewRequest,
    DueQueueResponse,
    NoteSchedule,
    RatingReviewRequest,
    ReviewEvent,
    ReviewLogResponse,
    ReviewResultResponse,
    ReviewStatsResponse,
    ScheduleResponse,
)
from studynotes.repositories import (
    ScheduleConflictError,
    ScheduleNotFoundError,
    ScheduleRepository,
    get_review_log_repository,
    get_schedule_repository,
)
from studynotes.routers.dependencies import get_user_id
from studynotes.srs import (
    ConfidenceOutcome,
    InvalidRatingError,
    InvalidStateError,
    RatingOutcome,
    ReviewOutcome,
    Strategy,
    build_log_entry,
    compute_next,
    get_due_cache,
    review_stats,
)
from studynotes.srs.time import utc_now

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/review", tags=["review"])

UserId = Annotated[str, Depends(get_user_id)]


def apply_review(
    schedule: NoteSchedule,
    outcome: ReviewOutcome,
    strategy: Strategy,
    schedule_repo: ScheduleRepository,
) -> tuple[NoteSchedule, ReviewEvent]:
    """Compute the next schedule of a note and persist it with its log entry.

    The new schedule and the review event are written in one batch; if the
    write fails nothing is applied and the caller may retry the whole review.

    Returns:
        The persisted schedule and the recorded review event
    """
    before = schedule.to_state()
    after = compute_next(before, outcome, strategy)
    entry = build_log_entry(before, outcome, after, schedule.noteId, schedule.userId)
    event = ReviewEvent.from_entry(entry)

    updated = schedule_repo.apply_review(schedule.with_state(after), event)
    get_due_cache().invalidate(schedule.userId)

    logger.info(
        "Review applied: user=%s, note=%s, strategy=%s, repetitions=%d, "
        "difficulty_adjustment=%+d, next_review=%s",
        schedule.userId, schedule.noteId, strategy, after.repetition_count,
        entry.difficulty_adjustment, updated.nextReviewDate,
    )
    return updated, event


def _corrupt_state(user_id: str, error: InvalidStateError) -> HTTPException:
    logger.error("Corrupt schedule state: user=%s, error=%s", user_id, error)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Stored schedule state is invalid: {error}",
    )


def _submit_review(note_id: str, user_id: str, outcome: ReviewOutcome, strategy: Strategy) -> ReviewResultResponse:
    repo = get_schedule_repository()
    try:
        schedule = repo.get_by_note(note_id, user_id)
        updated, event = apply_review(schedule, outcome, strategy, repo)
    except ScheduleNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Schedule for note {note_id} not found",
        )
    except InvalidRatingError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except InvalidStateError as e:
        raise _corrupt_state(user_id, e)
    except ScheduleConflictError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Note {note_id} was reviewed concurrently; retry the review",
        )

    return ReviewResultResponse(schedule=ScheduleResponse.from_document(updated), event=event)


@router.post("/{note_id}/rating", response_model=ReviewResultResponse)
async def review_with_rating(note_id: str, body: RatingReviewRequest, user_id: UserId) -> ReviewResultResponse:
    """Apply a review scored with a 1-5 difficulty rating."""
    outcome = RatingOutcome(
        difficulty_rating=body.difficultyRating,
        time_spent_seconds=body.timeSpentSeconds,
        reviewed_at=utc_now(),
    )
    return _submit_review(note_id, user_id, outcome, "rating")


@router.post("/{note_id}/confidence", response_model=ReviewResultResponse)
async def review_with_confidence(
    note_id: str, body: ConfidenceReviewRequest, user_id: UserId
) -> ReviewResultResponse:
    """Apply a review scored by recall and confidence."""
    outcome = ConfidenceOutcome(
        initial_confidence=body.initialConfidence,
        final_confidence=body.finalConfidence,
        was_recalled=body.wasRecalled,
        retrieval_attempts=body.retrievalAttempts,
        time_spent_seconds=body.timeSpentSeconds,
        reviewed_at=utc_now(),
    )
    return _submit_review(note_id, user_id, outcome, "confidence")


@router.get("/due", response_model=DueQueueResponse)
async def due_queue(
    user_id: UserId,
    limit: Annotated[int | None, Query(ge=0, description="Maximum number of notes")] = None,
) -> DueQueueResponse:
    """Return the notes due now, most overdue first."""
    if limit is None:
        limit = get_review_settings().due_limit

    schedules = get_schedule_repository().list_by_user(user_id)
    try:
        notes = [(schedule.noteId, schedule.to_state()) for schedule in schedules]
        note_ids = get_due_cache().get_due(user_id, notes, utc_now(), limit)
    except InvalidStateError as e:
        raise _corrupt_state(user_id, e)

    return DueQueueResponse(noteIds=note_ids, count=len(note_ids), limit=limit)


@router.get("/stats", response_model=ReviewStatsResponse)
async def stats(user_id: UserId) -> ReviewStatsResponse:
    """Return review statistics over all scheduled notes."""
    schedules = get_schedule_repository().list_by_user(user_id)
    try:
        result = review_stats([schedule.to_state() for schedule in schedules], utc_now())
    except InvalidStateError as e:
        raise _corrupt_state(user_id, e)
    return ReviewStatsResponse.from_stats(result)


@router.get("/log", response_model=ReviewLogResponse)
async def review_log(
    user_id: UserId,
    start: date | None = None,
    end: date | None = None,
    noteId: str | None = None,
) -> ReviewLogResponse:
    """List recorded review events, newest first, optionally within a date range."""
    if start is not None and end is not None and start > end:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="start must not be after end",
        )

    events = get_review_log_repository().list_by_user(
        user_id,
        start=start.isoformat() if start else None,
        end=end.isoformat() if end else None,
        note_id=noteId,
    )
    return ReviewLogResponse(events=events, count=len(events))
