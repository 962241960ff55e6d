"""Models for review submission, the due queue and the review log."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt

from studynotes.models.schedule import ScheduleResponse
from studynotes.srs import ReviewEventLogEntry, ReviewStats, Strategy
from studynotes.srs.time import utc_datetime_to_iso_z, utc_now_iso


class RatingReviewRequest(BaseModel):
    """Body for POST /review/{note_id}/rating."""

    difficultyRating: StrictInt = Field(..., description="How hard the review felt, 1 (very easy) to 5 (very hard)")
    timeSpentSeconds: StrictInt = Field(0, description="Seconds spent on the review")


class ConfidenceReviewRequest(BaseModel):
    """Body for POST /review/{note_id}/confidence."""

    initialConfidence: StrictInt = Field(..., description="Confidence before revealing the answer, 1-5")
    finalConfidence: StrictInt = Field(..., description="Confidence after revealing the answer, 1-5")
    wasRecalled: StrictBool = Field(..., description="Whether the note was recalled")
    retrievalAttempts: StrictInt = Field(1, description="Attempts made before resolution")
    timeSpentSeconds: StrictInt = Field(0, description="Seconds spent on the review")


class ReviewEvent(BaseModel):
    """Review log entry as stored in the database and returned by the API."""

    model_config = ConfigDict(frozen=True)

    id: str
    docType: Literal["reviewEvent"] = "reviewEvent"
    noteId: str
    userId: str = Field(..., description="Owner user ID (partition key)")
    strategy: Strategy
    reviewedAt: str = Field(..., description="Review timestamp (UTC ISO Z)")
    reviewDate: str = Field(..., description="UTC calendar date of the review (YYYY-MM-DD)")
    timeSpentSeconds: int
    difficultyAdjustment: int = Field(..., description="Signed change applied to difficulty")
    repetitionCount: int = Field(..., description="Repetition count after the review")
    nextReviewDate: str = Field(..., description="Due date produced by the review (UTC ISO Z)")

    difficultyRating: int | None = None
    initialConfidence: int | None = None
    finalConfidence: int | None = None
    wasRecalled: bool | None = None
    retrievalAttempts: int | None = None

    createdAt: str = Field(default_factory=utc_now_iso)

    @classmethod
    def from_entry(cls, entry: ReviewEventLogEntry) -> "ReviewEvent":
        return cls(
            id=entry.id,
            noteId=entry.note_id,
            userId=entry.user_id,
            strategy=entry.strategy,
            reviewedAt=utc_datetime_to_iso_z(entry.reviewed_at),
            reviewDate=entry.review_date.isoformat(),
            timeSpentSeconds=entry.time_spent_seconds,
            difficultyAdjustment=entry.difficulty_adjustment,
            repetitionCount=entry.repetition_count,
            nextReviewDate=utc_datetime_to_iso_z(entry.next_review_date),
            difficultyRating=entry.difficulty_rating,
            initialConfidence=entry.initial_confidence,
            finalConfidence=entry.final_confidence,
            wasRecalled=entry.was_recalled,
            retrievalAttempts=entry.retrieval_attempts,
        )


class ReviewResultResponse(BaseModel):
    """Response after a review has been applied."""

    schedule: ScheduleResponse
    event: ReviewEvent


class DueQueueResponse(BaseModel):
    """Response for GET /review/due."""

    noteIds: list[str] = Field(..., description="Due note IDs, most overdue first")
    count: int
    limit: int | None


class ReviewStatsResponse(BaseModel):
    """Response for GET /review/stats."""

    dueCount: int
    totalCount: int
    reviewedCount: int
    averageDifficulty: float
    retentionRate: int

    @classmethod
    def from_stats(cls, stats: ReviewStats) -> "ReviewStatsResponse":
        return cls(
            dueCount=stats.due_count,
            totalCount=stats.total_count,
            reviewedCount=stats.reviewed_count,
            averageDifficulty=stats.average_difficulty,
            retentionRate=stats.retention_rate,
        )


class ReviewLogResponse(BaseModel):
    """Response containing review log entries, newest first."""

    events: list[ReviewEvent]
    count: int
