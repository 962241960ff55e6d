"""Models module for Pydantic schemas."""

from .schedule import (
    NoteSchedule,
    ScheduleCreate,
    ScheduleResponse,
)
from .review import (
    ConfidenceReviewRequest,
    DueQueueResponse,
    RatingReviewRequest,
    ReviewEvent,
    ReviewLogResponse,
    ReviewResultResponse,
    ReviewStatsResponse,
)

__all__ = [
    "NoteSchedule",
    "ScheduleCreate",
    "ScheduleResponse",
    "ConfidenceReviewRequest",
    "DueQueueResponse",
    "RatingReviewRequest",
    "ReviewEvent",
    "ReviewLogResponse",
    "ReviewResultResponse",
    "ReviewStatsResponse",
]
