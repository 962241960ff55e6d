"""Schedule models for API requests, responses and stored documents."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from studynotes.srs import InvalidStateError, ScheduleState
from studynotes.srs.time import parse_iso_z, utc_datetime_to_iso_z, utc_now_iso


class ScheduleCreate(BaseModel):
    """Model for registering a note with the scheduler."""

    noteId: str = Field(..., min_length=1, max_length=200, description="ID of the note being scheduled")
    difficulty: StrictInt | None = Field(None, description="Initial difficulty, 1 (very easy) to 5 (very hard)")
    confidenceLevel: StrictInt | None = Field(None, description="Initial confidence, 1 to 5")


class NoteSchedule(BaseModel):
    """Schedule document as stored in the database (one per note)."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "note-001",
                "docType": "schedule",
                "userId": "user-001",
                "noteId": "note-001",
                "repetitionCount": 2,
                "difficulty": 3,
                "confidenceLevel": 4,
                "nextReviewDate": "2025-01-08T09:00:00Z",
                "lastReviewedAt": "2025-01-01T09:00:00Z",
                "createdAt": "2024-12-30T09:00:00Z",
                "updatedAt": "2025-01-01T09:00:00Z",
            }
        },
    )

    id: str = Field(..., description="Document ID (same as noteId)")
    docType: Literal["schedule"] = "schedule"
    userId: str = Field(..., description="Owner user ID (partition key)")
    noteId: str
    repetitionCount: int = Field(0, description="Completed reviews")
    difficulty: int = Field(3, description="1 = very easy, 5 = very hard")
    confidenceLevel: int = Field(3, description="Most recent recall confidence, 1-5")
    nextReviewDate: str = Field(..., description="Next due timestamp (UTC ISO Z)")
    lastReviewedAt: str | None = Field(None, description="Last review timestamp (UTC ISO Z)")
    createdAt: str = Field(default_factory=utc_now_iso)
    updatedAt: str = Field(default_factory=utc_now_iso)

    etag: str | None = Field(None, alias="_etag", exclude=True)

    @classmethod
    def from_state(cls, user_id: str, note_id: str, state: ScheduleState) -> "NoteSchedule":
        return cls(
            id=note_id,
            userId=user_id,
            noteId=note_id,
            repetitionCount=state.repetition_count,
            difficulty=state.difficulty,
            confidenceLevel=state.confidence_level,
            nextReviewDate=utc_datetime_to_iso_z(state.next_review_date),
            lastReviewedAt=utc_datetime_to_iso_z(state.last_reviewed_at) if state.last_reviewed_at else None,
        )

    def to_state(self) -> ScheduleState:
        """Convert the stored document into scheduler state."""
        try:
            next_review = parse_iso_z(self.nextReviewDate)
            last_reviewed = parse_iso_z(self.lastReviewedAt) if self.lastReviewedAt else None
        except ValueError as e:
            raise InvalidStateError(f"Schedule {self.id} has an unreadable timestamp: {e}") from e

        return ScheduleState(
            repetition_count=self.repetitionCount,
            difficulty=self.difficulty,
            confidence_level=self.confidenceLevel,
            next_review_date=next_review,
            last_reviewed_at=last_reviewed,
        )

    def with_state(self, state: ScheduleState) -> "NoteSchedule":
        """Return a copy carrying state, keeping identity fields and etag."""
        return self.model_copy(
            update={
                "repetitionCount": state.repetition_count,
                "difficulty": state.difficulty,
                "confidenceLevel": state.confidence_level,
                "nextReviewDate": utc_datetime_to_iso_z(state.next_review_date),
                "lastReviewedAt": (
                    utc_datetime_to_iso_z(state.last_reviewed_at) if state.last_reviewed_at else None
                ),
                "updatedAt": utc_now_iso(),
            }
        )


class ScheduleResponse(BaseModel):
    """Schedule response model returned by API."""

    noteId: str
    userId: str
    repetitionCount: int
    difficulty: int
    confidenceLevel: int
    nextReviewDate: str
    lastReviewedAt: str | None
    createdAt: str
    updatedAt: str

    @classmethod
    def from_document(cls, schedule: NoteSchedule) -> "ScheduleResponse":
        return cls(**schedule.model_dump(exclude={"id", "docType"}))
