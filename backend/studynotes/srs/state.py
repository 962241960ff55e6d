"""Scheduling state and review outcome types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Union

from .errors import InvalidRatingError, InvalidStateError


MIN_SCORE = 1
MAX_SCORE = 5


@dataclass(frozen=True)
class ScheduleState:
    repetition_count: int
    difficulty: int
    confidence_level: int
    next_review_date: datetime
    last_reviewed_at: datetime | None = None

    @property
    def is_new(self) -> bool:
        """True while the note has never been reviewed."""
        return self.repetition_count == 0


@dataclass(frozen=True)
class RatingOutcome:
    """A review scored with a single 1-5 difficulty rating (1 = very easy)."""

    difficulty_rating: int
    time_spent_seconds: int
    reviewed_at: datetime


@dataclass(frozen=True)
class ConfidenceOutcome:
    """A review scored by recall success and before/after confidence."""

    initial_confidence: int
    final_confidence: int
    was_recalled: bool
    retrieval_attempts: int
    time_spent_seconds: int
    reviewed_at: datetime


ReviewOutcome = Union[RatingOutcome, ConfidenceOutcome]


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def check_score(name: str, value: object, error: type[ValueError]) -> None:
    if not _is_int(value) or not MIN_SCORE <= value <= MAX_SCORE:
        raise error(f"{name} must be an integer between {MIN_SCORE} and {MAX_SCORE}, got {value!r}")


def validate_state(state: ScheduleState) -> None:
    """Raise InvalidStateError if state could not have been produced by the scheduler."""
    if not _is_int(state.repetition_count) or state.repetition_count < 0:
        raise InvalidStateError(f"repetition_count must be >= 0, got {state.repetition_count!r}")
    check_score("difficulty", state.difficulty, InvalidStateError)
    check_score("confidence_level", state.confidence_level, InvalidStateError)
    if not isinstance(state.next_review_date, datetime):
        raise InvalidStateError("next_review_date must be a datetime")
    if state.last_reviewed_at is not None and not isinstance(state.last_reviewed_at, datetime):
        raise InvalidStateError("last_reviewed_at must be a datetime or None")


def validate_outcome(outcome: ReviewOutcome) -> None:
    """Raise InvalidRatingError for any out-of-range outcome field."""
    if not _is_int(outcome.time_spent_seconds) or outcome.time_spent_seconds < 0:
        raise InvalidRatingError(f"time_spent_seconds must be >= 0, got {outcome.time_spent_seconds!r}")
    if not isinstance(outcome.reviewed_at, datetime):
        raise InvalidRatingError("reviewed_at must be a datetime")

    if isinstance(outcome, RatingOutcome):
        check_score("difficulty_rating", outcome.difficulty_rating, InvalidRatingError)
        return

    if isinstance(outcome, ConfidenceOutcome):
        check_score("initial_confidence", outcome.initial_confidence, InvalidRatingError)
        check_score("final_confidence", outcome.final_confidence, InvalidRatingError)
        if not isinstance(outcome.was_recalled, bool):
            raise InvalidRatingError("was_recalled must be a boolean")
        if not _is_int(outcome.retrieval_attempts) or outcome.retrieval_attempts < 1:
            raise InvalidRatingError(f"retrieval_attempts must be >= 1, got {outcome.retrieval_attempts!r}")
        return

    raise InvalidRatingError(f"Unsupported review outcome: {type(outcome).__name__}")
