"""Entry point for computing the next schedule of a note.

Two strategies are in use and both are kept: "rating" (ladder scaled by a
1-5 difficulty rating) and "confidence" (SM-2 style easiness driven by recall
and confidence). Which one is canonical is a product decision; callers pick.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Literal, get_args

from .errors import InvalidRatingError
from .ladder import REPETITION_INTERVALS, apply_rating
from .sm2 import apply_confidence
from .state import (
    ConfidenceOutcome,
    RatingOutcome,
    ReviewOutcome,
    ScheduleState,
    check_score,
    validate_outcome,
    validate_state,
)
from .time import add_days, ensure_utc


Strategy = Literal["rating", "confidence"]

STRATEGIES: tuple[str, ...] = get_args(Strategy)

FIRST_INTERVAL_DAYS = REPETITION_INTERVALS[0]

_OUTCOME_TYPES: dict[str, type] = {
    "rating": RatingOutcome,
    "confidence": ConfidenceOutcome,
}

_APPLY: dict[str, Callable[[ScheduleState, ReviewOutcome], ScheduleState]] = {
    "rating": apply_rating,
    "confidence": apply_confidence,
}


def strategy_for_outcome(outcome: ReviewOutcome) -> Strategy:
    if isinstance(outcome, RatingOutcome):
        return "rating"
    if isinstance(outcome, ConfidenceOutcome):
        return "confidence"
    raise InvalidRatingError(f"Unsupported review outcome: {type(outcome).__name__}")


def compute_next(state: ScheduleState, outcome: ReviewOutcome, strategy: Strategy) -> ScheduleState:
    """Return the schedule that results from applying outcome to state.

    Pure and deterministic: the only timestamp used is outcome.reviewed_at.

    Raises:
        ValueError: If strategy is not a known strategy name
        InvalidStateError: If the incoming state is malformed
        InvalidRatingError: If the outcome is out of range or of the wrong kind
    """
    if strategy not in _APPLY:
        raise ValueError(f"Unknown scheduling strategy: {strategy!r}")

    validate_state(state)

    expected = _OUTCOME_TYPES[strategy]
    if not isinstance(outcome, expected):
        raise InvalidRatingError(
            f"The {strategy!r} strategy requires a {expected.__name__}, got {type(outcome).__name__}"
        )
    validate_outcome(outcome)

    return _APPLY[strategy](state, outcome)


def initial_state(created_at: datetime, difficulty: int = 3, confidence_level: int = 3) -> ScheduleState:
    """State for a freshly created note, first due one interval after creation."""
    check_score("difficulty", difficulty, InvalidRatingError)
    check_score("confidence_level", confidence_level, InvalidRatingError)

    return ScheduleState(
        repetition_count=0,
        difficulty=difficulty,
        confidence_level=confidence_level,
        next_review_date=add_days(ensure_utc(created_at), FIRST_INTERVAL_DAYS),
        last_reviewed_at=None,
    )
