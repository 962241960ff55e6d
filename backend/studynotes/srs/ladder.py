"""Rating-based interval ladder ("rating" strategy).

The interval is looked up on a fixed ladder indexed by repetition count and
scaled by the difficulty rating of the review:

- rating >= 4 (hard): half the base interval at the *current* index, at least 1 day
- rating <= 2 (easy): the interval one rung up, times 1.3
- rating == 3: the base interval unchanged

Repetition counts past the last rung saturate at 365 days.
"""

from __future__ import annotations

import math

from .state import RatingOutcome, ScheduleState
from .time import add_days, ensure_utc


REPETITION_INTERVALS: tuple[int, ...] = (1, 3, 7, 14, 30, 90, 180, 365)

HARD_MULTIPLIER = 0.5
EASY_MULTIPLIER = 1.3


def _rung(index: int) -> int:
    index = max(0, min(index, len(REPETITION_INTERVALS) - 1))
    return REPETITION_INTERVALS[index]


def rating_interval_days(repetition_count: int, difficulty_rating: int) -> int:
    """Return the interval in days for a review at repetition_count rated difficulty_rating."""
    base = _rung(repetition_count)

    if difficulty_rating >= 4:
        return max(1, math.floor(base * HARD_MULTIPLIER))

    if difficulty_rating <= 2:
        return math.floor(_rung(repetition_count + 1) * EASY_MULTIPLIER)

    return base


def apply_rating(state: ScheduleState, outcome: RatingOutcome) -> ScheduleState:
    """Apply a rating review to an already validated state."""
    reviewed_at = ensure_utc(outcome.reviewed_at)
    interval = rating_interval_days(state.repetition_count, outcome.difficulty_rating)

    return ScheduleState(
        repetition_count=state.repetition_count + 1,
        difficulty=outcome.difficulty_rating,
        confidence_level=state.confidence_level,
        next_review_date=add_days(reviewed_at, interval),
        last_reviewed_at=reviewed_at,
    )
