"""Confidence-based SM-2 variant ("confidence" strategy).

Rules (repetitions counted after this review):
- repetitions == 1: interval = 1 day
- repetitions == 2: interval = 6 days
- else: EF = 2.5 + 0.1*(finalConfidence-3) - 0.08*(difficulty-1), clamped to >= 1.3
        interval = ceil(EF ** (repetitions-2) * 6), capped at 365 days

Difficulty moves by one step per review: up when the note was not recalled,
down when it was recalled with confidence >= 4.
"""

from __future__ import annotations

import math

from .state import MAX_SCORE, MIN_SCORE, ConfidenceOutcome, ScheduleState
from .time import add_days, ensure_utc


MIN_EASINESS = 1.3
MAX_INTERVAL_DAYS = 365
GRADUATION_INTERVAL_DAYS = 6

_LOG_CAP_GROWTH = math.log(MAX_INTERVAL_DAYS / GRADUATION_INTERVAL_DAYS)


def _clamp_ease_factor(ef: float) -> float:
    return max(MIN_EASINESS, ef)


def difficulty_adjustment(final_confidence: int, was_recalled: bool) -> int:
    if not was_recalled:
        return 1
    if final_confidence >= 4:
        return -1
    return 0


def easiness_factor(final_confidence: int, difficulty: int) -> float:
    ef = 2.5 + 0.1 * (final_confidence - 3) - 0.08 * (difficulty - 1)
    return _clamp_ease_factor(ef)


def confidence_interval_days(repetitions: int, difficulty: int, final_confidence: int) -> int:
    """Interval in days for a note that has just reached `repetitions` reviews."""
    if repetitions <= 1:
        return 1
    if repetitions == 2:
        return GRADUATION_INTERVAL_DAYS

    ef = easiness_factor(final_confidence, difficulty)
    # ef ** n overflows a float long before n stops being a valid count
    if (repetitions - 2) * math.log(ef) >= _LOG_CAP_GROWTH:
        return MAX_INTERVAL_DAYS
    interval = math.ceil(ef ** (repetitions - 2) * GRADUATION_INTERVAL_DAYS)
    return min(interval, MAX_INTERVAL_DAYS)


def apply_confidence(state: ScheduleState, outcome: ConfidenceOutcome) -> ScheduleState:
    """Apply a confidence review to an already validated state."""
    reviewed_at = ensure_utc(outcome.reviewed_at)

    adjustment = difficulty_adjustment(outcome.final_confidence, outcome.was_recalled)
    difficulty = max(MIN_SCORE, min(MAX_SCORE, state.difficulty + adjustment))
    repetitions = state.repetition_count + 1
    interval = confidence_interval_days(repetitions, difficulty, outcome.final_confidence)

    return ScheduleState(
        repetition_count=repetitions,
        difficulty=difficulty,
        confidence_level=outcome.final_confidence,
        next_review_date=add_days(reviewed_at, interval),
        last_reviewed_at=reviewed_at,
    )
