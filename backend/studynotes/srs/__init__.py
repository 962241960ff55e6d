"""Spaced-repetition scheduling for study notes."""

from .errors import InvalidRatingError, InvalidStateError
from .state import ScheduleState, RatingOutcome, ConfidenceOutcome, ReviewOutcome
from .scheduler import Strategy, STRATEGIES, compute_next, initial_state
from .due import ReviewStats, is_due, select_due, review_stats
from .due_cache import DueQueueCache, get_due_cache, reset_due_cache
from .event_log import ReviewEventLogEntry, build_log_entry
from .time import (
    utc_now,
    utc_now_iso,
    utc_datetime_to_iso_z,
    parse_iso_z,
)

__all__ = [
    "InvalidRatingError",
    "InvalidStateError",
    "ScheduleState",
    "RatingOutcome",
    "ConfidenceOutcome",
    "ReviewOutcome",
    "Strategy",
    "STRATEGIES",
    "compute_next",
    "initial_state",
    "ReviewStats",
    "is_due",
    "select_due",
    "review_stats",
    "DueQueueCache",
    "get_due_cache",
    "reset_due_cache",
    "ReviewEventLogEntry",
    "build_log_entry",
    "utc_now",
    "utc_now_iso",
    "utc_datetime_to_iso_z",
    "parse_iso_z",
]
