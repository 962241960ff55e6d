"""Review event log entries.

One entry is built per applied review, from the state before, the outcome and
the state after. Entries are immutable; storing them is the caller's job, in the
same write as the new schedule.
"""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass
from datetime import date, datetime

from .errors import InvalidStateError
from .scheduler import Strategy, strategy_for_outcome
from .state import ConfidenceOutcome, RatingOutcome, ReviewOutcome, ScheduleState, validate_state
from .time import ensure_utc, utc_date, utc_datetime_to_iso_z


_ENTRY_NAMESPACE = uuid.UUID("6ba7b810-9dad-11d1-80b4-00c04fd430c8")


@dataclass(frozen=True)
class ReviewEventLogEntry:
    id: str
    note_id: str
    user_id: str
    strategy: Strategy
    reviewed_at: datetime
    review_date: date
    time_spent_seconds: int
    difficulty_adjustment: int
    repetition_count: int
    next_review_date: datetime

    # rating strategy
    difficulty_rating: int | None = None

    # confidence strategy
    initial_confidence: int | None = None
    final_confidence: int | None = None
    was_recalled: bool | None = None
    retrieval_attempts: int | None = None

    def to_dict(self) -> dict:
        return asdict(self)


def _entry_id(note_id: str, reviewed_at: datetime, repetition_count: int) -> str:
    """Deterministic id, so a retried write of the same review cannot duplicate it."""
    combined = f"{note_id}:{utc_datetime_to_iso_z(reviewed_at)}:{repetition_count}"
    return str(uuid.uuid5(_ENTRY_NAMESPACE, combined))


def build_log_entry(
    before: ScheduleState,
    outcome: ReviewOutcome,
    after: ScheduleState,
    note_id: str,
    user_id: str,
) -> ReviewEventLogEntry:
    """Build the log entry recording the transition before -> after.

    Raises:
        InvalidStateError: If after is not the result of applying outcome to before
    """
    validate_state(before)
    validate_state(after)

    reviewed_at = ensure_utc(outcome.reviewed_at)
    if after.repetition_count != before.repetition_count + 1:
        raise InvalidStateError(
            f"repetition_count must advance by 1 per review "
            f"({before.repetition_count} -> {after.repetition_count})"
        )
    if after.last_reviewed_at is None or ensure_utc(after.last_reviewed_at) != reviewed_at:
        raise InvalidStateError("last_reviewed_at of the new state must match the review timestamp")

    fields: dict = {}
    if isinstance(outcome, RatingOutcome):
        fields["difficulty_rating"] = outcome.difficulty_rating
    elif isinstance(outcome, ConfidenceOutcome):
        fields.update(
            initial_confidence=outcome.initial_confidence,
            final_confidence=outcome.final_confidence,
            was_recalled=outcome.was_recalled,
            retrieval_attempts=outcome.retrieval_attempts,
        )

    return ReviewEventLogEntry(
        id=_entry_id(note_id, reviewed_at, after.repetition_count),
        note_id=note_id,
        user_id=user_id,
        strategy=strategy_for_outcome(outcome),
        reviewed_at=reviewed_at,
        review_date=utc_date(reviewed_at),
        time_spent_seconds=outcome.time_spent_seconds,
        difficulty_adjustment=after.difficulty - before.difficulty,
        repetition_count=after.repetition_count,
        next_review_date=ensure_utc(after.next_review_date),
        **fields,
    )
