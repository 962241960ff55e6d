"""Due-queue selection and review statistics."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Hashable, Iterable, TypeVar

from .state import ScheduleState, validate_state
from .time import ensure_utc


NoteId = TypeVar("NoteId", bound=Hashable)


@dataclass(frozen=True)
class ReviewStats:
    due_count: int
    total_count: int
    reviewed_count: int
    average_difficulty: float
    retention_rate: int

    def to_dict(self) -> dict:
        return asdict(self)


def _round_half_up(value: float, places: int = 0) -> Decimal:
    exponent = Decimal(1).scaleb(-places)
    return Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)


def is_due(state: ScheduleState, now: datetime) -> bool:
    """A note is due once its review date has passed; never-reviewed notes are always due."""
    if state.is_new:
        return True
    return ensure_utc(state.next_review_date) <= ensure_utc(now)


def select_due(
    notes: Iterable[tuple[NoteId, ScheduleState]],
    now: datetime,
    limit: int | None = None,
) -> list[NoteId]:
    """Return the ids of due notes, most overdue first.

    Ties keep the input order. `limit` caps the result after ordering.

    Raises:
        ValueError: If limit is negative
        InvalidStateError: If any state is malformed
    """
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")

    now = ensure_utc(now)
    due: list[tuple[datetime, NoteId]] = []
    for note_id, state in notes:
        validate_state(state)
        if is_due(state, now):
            due.append((ensure_utc(state.next_review_date), note_id))

    due.sort(key=lambda item: item[0])
    ids = [note_id for _, note_id in due]
    if limit is not None:
        ids = ids[:limit]
    return ids


def review_stats(notes: Iterable[ScheduleState], now: datetime) -> ReviewStats:
    """Aggregate counts over a collection of schedules.

    retention_rate is reviewed/total as a rounded percentage. An empty
    collection yields zeros for every field.
    """
    states = list(notes)
    for state in states:
        validate_state(state)

    total = len(states)
    if total == 0:
        return ReviewStats(due_count=0, total_count=0, reviewed_count=0, average_difficulty=0.0, retention_rate=0)

    due_count = sum(1 for state in states if is_due(state, now))
    reviewed = sum(1 for state in states if state.repetition_count > 0)
    mean_difficulty = sum(state.difficulty for state in states) / total

    return ReviewStats(
        due_count=due_count,
        total_count=total,
        reviewed_count=reviewed,
        average_difficulty=float(_round_half_up(mean_difficulty, 1)),
        retention_rate=int(_round_half_up(reviewed / total * 100)),
    )
