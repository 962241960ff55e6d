"""Repositories module for data access layer."""

from .schedule_repository import (
    ScheduleRepository,
    ScheduleNotFoundError,
    ScheduleAlreadyExistsError,
    ScheduleConflictError,
    get_schedule_repository,
)
from .review_log_repository import (
    ReviewLogRepository,
    get_review_log_repository,
)

__all__ = [
    "ScheduleRepository",
    "ScheduleNotFoundError",
    "ScheduleAlreadyExistsError",
    "ScheduleConflictError",
    "get_schedule_repository",
    "ReviewLogRepository",
    "get_review_log_repository",
]
