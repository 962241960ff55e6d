"""Pytest configuration and fixtures."""

from datetime import datetime, timezone

import pytest

from studynotes.config import get_review_settings
from studynotes.db import get_settings
from studynotes.srs import ScheduleState, reset_due_cache


# Monday morning, used as the review timestamp across tests
D0 = datetime(2025, 1, 6, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def fresh_singletons():
    """Reset cached settings and the due-queue cache around each test."""
    get_review_settings.cache_clear()
    get_settings.cache_clear()
    reset_due_cache()
    yield
    get_review_settings.cache_clear()
    get_settings.cache_clear()
    reset_due_cache()


@pytest.fixture
def d0() -> datetime:
    return D0


@pytest.fixture
def new_state() -> ScheduleState:
    """A never-reviewed note created one day before D0."""
    return ScheduleState(
        repetition_count=0,
        difficulty=3,
        confidence_level=3,
        next_review_date=D0,
        last_reviewed_at=None,
    )
