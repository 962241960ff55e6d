"""Failure kinds raised by the review scheduler."""


class InvalidRatingError(ValueError):
    """Raised when a review outcome carries an out-of-range field.

    Covers ratings/confidence values outside [1, 5], retrieval_attempts < 1,
    time_spent_seconds < 0 and outcomes of the wrong kind for a strategy.
    """

    pass


class InvalidStateError(ValueError):
    """Raised when an incoming ScheduleState is malformed.

    This indicates corrupted stored data; it is never repaired silently.
    """

    pass
