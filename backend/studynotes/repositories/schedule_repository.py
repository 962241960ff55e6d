"""Repository for note schedules.

Applying a review writes the new schedule and its review log entry in one
transactional batch, conditioned on the schedule's etag. Either both documents
are stored or neither is.
"""

import logging

from azure.cosmos import ContainerProxy
from azure.cosmos.exceptions import (
    CosmosBatchOperationError,
    CosmosResourceExistsError,
    CosmosResourceNotFoundError,
)

from studynotes.db import get_schedules_container
from studynotes.models import NoteSchedule, ReviewEvent

logger = logging.getLogger(__name__)

_PRECONDITION_FAILED = 412
_CONFLICT = 409
_NOT_FOUND = 404


class ScheduleNotFoundError(Exception):
    """Raised when a schedule is not found."""

    pass


class ScheduleAlreadyExistsError(Exception):
    """Raised when a note is registered twice."""

    pass


class ScheduleConflictError(Exception):
    """Raised when a schedule changed between read and write (concurrent review)."""

    pass


class ScheduleRepository:
    """Repository for schedule database operations."""

    def __init__(self, container: ContainerProxy | None = None):
        """Initialize the repository with an optional container."""
        self._container = container

    @property
    def container(self) -> ContainerProxy:
        """Get the container, lazily initializing if needed."""
        if self._container is None:
            self._container = get_schedules_container()
        return self._container

    def list_by_user(self, user_id: str) -> list[NoteSchedule]:
        """List all schedules of a user, earliest nextReviewDate first."""
        query = (
            "SELECT * FROM c WHERE c.userId = @userId AND c.docType = 'schedule' "
            "ORDER BY c.nextReviewDate ASC"
        )
        parameters = [{"name": "@userId", "value": user_id}]

        items = list(
            self.container.query_items(
                query=query,
                parameters=parameters,
                partition_key=user_id,
            )
        )
        return [NoteSchedule(**item) for item in items]

    def get_by_note(self, note_id: str, user_id: str) -> NoteSchedule:
        """Get the schedule of a note."""
        try:
            item = self.container.read_item(item=note_id, partition_key=user_id)
        except CosmosResourceNotFoundError:
            raise ScheduleNotFoundError(f"Schedule for note {note_id} not found")

        if item.get("docType") != "schedule":
            raise ScheduleNotFoundError(f"Schedule for note {note_id} not found")
        return NoteSchedule(**item)

    def create(self, schedule: NoteSchedule) -> NoteSchedule:
        """Store a new schedule."""
        try:
            created_item = self.container.create_item(body=schedule.model_dump())
        except CosmosResourceExistsError:
            raise ScheduleAlreadyExistsError(f"Note {schedule.noteId} is already scheduled")
        return NoteSchedule(**created_item)

    def delete(self, note_id: str, user_id: str) -> None:
        """Delete a schedule. Review log entries of the note are kept."""
        self.get_by_note(note_id, user_id)
        try:
            self.container.delete_item(item=note_id, partition_key=user_id)
        except CosmosResourceNotFoundError:
            raise ScheduleNotFoundError(f"Schedule for note {note_id} not found")

    def apply_review(self, schedule: NoteSchedule, event: ReviewEvent) -> NoteSchedule:
        """Replace the schedule and append its review event atomically.

        Raises:
            ScheduleConflictError: If the stored schedule no longer matches schedule.etag,
                or the event was already recorded
            ScheduleNotFoundError: If the schedule was deleted meanwhile
        """
        replace_kwargs = {"if_match_etag": schedule.etag} if schedule.etag else {}
        operations = [
            ("replace", (schedule.id, schedule.model_dump()), replace_kwargs),
            ("create", (event.model_dump(),)),
        ]

        try:
            results = self.container.execute_item_batch(
                batch_operations=operations,
                partition_key=schedule.userId,
            )
        except CosmosBatchOperationError as e:
            failed = e.operation_responses[e.error_index] if e.operation_responses else {}
            status_code = failed.get("statusCode", e.status_code)
            logger.warning(
                "Review batch rejected: user=%s, note=%s, operation=%s, status=%s",
                schedule.userId, schedule.noteId, e.error_index, status_code,
            )
            if status_code in (_PRECONDITION_FAILED, _CONFLICT):
                raise ScheduleConflictError(
                    f"Schedule for note {schedule.noteId} was modified concurrently"
                ) from e
            if status_code == _NOT_FOUND:
                raise ScheduleNotFoundError(f"Schedule for note {schedule.noteId} not found") from e
            raise

        new_etag = results[0].get("eTag") if results else None
        return schedule.model_copy(update={"etag": new_etag})


# Singleton instance
_schedule_repository: ScheduleRepository | None = None


def get_schedule_repository() -> ScheduleRepository:
    """Get the schedule repository singleton."""
    global _schedule_repository
    if _schedule_repository is None:
        _schedule_repository = ScheduleRepository()
    return _schedule_repository
