"""Read access to review log entries."""

from azure.cosmos import ContainerProxy

from studynotes.db import get_schedules_container
from studynotes.models import ReviewEvent


class ReviewLogRepository:
    """Repository for listing review events (written by ScheduleRepository.apply_review)."""

    def __init__(self, container: ContainerProxy | None = None):
        """Initialize the repository with an optional container."""
        self._container = container

    @property
    def container(self) -> ContainerProxy:
        """Get the container, lazily initializing if needed."""
        if self._container is None:
            self._container = get_schedules_container()
        return self._container

    def list_by_user(
        self,
        user_id: str,
        start: str | None = None,
        end: str | None = None,
        note_id: str | None = None,
    ) -> list[ReviewEvent]:
        """List review events, newest first.

        start/end are inclusive YYYY-MM-DD bounds on reviewDate.
        """
        clauses = ["c.userId = @userId", "c.docType = 'reviewEvent'"]
        parameters = [{"name": "@userId", "value": user_id}]

        if start is not None:
            clauses.append("c.reviewDate >= @start")
            parameters.append({"name": "@start", "value": start})
        if end is not None:
            clauses.append("c.reviewDate <= @end")
            parameters.append({"name": "@end", "value": end})
        if note_id is not None:
            clauses.append("c.noteId = @noteId")
            parameters.append({"name": "@noteId", "value": note_id})

        query = f"SELECT * FROM c WHERE {' AND '.join(clauses)} ORDER BY c.reviewedAt DESC"

        items = list(
            self.container.query_items(
                query=query,
                parameters=parameters,
                partition_key=user_id,
            )
        )
        return [ReviewEvent(**item) for item in items]


# Singleton instance
_review_log_repository: ReviewLogRepository | None = None


def get_review_log_repository() -> ReviewLogRepository:
    """Get the review log repository singleton."""
    global _review_log_repository
    if _review_log_repository is None:
        _review_log_repository = ReviewLogRepository()
    return _review_log_repository
