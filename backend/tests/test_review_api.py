"""Integration-ish tests for /schedules and /review endpoints (stubbed repos)."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from studynotes.main import app
from studynotes.models import NoteSchedule, ReviewEvent
from studynotes.repositories import (
    ScheduleAlreadyExistsError,
    ScheduleConflictError,
    ScheduleNotFoundError,
)


NOW = datetime(2025, 1, 6, 9, 0, 0, tzinfo=timezone.utc)
USER = "test-user"
HEADERS = {"X-User-Id": USER}


@dataclass
class StubScheduleRepo:
    docs: dict[str, dict] = field(default_factory=dict)
    events: list[ReviewEvent] = field(default_factory=list)
    conflict: bool = False

    def list_by_user(self, user_id: str) -> list[NoteSchedule]:
        schedules = [NoteSchedule(**doc) for doc in self.docs.values() if doc["userId"] == user_id]
        return sorted(schedules, key=lambda s: s.nextReviewDate)

    def get_by_note(self, note_id: str, user_id: str) -> NoteSchedule:
        doc = self.docs.get(note_id)
        if doc is None or doc["userId"] != user_id:
            raise ScheduleNotFoundError("not found")
        return NoteSchedule(**doc)

    def create(self, schedule: NoteSchedule) -> NoteSchedule:
        if schedule.id in self.docs:
            raise ScheduleAlreadyExistsError("exists")
        self.docs[schedule.id] = schedule.model_dump()
        return schedule

    def delete(self, note_id: str, user_id: str) -> None:
        self.get_by_note(note_id, user_id)
        del self.docs[note_id]

    def apply_review(self, schedule: NoteSchedule, event: ReviewEvent) -> NoteSchedule:
        if self.conflict:
            raise ScheduleConflictError("modified")
        self.docs[schedule.id] = schedule.model_dump()
        self.events.append(event)
        return schedule


@dataclass
class StubReviewLogRepo:
    events: list[ReviewEvent] = field(default_factory=list)
    calls: list[dict] = field(default_factory=list)

    def list_by_user(self, user_id, start=None, end=None, note_id=None):
        self.calls.append({"user_id": user_id, "start": start, "end": end, "note_id": note_id})
        return list(reversed(self.events))


def schedule_doc(note_id, next_review, repetitions=1, difficulty=3, confidence=3):
    return {
        "id": note_id,
        "docType": "schedule",
        "userId": USER,
        "noteId": note_id,
        "repetitionCount": repetitions,
        "difficulty": difficulty,
        "confidenceLevel": confidence,
        "nextReviewDate": next_review,
        "lastReviewedAt": "2025-01-01T09:00:00Z" if repetitions else None,
        "createdAt": "2024-12-31T09:00:00Z",
        "updatedAt": "2025-01-01T09:00:00Z",
    }


@pytest.fixture
def schedule_repo():
    return StubScheduleRepo()


@pytest.fixture
def log_repo():
    return StubReviewLogRepo()


@pytest.fixture
def client(monkeypatch, schedule_repo, log_repo):
    from studynotes.routers import review as review_module
    from studynotes.routers import schedules as schedules_module

    monkeypatch.setattr(review_module, "get_schedule_repository", lambda: schedule_repo)
    monkeypatch.setattr(review_module, "get_review_log_repository", lambda: log_repo)
    monkeypatch.setattr(review_module, "utc_now", lambda: NOW)
    monkeypatch.setattr(schedules_module, "get_schedule_repository", lambda: schedule_repo)
    monkeypatch.setattr(schedules_module, "utc_now", lambda: NOW)
    return TestClient(app)


class TestPublicEndpoints:
    def test_healthz(self, client):
        response = client.get("/healthz")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_root_lists_strategies(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["strategies"] == ["rating", "confidence"]

    def test_user_header_required(self, client):
        response = client.get("/review/due")
        assert response.status_code == 401
        assert "X-User-Id" in response.json()["detail"]


class TestSchedules:
    def test_create_schedule_due_next_day(self, client, schedule_repo):
        response = client.post("/schedules", json={"noteId": "note-1"}, headers=HEADERS)

        assert response.status_code == 201
        data = response.json()
        assert data["noteId"] == "note-1"
        assert data["repetitionCount"] == 0
        assert data["difficulty"] == 3
        assert data["confidenceLevel"] == 3
        assert data["nextReviewDate"] == "2025-01-07T09:00:00Z"
        assert data["lastReviewedAt"] is None
        assert schedule_repo.docs["note-1"]["userId"] == USER

    def test_create_uses_configured_initial_difficulty(self, client, monkeypatch):
        monkeypatch.setenv("SRS_INITIAL_DIFFICULTY", "4")
        from studynotes.config import get_review_settings

        get_review_settings.cache_clear()
        response = client.post("/schedules", json={"noteId": "note-1"}, headers=HEADERS)
        assert response.json()["difficulty"] == 4

    def test_create_uses_configured_initial_confidence(self, client, monkeypatch):
        monkeypatch.setenv("SRS_INITIAL_CONFIDENCE", "2")
        from studynotes.config import get_review_settings

        get_review_settings.cache_clear()
        response = client.post("/schedules", json={"noteId": "note-1"}, headers=HEADERS)
        assert response.json()["confidenceLevel"] == 2

    def test_create_rejects_boolean_difficulty(self, client, schedule_repo):
        response = client.post("/schedules", json={"noteId": "note-1", "difficulty": True}, headers=HEADERS)
        assert response.status_code == 422
        assert schedule_repo.docs == {}

    def test_create_duplicate(self, client):
        client.post("/schedules", json={"noteId": "note-1"}, headers=HEADERS)
        response = client.post("/schedules", json={"noteId": "note-1"}, headers=HEADERS)
        assert response.status_code == 409

    def test_create_with_invalid_difficulty(self, client, schedule_repo):
        response = client.post("/schedules", json={"noteId": "note-1", "difficulty": 7}, headers=HEADERS)
        assert response.status_code == 422
        assert schedule_repo.docs == {}

    def test_get_and_delete(self, client, schedule_repo):
        schedule_repo.docs["note-1"] = schedule_doc("note-1", "2025-01-10T09:00:00Z")

        assert client.get("/schedules/note-1", headers=HEADERS).json()["nextReviewDate"] == "2025-01-10T09:00:00Z"
        assert client.delete("/schedules/note-1", headers=HEADERS).status_code == 204
        assert client.get("/schedules/note-1", headers=HEADERS).status_code == 404
        assert client.delete("/schedules/note-1", headers=HEADERS).status_code == 404


class TestReviewSubmission:
    def test_rating_review(self, client, schedule_repo):
        schedule_repo.docs["note-1"] = schedule_doc("note-1", "2025-01-06T08:00:00Z", repetitions=1)

        response = client.post(
            "/review/note-1/rating",
            json={"difficultyRating": 1, "timeSpentSeconds": 25},
            headers=HEADERS,
        )

        assert response.status_code == 200
        data = response.json()
        # floor(7 * 1.3) = 9 days
        assert data["schedule"]["nextReviewDate"] == "2025-01-15T09:00:00Z"
        assert data["schedule"]["repetitionCount"] == 2
        assert data["schedule"]["difficulty"] == 1
        assert data["schedule"]["lastReviewedAt"] == "2025-01-06T09:00:00Z"
        assert data["event"]["strategy"] == "rating"
        assert data["event"]["difficultyAdjustment"] == -2
        assert data["event"]["reviewDate"] == "2025-01-06"
        assert data["event"]["timeSpentSeconds"] == 25

        assert schedule_repo.docs["note-1"]["repetitionCount"] == 2
        assert len(schedule_repo.events) == 1

    def test_confidence_review(self, client, schedule_repo):
        schedule_repo.docs["note-1"] = schedule_doc("note-1", "2025-01-06T08:00:00Z", repetitions=2)

        response = client.post(
            "/review/note-1/confidence",
            json={"initialConfidence": 2, "finalConfidence": 5, "wasRecalled": True, "retrievalAttempts": 2},
            headers=HEADERS,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["schedule"]["difficulty"] == 2
        assert data["schedule"]["confidenceLevel"] == 5
        # ceil(2.62 * 6) = 16 days
        assert data["schedule"]["nextReviewDate"] == "2025-01-22T09:00:00Z"
        assert data["event"]["strategy"] == "confidence"
        assert data["event"]["difficultyAdjustment"] == -1
        assert data["event"]["wasRecalled"] is True
        assert data["event"]["difficultyRating"] is None

    def test_invalid_rating_leaves_schedule_untouched(self, client, schedule_repo):
        doc = schedule_doc("note-1", "2025-01-06T08:00:00Z")
        schedule_repo.docs["note-1"] = dict(doc)

        response = client.post("/review/note-1/rating", json={"difficultyRating": 6}, headers=HEADERS)

        assert response.status_code == 422
        assert "difficulty_rating" in response.json()["detail"]
        assert schedule_repo.docs["note-1"] == doc
        assert schedule_repo.events == []

    @pytest.mark.parametrize("rating", [True, "2", 2.5])
    def test_non_integer_rating_rejected(self, client, schedule_repo, rating):
        doc = schedule_doc("note-1", "2025-01-06T08:00:00Z")
        schedule_repo.docs["note-1"] = dict(doc)

        response = client.post("/review/note-1/rating", json={"difficultyRating": rating}, headers=HEADERS)

        assert response.status_code == 422
        assert schedule_repo.docs["note-1"] == doc
        assert schedule_repo.events == []

    def test_non_boolean_recall_rejected(self, client, schedule_repo):
        schedule_repo.docs["note-1"] = schedule_doc("note-1", "2025-01-06T08:00:00Z")
        response = client.post(
            "/review/note-1/confidence",
            json={"initialConfidence": True, "finalConfidence": 4, "wasRecalled": "yes"},
            headers=HEADERS,
        )
        assert response.status_code == 422
        assert schedule_repo.events == []

    def test_invalid_retrieval_attempts(self, client, schedule_repo):
        schedule_repo.docs["note-1"] = schedule_doc("note-1", "2025-01-06T08:00:00Z")
        response = client.post(
            "/review/note-1/confidence",
            json={"initialConfidence": 3, "finalConfidence": 3, "wasRecalled": True, "retrievalAttempts": 0},
            headers=HEADERS,
        )
        assert response.status_code == 422

    def test_unknown_note(self, client):
        response = client.post("/review/missing/rating", json={"difficultyRating": 3}, headers=HEADERS)
        assert response.status_code == 404

    def test_concurrent_review_conflict(self, client, schedule_repo):
        schedule_repo.docs["note-1"] = schedule_doc("note-1", "2025-01-06T08:00:00Z")
        schedule_repo.conflict = True

        response = client.post("/review/note-1/rating", json={"difficultyRating": 3}, headers=HEADERS)

        assert response.status_code == 409
        assert schedule_repo.events == []

    def test_corrupt_stored_state(self, client, schedule_repo):
        schedule_repo.docs["note-1"] = schedule_doc("note-1", "2025-01-06T08:00:00Z", difficulty=9)

        response = client.post("/review/note-1/rating", json={"difficultyRating": 3}, headers=HEADERS)

        assert response.status_code == 500
        assert "invalid" in response.json()["detail"]


class TestDueAndStats:
    @pytest.fixture(autouse=True)
    def seed(self, schedule_repo):
        schedule_repo.docs.update(
            {
                "later": schedule_doc("later", "2025-01-08T09:00:00Z", repetitions=2, difficulty=4),
                "recent": schedule_doc("recent", "2025-01-06T08:00:00Z", repetitions=1, difficulty=2),
                "oldest": schedule_doc("oldest", "2025-01-01T09:00:00Z", repetitions=3, difficulty=1),
                "fresh": schedule_doc("fresh", "2025-01-07T08:00:00Z", repetitions=0, difficulty=3),
            }
        )

    def test_due_queue_most_overdue_first(self, client):
        response = client.get("/review/due", headers=HEADERS)

        assert response.status_code == 200
        data = response.json()
        assert data["noteIds"] == ["oldest", "recent", "fresh"]
        assert data["count"] == 3
        assert data["limit"] == 20

    def test_due_queue_limit(self, client):
        data = client.get("/review/due?limit=1", headers=HEADERS).json()
        assert data["noteIds"] == ["oldest"]
        assert data["limit"] == 1

    def test_due_queue_rejects_negative_limit(self, client):
        assert client.get("/review/due?limit=-1", headers=HEADERS).status_code == 422

    def test_review_refreshes_due_queue(self, client):
        assert "oldest" in client.get("/review/due", headers=HEADERS).json()["noteIds"]

        client.post("/review/oldest/rating", json={"difficultyRating": 3}, headers=HEADERS)

        assert "oldest" not in client.get("/review/due", headers=HEADERS).json()["noteIds"]

    def test_stats(self, client):
        response = client.get("/review/stats", headers=HEADERS)

        assert response.status_code == 200
        assert response.json() == {
            "dueCount": 3,
            "totalCount": 4,
            "reviewedCount": 3,
            "averageDifficulty": 2.5,
            "retentionRate": 75,
        }


class TestReviewLog:
    def test_log_after_review(self, client, schedule_repo, log_repo):
        schedule_repo.docs["note-1"] = schedule_doc("note-1", "2025-01-06T08:00:00Z")
        client.post("/review/note-1/rating", json={"difficultyRating": 4}, headers=HEADERS)
        log_repo.events.extend(schedule_repo.events)

        response = client.get("/review/log?start=2025-01-01&end=2025-01-31&noteId=note-1", headers=HEADERS)

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 1
        assert data["events"][0]["difficultyRating"] == 4
        assert log_repo.calls == [
            {"user_id": USER, "start": "2025-01-01", "end": "2025-01-31", "note_id": "note-1"}
        ]

    def test_log_rejects_inverted_range(self, client):
        response = client.get("/review/log?start=2025-02-01&end=2025-01-01", headers=HEADERS)
        assert response.status_code == 422
