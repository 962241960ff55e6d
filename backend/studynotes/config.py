"""Review service configuration."""

import os
from functools import lru_cache
from pydantic import BaseModel, Field


class ReviewSettings(BaseModel):
    """Review settings loaded from environment variables."""

    due_limit: int = 20  # Default size of the due queue
    due_cache_ttl_seconds: int = 60
    due_cache_maxsize: int = 1024
    # Scores given to notes registered without them; out-of-range values fail at load
    initial_difficulty: int = Field(3, ge=1, le=5)
    initial_confidence: int = Field(3, ge=1, le=5)
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


@lru_cache()
def get_review_settings() -> ReviewSettings:
    """Get cached review settings from environment variables."""
    cors = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173")

    return ReviewSettings(
        due_limit=_int_env("SRS_DUE_LIMIT", 20),
        due_cache_ttl_seconds=_int_env("SRS_DUE_CACHE_TTL_SECONDS", 60),
        due_cache_maxsize=_int_env("SRS_DUE_CACHE_MAXSIZE", 1024),
        initial_difficulty=_int_env("SRS_INITIAL_DIFFICULTY", 3),
        initial_confidence=_int_env("SRS_INITIAL_CONFIDENCE", 3),
        cors_origins=[origin.strip() for origin in cors.split(",") if origin.strip()],
    )
