from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

load_dotenv()

from studynotes.config import get_review_settings
from studynotes.db import close_client, ensure_schedules_container, get_settings, verify_connection
from studynotes.routers import schedules_router, review_router
from studynotes.srs import STRATEGIES


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    settings = get_settings()
    review_settings = get_review_settings()

    print(
        f"✓ Review scheduler ready (due limit {review_settings.due_limit}, "
        f"due cache TTL {review_settings.due_cache_ttl_seconds}s)"
    )

    if settings.is_configured():
        if settings.use_emulator:
            try:
                ensure_schedules_container()
                print(f"✓ Container '{settings.schedules_container}' ready (partition key /userId)")
            except Exception as e:
                print(f"✗ Could not provision the emulator container: {e}")

        if verify_connection():
            print("✓ Connected to Cosmos DB")
        else:
            print("✗ Failed to connect to Cosmos DB - check configuration")
    else:
        print("⚠ Cosmos DB not configured (COSMOS_ENDPOINT not set, COSMOS_EMULATOR not enabled)")

    yield

    # Shutdown
    close_client()
    print("✓ Cosmos DB connection closed")


app = FastAPI(
    title="Study Notes Review API",
    description="Spaced-repetition scheduling for study notes",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_review_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(schedules_router)
app.include_router(review_router)


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Study Notes Review API",
        "version": "1.0.0",
        "strategies": list(STRATEGIES),
        "endpoints": {
            "health": "/healthz",
            "schedules": "/schedules",
            "review": "/review/{note_id}/{strategy}",
            "due": "/review/due",
            "stats": "/review/stats",
            "log": "/review/log",
        },
    }


@app.get("/healthz")
async def healthz():
    """Health check endpoint."""
    return {"status": "healthy"}
