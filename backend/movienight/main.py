"""
Movie Night API — FastAPI application entry point.

Routers are registered here. Each service lives in movienight/api/.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from movienight.api import admin, availability, events, group, movies, users
from movienight.core.config import settings
from movienight.core.logging_config import configure_logging

APP_VERSION = "0.1.0"

configure_logging()

app = FastAPI(
    title="Movie Night API",
    description="Pick, prioritize and schedule movie nights with friends.",
    version=APP_VERSION,
    docs_url="/docs" if settings.ENABLE_DOCS else None,
    redoc_url="/redoc" if settings.ENABLE_DOCS else None,
)

# ── CORS ──────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(users.router,        prefix="/users",        tags=["users"])
app.include_router(movies.router,       prefix="/movies",       tags=["movies"])
app.include_router(group.router,        prefix="/group",        tags=["group"])
app.include_router(availability.router, prefix="/availability", tags=["availability"])
app.include_router(events.router,       prefix="/events",       tags=["events"])
app.include_router(admin.router,        prefix="/admin",        tags=["admin"])


# ── Health check ──────────────────────────────────────────────────────────────
@app.get("/health", tags=["system"])
def health_check() -> dict:
    """Liveness probe. Returns 200 when the server is up."""
    return {"status": "ok", "version": APP_VERSION, "env": settings.APP_ENV}
