"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError

from peerlearn.communities.router import router as communities_router
from peerlearn.config import get_settings
from peerlearn.courses.router import router as courses_router
from peerlearn.dashboard.router import router as dashboard_router
from peerlearn.database import close_db, get_session_factory, init_db
from peerlearn.enrollments.router import router as enrollments_router
from peerlearn.health.router import router as health_router
from peerlearn.mentor_requests.router import router as mentor_requests_router
from peerlearn.middleware import setup_middleware
from peerlearn.progression.router import router as progression_router
from peerlearn.progression.seed import seed_badges
from peerlearn.projects.router import router as projects_router
from peerlearn.redis_client import close_redis, init_redis
from peerlearn.reviews.router import router as reviews_router
from peerlearn.users.router import router as users_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    if settings.redis_url:
        await init_redis(settings.redis_url)

    # Badge catalog (idempotent)
    try:
        async with get_session_factory()() as db:
            await seed_badges(db)
    except SQLAlchemyError:
        logger.warning("Badge seeding failed (tables may not exist yet)", exc_info=True)

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="PeerLearn API",
        description="Peer mentorship backend: courses, enrollments, progression and learning communities",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(users_router)
    app.include_router(progression_router)
    app.include_router(courses_router)
    app.include_router(reviews_router)
    app.include_router(enrollments_router)
    app.include_router(mentor_requests_router)
    app.include_router(communities_router)
    app.include_router(projects_router)
    app.include_router(dashboard_router)

    return app


app = create_app()
