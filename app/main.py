"""
GymPrep API: Application entry point.

This is the **only** file that assembles the app.  All business logic
lives in the `api/`, `services/`, `models/`, and `core/` packages.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import select

from app.api.v1.api import api_router
from app.core.config import settings
from app.core.exceptions import register_exception_handlers
from app.core.rate_limit import apply_rate_limiter
from app.core.security import get_password_hash
from app.db.base import Base
from app.db.session import async_session_factory, engine

# Ensure all models are imported so metadata.create_all can see them
from app.models.center import Center  # noqa: F401
from app.models.diet import Diet, DietMeal  # noqa: F401
from app.models.exercise import Exercise  # noqa: F401
from app.models.gym_class import GymClass  # noqa: F401
from app.models.machine import Machine  # noqa: F401
from app.models.meal import Meal  # noqa: F401
from app.models.membership import MembershipPlan  # noqa: F401
from app.models.notification import Notification  # noqa: F401
from app.models.ticket import Ticket  # noqa: F401
from app.models.user import Role, User, UserStatus
from app.models.workout import Workout, WorkoutExercise  # noqa: F401

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


async def seed_superadmin() -> None:
    """Create the first SUPERADMIN if no account uses the configured email."""
    async with async_session_factory() as session:
        result = await session.execute(
            select(User).where(User.email == settings.FIRST_ADMIN_EMAIL)
        )
        if result.scalar_one_or_none() is not None:
            return
        session.add(
            User(
                email=settings.FIRST_ADMIN_EMAIL,
                name="System Administrator",
                hashed_password=get_password_hash(settings.FIRST_ADMIN_PASSWORD),
                role=Role.SUPERADMIN,
                status=UserStatus.ACTIVE,
            )
        )
        await session.commit()
        logger.info(
            "Default superadmin created: %s (password: <redacted>)",
            settings.FIRST_ADMIN_EMAIL,
        )


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    await seed_superadmin()

    logger.info("%s v%s started", settings.PROJECT_NAME, settings.VERSION)
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Multi-center gym management with QR entry and exit",
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url=f"{settings.API_PREFIX}/docs",
        redoc_url=f"{settings.API_PREFIX}/redoc",
        lifespan=lifespan,
    )

    # CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)
    apply_rate_limiter(application)

    application.include_router(api_router, prefix=settings.API_PREFIX)

    return application


app = create_app()
