"""Authority Routing Engine — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from app.adapters.persistence.database import engine
from app.config import settings
from app.infrastructure.api.routes_admin import router as admin_router
from app.infrastructure.api.routes_authorities import router as authorities_router
from app.infrastructure.api.routes_health import router as health_router
from app.infrastructure.api.routes_issues import router as issues_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        async with engine.begin():
            pass  # Connection pool warmed up
        logger.info("Database connection established")
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Database not available on startup: %s", e)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s | %(message)s",
    )

    app = FastAPI(
        title="Authority Routing Engine",
        description="Resolves reported civic issues to the responsible authority and notifies it",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS for the reporting frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(health_router, prefix="/api")
    app.include_router(issues_router, prefix="/api")
    app.include_router(authorities_router, prefix="/api")
    app.include_router(admin_router, prefix="/api")

    return app


app = create_app()
