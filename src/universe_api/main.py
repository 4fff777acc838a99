"""
Universe API - Main Application Entry Point

This module builds and configures the FastAPI application including:
- Database connectivity check on startup
- Password hasher and token service, built from settings
- CORS and request logging middleware
- Error envelope handlers
- API routing
- Health check endpoints
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from universe_api.api import api_router
from universe_api.core.config import Settings, get_settings
from universe_api.core.database import (
    check_db,
    close_db,
    create_engine,
    create_session_maker,
    get_db,
    init_db,
)
from universe_api.core.handlers import error_response, register_exception_handlers
from universe_api.core.security import PasswordHasher, TokenService

logger = logging.getLogger(__name__)

API_INDEX = {
    "auth": {
        "register": "POST /api/auth/register",
        "login": "POST /api/auth/login",
        "verify": "GET /api/auth/verify",
        "logout": "POST /api/auth/logout",
        "refresh": "POST /api/auth/refresh",
    },
    "users": {
        "list": "GET /api/users",
        "me": "GET /api/users/me",
        "update_me": "PUT /api/users/me",
        "get": "GET /api/users/:id",
        "create": "POST /api/users",
        "update": "PUT /api/users/:id",
        "deactivate": "DELETE /api/users/:id",
    },
    "abiturient": {
        "profile": "GET /api/abiturient/profile",
        "personal": "PUT /api/abiturient/profile/personal",
        "contact": "GET /api/abiturient/contact",
        "update_contact": "PUT /api/abiturient/contact",
    },
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Check the database on startup and release the pool on shutdown."""
    settings: Settings = app.state.settings
    logger.info(f"Starting Universe API in {settings.python_env} mode...")

    try:
        await init_db(app.state.session_maker)
        logger.info("Database connected")
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database connection failed: {e}")
        if settings.is_production:
            raise

    yield

    logger.info("Shutting down Universe API...")
    await close_db(app.state.engine)
    logger.info("Cleanup complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application from explicit settings.

    Args:
        settings: Configuration to use; read from the environment if omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title="Universe API",
        description="University admissions portal API: accounts, roles and applicant profiles",
        version="0.1.0",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = create_engine(settings)
    app.state.session_maker = create_session_maker(app.state.engine)
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    app.state.token_service = TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl=settings.access_token_ttl,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials="*" not in settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms"
        )
        return response

    register_exception_handlers(app, settings)

    app.include_router(api_router, prefix="/api")

    @app.get("/api", tags=["Root"])
    async def index() -> dict:
        """API welcome message and endpoint index."""
        return {
            "success": True,
            "message": "Universe API",
            "version": app.version,
            "environment": settings.python_env,
            "endpoints": API_INDEX,
        }

    @app.get("/api/health", tags=["Health"])
    async def health_check() -> dict:
        """Liveness check."""
        return {
            "success": True,
            "message": "Server is running",
            "timestamp": datetime.now(UTC).isoformat(),
        }

    @app.get("/api/ready", tags=["Health"])
    async def readiness_check(db: AsyncSession = Depends(get_db)):
        """Readiness check: the database must answer a trivial query."""
        try:
            await check_db(db)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Readiness check failed: {e}")
            return error_response(
                status.HTTP_503_SERVICE_UNAVAILABLE,
                "DATABASE_UNAVAILABLE",
                "Database is not reachable",
            )
        return JSONResponse({"success": True, "message": "Ready"})

    return app


app = create_app()
