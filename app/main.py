import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, status

from app.auth.admin_jwt_handler import AdminTokenHandler
from app.auth.password_handler import build_password_context
from app.core.config import Settings, settings as default_settings
from app.core.cors_manager import setup_cors
from app.core.database import Database
from app.core.error_handlers import register_exception_handlers
from app.core.logging_middleware import ApiLoggingMiddleware, setup_logging
from app.core.security_headers import SecurityHeadersMiddleware
from app.routers import admin_router, auth_router, contact_router
from app.services.email_service import Mailer
from app.utils.rate_limiter import build_limiter, enforce_api_rate_limit, parse_api_limit

logger = logging.getLogger("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info("Application '%s' starting (%s)", settings.APP_NAME, settings.ENVIRONMENT)

    if settings.uses_insecure_jwt_secret and settings.is_production:
        raise RuntimeError("JWT_SECRET must be set in production")

    database = Database(settings.DATABASE_URL).open()
    app.state.db = database
    app.state.mailer = Mailer.from_settings(settings)
    if not app.state.mailer.can_notify:
        logger.warning("SMTP_USER/ADMIN_EMAIL not configured: contact notifications are disabled")
    app.state.started_at = time.monotonic()
    try:
        yield
    finally:
        database.close()
        logger.info("Application '%s' stopped", settings.APP_NAME)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        lifespan=lifespan,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
    )
    app.state.settings = settings
    app.state.token_handler = AdminTokenHandler.from_settings(settings)
    app.state.password_context = build_password_context(settings.BCRYPT_ROUNDS)

    # Limite geral da API por IP, aplicado como dependência dos routers
    app.state.limiter = build_limiter(settings)
    app.state.api_rate_limit = parse_api_limit(settings)
    register_exception_handlers(app)

    # O último middleware adicionado é o mais externo
    setup_cors(app, settings)
    app.add_middleware(SecurityHeadersMiddleware, api_prefix=settings.API_PREFIX, enable_hsts=settings.is_production)
    app.add_middleware(ApiLoggingMiddleware)

    api_dependencies = [Depends(enforce_api_rate_limit)]
    app.include_router(auth_router, prefix=settings.API_PREFIX, dependencies=api_dependencies)
    app.include_router(contact_router, prefix=settings.API_PREFIX, dependencies=api_dependencies)
    app.include_router(admin_router, prefix=settings.API_PREFIX, dependencies=api_dependencies)

    @app.get("/", tags=["Root"])
    async def read_root():
        prefix = settings.API_PREFIX
        return {
            "message": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "documentation": None if settings.is_production else "/docs",
            "health": "/health",
            "contact": f"{prefix}/contact",
            "admin": f"{prefix}/admin",
            "auth": f"{prefix}/auth",
        }

    @app.get("/health", tags=["Health"], status_code=status.HTTP_200_OK)
    async def health_check():
        started_at = getattr(app.state, "started_at", None)
        return {
            "status": "OK",
            "message": f"{settings.APP_NAME} is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "uptime": round(time.monotonic() - started_at, 3) if started_at is not None else 0.0,
        }

    return app


app = create_app()
