"""ConvoHub Backend - Main FastAPI Application

Multi-tenant customer conversation platform

This module creates and configures the main FastAPI application, including:
- All API routers (auth, company, users, messenger, documents, Meta, ...)
- Middleware (request ID correlation, company context, CORS)
- Exception handlers
- Health and observability endpoints
- Static files for public uploads (avatars)
"""

import os
import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from .config import get_settings

# Observability
from .observability.logging_config import configure_logging
from .observability.middleware import RequestIDMiddleware
from .observability.router import router as observability_router

# Authentication & Authorization
from .auth.router import router as auth_router
from .users.router import router as users_router

# Tenancy
from .tenancy.middleware import CompanyContextMiddleware
from .company.router import router as company_router
from .departments.router import router as departments_router
from .shifts.router import router as shifts_router

# Domain Routers
from .customers.router import router as customers_router
from .ai_agents.router import router as ai_agents_router
from .messenger.router import router as messenger_router
from .documents.router import router as documents_router
from .documents.avatar_router import router as avatar_router
from .weburi.router import router as weburi_router

# Integrations
from .meta.router import router as meta_router
from .social_connections.router import router as social_connections_router

# Audit
from .audit.router import router as audit_router

settings = get_settings()

# Configure logging
configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

logger = logging.getLogger(__name__)

DOCS_ENABLED = settings.ENV != "production"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("ConvoHub API starting up...")
    logger.info(f"Environment: {settings.ENV}")
    logger.info(f"Document storage backend: {settings.DOCUMENT_STORAGE_BACKEND}")

    yield

    logger.info("ConvoHub API shutting down...")


# Create FastAPI application
app = FastAPI(
    title="ConvoHub API",
    description="Multi-tenant customer conversation platform",
    version="0.1.0",
    docs_url="/docs" if DOCS_ENABLED else None,
    redoc_url="/redoc" if DOCS_ENABLED else None,
    openapi_url="/openapi.json" if DOCS_ENABLED else None,
    lifespan=lifespan,
)


# =============================================================================
# MIDDLEWARE CONFIGURATION
# =============================================================================

# Request ID Middleware (must be first for proper correlation)
app.add_middleware(RequestIDMiddleware)

ALLOWED_ORIGINS = [origin.strip() for origin in settings.CORS_ORIGINS.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Company-Id"],
)

# Company Context Middleware (company_id from JWT for logging/metrics)
app.add_middleware(CompanyContextMiddleware)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors.

    Returns a structured error response with field-level details.
    """
    errors = jsonable_errors(exc)
    logger.warning(
        f"Validation error on {request.method} {request.url.path}",
        extra={"errors": errors}
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "message": "Request validation failed",
            "details": errors,
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    """Validation errors without the raw input and exception context objects."""
    return [
        {key: value for key, value in error.items() if key in ("type", "loc", "msg")}
        for error in exc.errors()
    ]


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(
    request: Request,
    exc: SQLAlchemyError
) -> JSONResponse:
    """Handle database errors.

    Logs the full error but returns a generic message to prevent
    information leakage.
    """
    logger.error(
        f"Database error on {request.method} {request.url.path}",
        exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "database_error",
            "message": "A database error occurred. Please try again later.",
        },
    )


@app.exception_handler(Exception)
async def generic_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Handle uncaught exceptions.

    Full details are logged but not exposed to the client.
    """
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}",
        exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred. Please try again later.",
        },
    )


# =============================================================================
# ROUTER REGISTRATION
# =============================================================================

# Observability (health, metrics, ready)
app.include_router(observability_router)

# Authentication & Authorization
app.include_router(auth_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")

# Company structure
app.include_router(company_router, prefix="/api/v1")
app.include_router(departments_router, prefix="/api/v1")
app.include_router(shifts_router, prefix="/api/v1")

# Customers & conversations
app.include_router(customers_router, prefix="/api/v1")
app.include_router(ai_agents_router, prefix="/api/v1")
app.include_router(messenger_router, prefix="/api/v1")

# Knowledge sources
app.include_router(documents_router, prefix="/api/v1")
app.include_router(avatar_router, prefix="/api/v1")
app.include_router(weburi_router, prefix="/api/v1")

# Integrations
app.include_router(meta_router, prefix="/api/v1")
app.include_router(social_connections_router, prefix="/api/v1")

# Audit
app.include_router(audit_router, prefix="/api/v1")

# Public uploads (avatars); the folder is created on first upload
app.mount("/public", StaticFiles(directory=settings.PUBLIC_UPLOAD_PATH, check_dir=False), name="public")


# =============================================================================
# ROOT ENDPOINTS
# =============================================================================

@app.get("/", include_in_schema=False)
async def root() -> dict[str, Any]:
    """Root endpoint - API information."""
    return {
        "name": "ConvoHub API",
        "version": "0.1.0",
        "status": "running",
        "docs": "/docs" if DOCS_ENABLED else None,
    }


@app.get("/api/v1", include_in_schema=False)
async def api_root() -> dict[str, Any]:
    """API v1 root endpoint."""
    return {
        "version": "v1",
        "status": "active",
        "endpoints": {
            "auth": "/api/v1/auth",
            "company": "/api/v1/company",
            "users": "/api/v1/users",
            "departments": "/api/v1/department",
            "shifts": "/api/v1/shift",
            "customers": "/api/v1/customer",
            "ai_agents": "/api/v1/ai-agents",
            "messenger": "/api/v1/messenger-factory",
            "documents": "/api/v1/documents",
            "weburi_resources": "/api/v1/weburi-resources",
            "meta": "/api/v1/auth/meta",
            "social_connections": "/api/v1/social-connections",
            "audit": "/api/v1/audit",
        }
    }


# =============================================================================
# APPLICATION FACTORY (for testing)
# =============================================================================

def create_app() -> FastAPI:
    """Return the configured FastAPI application instance."""
    return app


# =============================================================================
# DEVELOPMENT SERVER
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "convohub.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=settings.ENV == "development",
        log_level=settings.LOG_LEVEL.lower(),
    )
