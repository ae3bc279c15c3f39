# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Directory API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.auth import routes as auth_routes
from app.config import get_settings
from app.exceptions import (
    DirectoryException,
    directory_exception_handler,
    validation_exception_handler,
)
from app.routers import comments, health, moderation, tools, votes

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup/shutdown. There are no background tasks to manage."""
    logger.info(f"Starting Directory API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    if not settings.admin_emails_list:
        logger.warning("ADMIN_EMAILS is empty; only tokens with role=admin can moderate")

    yield

    logger.info("Shutting down Directory API")


# Create FastAPI application
app = FastAPI(
    title="Recruiter Directory API",
    description="""
## Directory listings with moderated comments and votes

Comments and votes are submitted anonymously and start out **pending**.
A moderator approves or rejects each one; only approved items are shown
publicly and counted in a tool's score.

| Status | Meaning |
|--------|---------|
| `pending` | awaiting review |
| `approved` | public, counted (terminal) |
| `rejected` | hidden, never counted (terminal) |
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Inspect the caller's token"},
        {"name": "Comments", "description": "Submit and list comments"},
        {"name": "Votes", "description": "Submit, list and tally votes"},
        {"name": "Moderation", "description": "Review queue, approve/reject, cleanup"},
        {"name": "Directory", "description": "Tool and recruiter listings"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(DirectoryException)
async def handle_directory_exception(request: Request, exc: DirectoryException):
    """Handle custom directory exceptions."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return await directory_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """Handle request schema violations."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

app.include_router(auth_routes.router, prefix="/api/v1/auth", tags=["Auth"])

app.include_router(health.router, prefix="/api/v1", tags=["Health"])

app.include_router(comments.router, prefix="/api/v1/comments", tags=["Comments"])

app.include_router(votes.router, prefix="/api/v1/votes", tags=["Votes"])

app.include_router(moderation.router, prefix="/api/v1/moderation", tags=["Moderation"])

app.include_router(tools.router, prefix="/api/v1", tags=["Directory"])


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """Root endpoint - returns API info."""
    return {
        "name": "Recruiter Directory API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }
