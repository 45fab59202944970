from contextlib import asynccontextmanager
from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from app.core.config import settings
from app.core.logging import setup_logging, RequestLoggingMiddleware
from app.core.metrics import setup_metrics
from app.core.error_handler import setup_error_handlers
from app.api.v1.api import api_router
from app.db.database import init_db, dispose_db
import logging

setup_logging()
logger = logging.getLogger(__name__)

class WelcomeResponse(BaseModel):
    message: str

class HealthResponse(BaseModel):
    status: str
    version: str

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handle startup and shutdown events.
    """
    logger.info("Starting up application...")
    await init_db()

    yield

    logger.info("Shutting down application...")
    await dispose_db()

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="""
    Assignment scheduling API for professional interpreters.

    ## Features

    * 📅 **Assignments**
        * Single and recurring assignments (daily, weekly, biweekly, monthly)
        * Recurring series capped at 52 occurrences or an end date

    * 🗂️ **Templates**
        * Save reusable assignment defaults
        * Apply a template to create one assignment or a whole series
        * Usage statistics per template

    * 👥 **Teams**
        * Invite interpreters onto an assignment
        * Accept, decline and remove memberships

    ## Identity

    Requests carry the caller's `user_id` as issued by the hosted auth
    provider; session validation happens in front of this service.

    ## Error Handling

    Errors are returned as `{"detail", "status_code", "type"}`:
    * 400: Bad Request - Invalid input
    * 403: Forbidden - Not allowed for this user
    * 404: Not Found - Resource doesn't exist or is not owned by the caller
    * 422: Unprocessable Entity - Missing or malformed fields
    * 500: Internal Server Error - Nothing was saved
    """,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs" if settings.SHOW_DOCS else None,
    redoc_url=f"{settings.API_V1_STR}/redoc" if settings.SHOW_DOCS else None,
    license_info={
        "name": "MIT",
        "url": "https://opensource.org/licenses/MIT",
    },
    lifespan=lifespan
)

# Add CORS middleware
if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin).rstrip("/") for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

setup_metrics(app)
app.add_middleware(RequestLoggingMiddleware)
setup_error_handlers(app)

# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)

@app.get(
    "/",
    response_model=WelcomeResponse,
    status_code=status.HTTP_200_OK,
    summary="Root endpoint",
    description="Welcome endpoint for the API"
)
async def root() -> WelcomeResponse:
    """Root endpoint returning a welcome message."""
    return WelcomeResponse(message=f"Welcome to the {settings.PROJECT_NAME} API")

@app.get("/health", response_model=HealthResponse, summary="Liveness check")
async def health() -> HealthResponse:
    return HealthResponse(status="ok", version=settings.VERSION)
