"""
Event Registration API - Main Application Entry Point

A multi-tenant event management backend:
- Admins own events; attendees register without an account
- Capacity-safe admission using a conditional atomic increment
- Superadmin oversight across every tenant
- Structured logging with request correlation and Prometheus metrics
"""

from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.core.config import get_settings
from eventdesk.core.logging import setup_logging, get_logger
from eventdesk.core.metrics import metrics_endpoint
from eventdesk.db.session import AsyncSessionLocal, get_db
from eventdesk.api.router import api_router
from eventdesk.api.errors import register_exception_handlers
from eventdesk.api.middleware import RequestLoggingMiddleware
from eventdesk.services.auth_service import seed_superadmin

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    async with AsyncSessionLocal() as session:
        if await seed_superadmin(session):
            await session.commit()

    yield

    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Multi-tenant event management API with capacity-safe registration",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

app.include_router(api_router)

# Logos written by the local media backend
app.mount(
    settings.MEDIA_URL_PREFIX,
    StaticFiles(directory=settings.MEDIA_ROOT, check_dir=False),
    name="media",
)


@app.get("/health", tags=["Health"])
async def health_check(db: AsyncSession = Depends(get_db)):
    """Health check endpoint for Docker and load balancers."""
    await db.execute(text("SELECT 1"))
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
    }


@app.get("/metrics", include_in_schema=False)
async def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
