"""
Meetup Subscriptions API - Main Application Entry Point

Admission control for meetup subscriptions:
- Join/leave with eligibility checks and schedule conflict detection
- Per-meetup serialization with optimistic locking
- Fire-and-forget owner notifications through a Redis mail queue
- Structured logging with request correlation
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from meetups.core.config import get_settings
from meetups.core.logging import setup_logging, get_logger
from meetups.core.metrics import metrics_endpoint
from meetups.api.router import api_router
from meetups.api.middleware import RequestLoggingMiddleware
from meetups.db.session import create_engine, create_session_factory
from meetups.domain import InfrastructureError
from meetups.infrastructure import connect_redis, close_redis
from meetups.repositories import SqlAlchemyEventRepository, SqlAlchemyUserRepository
from meetups.services.notifier_factory import get_notifier
from meetups.services.subscription_service import SubscriptionService

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: build collaborators once, tear them down on shutdown."""
    setup_logging()

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    engine = create_engine()
    session_factory = create_session_factory(engine)

    redis_client = await connect_redis(settings)
    if redis_client is None:
        logger.warning("redis_unavailable", message="Notifications will only be logged")

    service = SubscriptionService.from_settings(
        SqlAlchemyEventRepository(session_factory),
        SqlAlchemyUserRepository(session_factory),
        get_notifier(redis_client, settings),
        settings,
    )
    app.state.subscription_service = service
    app.state.redis_connected = redis_client is not None

    yield

    await service.drain()
    await close_redis(redis_client)
    await engine.dispose()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Meetup subscription admission with schedule conflict detection",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

app.include_router(api_router)


@app.exception_handler(InfrastructureError)
async def infrastructure_error_handler(request: Request, exc: InfrastructureError):
    logger.error("infrastructure_failure", error=str(exc), error_type=type(exc).__name__)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"error": "Service temporarily unavailable, please try again"},
    )


@app.get("/health", tags=["Health"])
async def health_check(request: Request):
    """Health check endpoint for Docker and load balancers."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "redis": "connected" if getattr(request.app.state, "redis_connected", False) else "disabled",
    }


@app.get("/metrics", tags=["Health"])
async def metrics():
    return metrics_endpoint()
