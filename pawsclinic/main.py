# pawsclinic/main.py
from __future__ import annotations

# Load .env early so settings and os.getenv see it everywhere
from dotenv import load_dotenv
load_dotenv()

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from pawsclinic.api.routes.admin import router as admin_router
from pawsclinic.api.routes.health import router as health_router
from pawsclinic.api.routes.intake import router as intake_router
from pawsclinic.core.config import Settings, get_settings
from pawsclinic.core.errors import register_exception_handlers
from pawsclinic.core.logging import LoggingMiddleware, get_logger, setup_logging
from pawsclinic.core.rate_limit import RateLimitMiddleware, SlidingWindowLimiter
from pawsclinic.crud.appointment import AppointmentStore
from pawsclinic.db.session import Database
from pawsclinic.services.admin import AdminGate, AdminQueryService
from pawsclinic.services.intake import IntakeHandler
from pawsclinic.services.messaging import MessagingClient, build_messaging_client
from pawsclinic.services.notifier import NotificationDispatcher

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    messaging_client: Optional[MessagingClient] = None,
) -> FastAPI:
    """
    Build the API. Storage and the Twilio client are constructed in the
    lifespan and parked on ``app.state``; pass ``messaging_client`` to use
    something other than the client built from ``settings``.
    """
    settings = settings or get_settings()
    setup_logging(
        debug=settings.is_development,
        max_log_length=settings.MAX_LOG_LENGTH,
        level=settings.LOG_LEVEL,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database = Database(settings.DATABASE_PATH)
        await database.init()
        logger.info("database_ready", path=str(database.path))

        client = messaging_client if messaging_client is not None else build_messaging_client(settings)
        dispatcher = NotificationDispatcher(settings, client)
        store = AppointmentStore(database)

        app.state.database = database
        app.state.intake = IntakeHandler(dispatcher, store)
        app.state.admin_gate = AdminGate(settings.ADMIN_SECRET)
        app.state.admin_queries = AdminQueryService(store)
        logger.info("application_startup", mode=dispatcher.mode.value, twilio=client is not None)
        try:
            yield
        finally:
            logger.info("application_shutdown")
            await database.dispose()

    app = FastAPI(
        title="PawsClinic",
        description="Appointment request intake and admin API",
        lifespan=lifespan,
    )
    app.state.settings = settings

    register_exception_handlers(app)

    # Last added runs first: logging wraps rate limiting
    if settings.RATE_LIMIT_PER_MINUTE > 0:
        limiter = SlidingWindowLimiter(settings.RATE_LIMIT_PER_MINUTE, window_seconds=60)
        app.middleware("http")(RateLimitMiddleware(limiter, prefix="/api/"))
    app.middleware("http")(LoggingMiddleware(log_requests=settings.LOG_REQUESTS))

    # -------- Include routers --------
    app.include_router(health_router)
    app.include_router(intake_router)
    app.include_router(admin_router)

    return app


app = create_app()
