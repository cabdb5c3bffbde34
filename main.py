import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from campusshare.application.use_cases.messages import (
    MessageDispatcher,
    UnreadMessageEscalation,
)
from campusshare.config import get_settings
from campusshare.infrastructure.database import SessionLocal, engine, initialize_database
from campusshare.infrastructure.email import send_email
from campusshare.infrastructure.realtime import ConnectionRegistry, RealtimePublisher
from campusshare.infrastructure.scheduler import PeriodicSweepScheduler
from campusshare.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare the database and messaging services, then release them on shutdown."""

    settings = get_settings()
    initialize_database()

    registry = ConnectionRegistry()
    escalation = UnreadMessageEscalation(
        SessionLocal,
        send_email,
        delay=timedelta(minutes=settings.message_email_delay_minutes),
        send_timeout=settings.email_send_timeout_seconds,
        frontend_url=settings.frontend_url,
    )
    scheduler = PeriodicSweepScheduler(
        escalation.run_sweep,
        interval=settings.message_email_sweep_interval_seconds,
        name="unread-message-email",
    )

    app.state.connection_registry = registry
    app.state.message_dispatcher = MessageDispatcher(RealtimePublisher(registry))
    app.state.message_email_escalation = escalation
    app.state.message_email_scheduler = scheduler

    if settings.message_email_scheduler_enabled:
        await scheduler.start()
    else:
        logger.info("Unread message email scheduler is disabled")

    try:
        yield
    finally:
        await scheduler.stop()
        escalation.close()
        registry.clear()
        engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(title="CampusShare Messaging API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
