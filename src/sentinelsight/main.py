from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from . import __version__
from .config import settings
from .db import init_db
from .logging import configure_logging
from .routes.alerts import router as alerts_router
from .routes.audit import router as audit_router
from .routes.auth import router as auth_router
from .routes.cameras import router as cameras_router
from .routes.dashboard import router as dashboard_router
from .routes.detections import router as detections_router
from .routes.events import router as events_router
from .routes.notifications import router as notifications_router
from .routes.rules import router as rules_router
from .routes.sites import router as sites_router
from .routes.zones import router as zones_router

configure_logging("DEBUG" if settings.debug else settings.log_level, sql_echo=settings.sql_echo)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database on startup."""
    # Tokens are signed with a dev-only key when SECRET_KEY is unset.
    if not settings.debug and not settings.secret_key:
        logger.warning(
            "SECRET_KEY is not set while DEBUG is False. Session tokens are signed "
            "with a development key - set SECRET_KEY in environment or .env before production."
        )

    logger.info("Initializing database...")
    init_db()
    logger.info("Database initialized successfully")
    yield
    logger.info("Shutting down application")


app = FastAPI(
    title="SentinelSight Server",
    description="Management and metadata API for the SentinelSight video analytics platform",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware for the dashboard
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(sites_router)
app.include_router(cameras_router)
app.include_router(zones_router)
app.include_router(rules_router)
app.include_router(events_router)
app.include_router(detections_router)
app.include_router(alerts_router)
app.include_router(notifications_router)
app.include_router(audit_router)
app.include_router(dashboard_router)


@app.get("/")
def health_check():
    """Health check endpoint."""
    return {"status": "ok", "service": "SentinelSight Server"}
