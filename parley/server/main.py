"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request logging), turns on Logfire tracing when enabled, registers exception
handlers, and mounts the API routers, the real-time hub and the
uploaded-media static files.
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from parley.core.database import init_db
from parley.core.logging_config import get_logger, setup_logging
from parley.core.monitoring import initialize_logfire

from .api.v1 import api_router, health
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .hub.router import router as hub_router
from .middleware import RequestLoggingMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Creates missing tables on startup. A failing database does not stop the
    server from starting; requests that need it will fail instead.
    """
    try:
        logger.info("Starting up Parley Server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    logger.info("Shutting down Parley Server...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    Parley Server API

    Backend of the Parley messaging application: accounts, contacts, one-to-one chats,
    groups, messages with reactions and media, and a WebSocket hub for real-time delivery.
    """,
    version=constant.VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

initialize_logfire(app)

setup_exception_handlers(app)

app.include_router(health.router, tags=["health"])
app.include_router(api_router, prefix=constant.API_V1_STR)
app.include_router(hub_router, tags=["hub"])

media_root = Path(settings.media.root)
media_root.mkdir(parents=True, exist_ok=True)
app.mount(constant.UPLOADS_URL_PATH, StaticFiles(directory=media_root), name="uploads")
