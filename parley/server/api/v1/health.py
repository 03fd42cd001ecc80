"""
Health Check Endpoints.

Unauthenticated status endpoints for load balancers and deploy checks.
``/health`` reports whether the database answers and how many hub sockets
this process holds; ``/version`` reports the server and API schema versions.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from parley.core.database import get_session
from parley.core.logging_config import get_logger
from parley.server.core.constant import SCHEMA_VERSION, VERSION
from parley.server.hub.manager import ConnectionManager, get_connection_manager

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "/health",
    summary="Health Check",
    description="Report database reachability and the number of open hub connections on this server.",
    response_description="Status, database state and hub connection count.",
    responses={503: {"description": "The database did not answer"}},
)
async def health_check(
    session: Annotated[AsyncSession, Depends(get_session)],
    manager: Annotated[ConnectionManager, Depends(get_connection_manager)],
):
    """
    Health check endpoint.

    Runs ``SELECT 1`` against the database. A failure turns the response
    into a 503 with ``status: degraded`` so the instance can be taken out of
    rotation while hub clients stay connected.
    """
    try:
        await session.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        logger.warning(f"Health check could not reach the database: {e}")
        database = "unavailable"

    body = {
        "status": "ok" if database == "ok" else "degraded",
        "database": database,
        "hub_connections": manager.connection_count,
    }
    if database != "ok":
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body)
    return body


@router.get(
    "/version",
    summary="Get Version",
    description="Server release and the API schema version clients should target.",
    response_description="Version object.",
)
async def version():
    """Parley server version and the ``/api/v1`` schema version."""
    return {"version": VERSION, "schema_version": SCHEMA_VERSION}
