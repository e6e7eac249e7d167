"""
Snippetbox - Health Check Route
================================

What:  GET /health for Docker health checks and load balancer probes.
How:   Runs `SELECT 1` through the pool and reports the result.

Status levels:
    - healthy:   database answered (HTTP 200)
    - unhealthy: database unreachable (HTTP 503, stop routing traffic)

A store that is not SQL-backed (tests) has no engine to ping and is
reported as "not_configured" with status healthy.
"""

import logging
import time

from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from snippetbox import __version__
from snippetbox.database import ping
from snippetbox.dependencies import Application
from snippetbox.schemas.snippet import HealthResponse

logger = logging.getLogger(__name__)


async def health_check(app: Application, request: Request) -> Response:
    db_status = "not_configured"
    overall = "healthy"

    if app.engine is not None:
        try:
            await ping(app.engine)
            db_status = "connected"
        except Exception as e:
            db_status = "disconnected"
            overall = "unhealthy"
            logger.warning("Health check: database unreachable: %s", str(e))

    payload = HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - app.started_at, 2),
    )
    return JSONResponse(
        payload.model_dump(),
        status_code=200 if overall == "healthy" else 503,
    )
