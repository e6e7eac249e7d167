"""
Snippetbox - FastAPI Application Factory
=========================================

What:  Creates and configures the ASGI application.
How:   Factory pattern: create_app() wires the dependency holder, mounts the
       ServeMux at the root and registers middleware, exception handlers and
       the lifespan.
Who:   uvicorn (`uvicorn --factory snippetbox.main:create_app`, or
       `python -m snippetbox`). No app or engine is built at import time.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐                   │
    │  │ Req ID   │→│  Access log     │                   │
    │  └──────────┘ └─────────────────┘                   │
    │                                                     │
    │  Mount "/" → ServeMux                               │
    │  ┌──────┐ ┌──────────┐ ┌─────────────────┐          │
    │  │  /   │ │ /snippet │ │ /snippet/create │ ...      │
    │  └──────┘ └──────────┘ └─────────────────┘          │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ anything a handler did not catch → 500       │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Ping the database; failure aborts startup (the process never serves)
    Shutdown (after uvicorn has drained in-flight requests):
    1. Dispose the engine (close all pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from snippetbox import __version__
from snippetbox.config import Settings, settings
from snippetbox.database import dispose_engine, open_engine, ping, session_factory
from snippetbox.dependencies import Application
from snippetbox.middleware.logging import RequestLoggingMiddleware
from snippetbox.middleware.request_id import RequestIDMiddleware, request_id_var
from snippetbox.routes import build_mux
from snippetbox.services.snippet_service import SnippetService, SnippetStore
from snippetbox.templating import TemplateRenderer


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Errors logged by handlers go through the `snippetbox.error` logger and
    include the traceback.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,  # Override any existing logging config
    )

    # These log every operation at INFO/DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

def build_lifespan(deps: Application, config: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        setup_logging(config.log_level)
        deps.info_log.info("Snippetbox %s starting up...", __version__)

        if deps.engine is not None:
            try:
                await ping(deps.engine)
            except Exception:
                deps.error_log.critical("Cannot reach the database; refusing to start", exc_info=True)
                await dispose_engine(deps.engine)
                raise

        host, port = config.listen_address
        deps.info_log.info("Starting server on %s:%d", host, port)

        yield

        deps.info_log.info("Snippetbox shutting down...")
        if deps.engine is not None:
            await dispose_engine(deps.engine)
        deps.info_log.info("Shutdown complete.")

    return lifespan


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI, deps: Application) -> None:
    """
    Last line of defence. Handlers map every expected failure themselves;
    anything reaching this point is a bug. The traceback is logged server-side
    and the client gets an opaque 500.
    """

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        deps.error_log.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return PlainTextResponse("Internal Server Error", status_code=500)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    config: Optional[Settings] = None,
    snippets: Optional[SnippetStore] = None,
) -> FastAPI:
    """
    Create and configure the application.

    Args:
        config:   settings to use (default: the environment-derived `settings`)
        snippets: a ready snippet store; when omitted a SnippetService over
                  a pooled engine for `config.database_url` is built

    Returns: FastAPI instance ready to receive requests.
    """
    config = config or settings

    engine = None
    if snippets is None:
        engine = open_engine(config)
        snippets = SnippetService(session_factory(engine))

    deps = Application(
        info_log=logging.getLogger("snippetbox.info"),
        error_log=logging.getLogger("snippetbox.error"),
        snippets=snippets,
        templates=TemplateRenderer(config.html_dir),
        engine=engine,
    )

    # The ServeMux owns every path, so FastAPI's generated docs are disabled
    app = FastAPI(
        title="Snippetbox",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=build_lifespan(deps, config),
    )
    app.state.deps = deps

    # Last added = first to execute: RequestID → Logging → mux
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app, deps)

    app.mount("/", build_mux(deps, config))

    return app
