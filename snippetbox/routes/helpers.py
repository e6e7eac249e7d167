"""
Snippetbox - Response Helpers
==============================

What:  The three ways a handler gives up on a request.
Why:   One place decides what an error looks like on the wire and what gets
       logged; handlers just pick the right helper and return.

Response-construction order:
    Headers are fixed before the status line is sent and the status line
    before any body byte. Each helper builds a complete Starlette Response
    (headers + status + body in one constructor call), so nothing can be
    written with an implicit 200 first.
"""

from http import HTTPStatus
from typing import Mapping, Optional

from starlette.responses import PlainTextResponse, Response

from snippetbox.dependencies import Application
from snippetbox.middleware.request_id import request_id_var


def server_error(app: Application, exc: BaseException) -> Response:
    """
    Log `exc` with its traceback and answer with an opaque 500.

    The client sees only the status phrase; detail stays in the server log.
    """
    app.error_log.error(
        "[%s] %s: %s",
        request_id_var.get(""),
        type(exc).__name__,
        exc,
        exc_info=exc,
    )
    return client_error(HTTPStatus.INTERNAL_SERVER_ERROR)


def client_error(status: int, headers: Optional[Mapping[str, str]] = None) -> Response:
    """Plain-text response carrying the standard phrase for `status`."""
    return PlainTextResponse(
        HTTPStatus(status).phrase,
        status_code=int(status),
        headers=headers,
    )


def not_found() -> Response:
    return client_error(HTTPStatus.NOT_FOUND)
