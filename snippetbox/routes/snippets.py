"""
Snippetbox - Snippet Handlers
==============================

What:  GET /snippet?id=N and POST /snippet/create.
How:   Parse the request, call the snippet store, map the outcome to a
       response. No SQL and no storage exception types appear here.

Failure mapping:
    missing / non-integer / < 1 id   → 404
    id beyond 64 bits                → 404
    store NOT_FOUND                  → 404 (same response as a bad id)
    store STORAGE                    → 500, logged with traceback
    non-POST on /snippet/create      → 405 with "Allow: POST"
    form fails SnippetForm           → 400
"""

import logging
import re

from pydantic import ValidationError
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import PlainTextResponse, RedirectResponse, Response

from snippetbox.dependencies import Application
from snippetbox.exceptions import ModelError
from snippetbox.routes.helpers import client_error, not_found, server_error
from snippetbox.schemas.snippet import SnippetForm

logger = logging.getLogger(__name__)

# Decimal digits with an optional sign; int() alone would also accept
# surrounding whitespace and "1_000"
_INTEGER = re.compile(r"[+-]?[0-9]+")

# Ids are 64-bit signed integers in storage
MAX_ID = 2**63 - 1


def parse_id(raw: str) -> int:
    """
    Parse a snippet id from the query string.

    Returns 0 for anything that is not a plain integer or does not fit in
    64 bits, which every caller treats like any other id below 1.
    """
    if not _INTEGER.fullmatch(raw):
        return 0
    try:
        value = int(raw)
    except ValueError:
        # Past the interpreter's digit limit for str → int conversion
        return 0
    return value if value <= MAX_ID else 0


async def show_snippet(app: Application, request: Request) -> Response:
    # First value wins when the parameter is repeated
    ids = request.query_params.getlist("id")
    snippet_id = parse_id(ids[0] if ids else "")
    if snippet_id < 1:
        return not_found()

    try:
        snippet = await app.snippets.get(snippet_id)
    except ModelError as exc:
        if exc.not_found:
            return not_found()
        return server_error(app, exc)

    return PlainTextResponse(str(snippet))


async def create_snippet(app: Application, request: Request) -> Response:
    """
    Store the snippet described by the form body, then send the client to it.

    Form fields: title, content, expires (days, default 7).
    Success: 303 See Other → /snippet?id=<new id>
    """
    if request.method != "POST":
        return client_error(405, headers={"Allow": "POST"})

    try:
        async with request.form() as form:
            fields = {key: value for key, value in form.items()}
    except HTTPException as exc:
        # Malformed multipart body
        return client_error(exc.status_code)

    try:
        data = SnippetForm.model_validate(fields)
    except ValidationError as exc:
        logger.debug("Rejected snippet form: %d invalid field(s)", exc.error_count())
        return client_error(400)

    try:
        snippet_id = await app.snippets.insert(data.title, data.content, data.expires)
    except ModelError as exc:
        return server_error(app, exc)

    return RedirectResponse(f"/snippet?id={snippet_id}", status_code=303)
