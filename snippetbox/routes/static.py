"""
Snippetbox - Static Files
==========================

What:  Serves ui/static under the /static/ subtree pattern.
How:   Strips the "/static" prefix and lets Starlette's StaticFiles resolve
       the remainder inside the static directory (it refuses paths that
       escape it). Directories are not listed.
"""

from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import Response
from starlette.staticfiles import StaticFiles

from snippetbox.routes.helpers import client_error

STATIC_PREFIX = "/static/"


def static_files(directory: str) -> StaticFiles:
    # check_dir=False: a missing directory yields 404s rather than a startup crash
    return StaticFiles(directory=directory, check_dir=False)


async def serve_static(files: StaticFiles, request: Request) -> Response:
    path = request.scope["path"][len(STATIC_PREFIX):]
    try:
        return await files.get_response(path, request.scope)
    except HTTPException as exc:
        return client_error(exc.status_code, headers=exc.headers)
