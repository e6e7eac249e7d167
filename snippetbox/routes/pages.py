"""
Snippetbox - Page Handlers
===========================

What:  GET / (the home page).

The home handler is registered on the "/" subtree pattern, which the router
hands every path nothing else claims. The exact-path check below narrows it
back down to the root itself.
"""

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import HTMLResponse, Response

from snippetbox.dependencies import Application
from snippetbox.routes.helpers import not_found, server_error
from snippetbox.templating import TemplateError

# The page template comes first; it extends the layout, which includes the footer
HOME_TEMPLATES = ("home.page.html", "base.layout.html", "footer.partial.html")


async def home(app: Application, request: Request) -> Response:
    if request.scope["path"] != "/":
        return not_found()

    # Template loading touches the filesystem; keep it off the event loop
    try:
        body = await run_in_threadpool(app.templates.render, HOME_TEMPLATES)
    except TemplateError as exc:
        return server_error(app, exc)

    return HTMLResponse(body)
