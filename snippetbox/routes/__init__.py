"""
Snippetbox - Route Table
=========================

What:  Builds the ServeMux that serves every request.
How:   Each handler is bound to the shared `Application` with
       functools.partial, then registered under its pattern.

Route Inventory:
    /                 home page (subtree; home itself 404s anything but "/")
    /snippet          GET  show one snippet        (exact)
    /snippet/create   POST create a snippet        (exact)
    /health           GET  health check            (exact)
    /static/          GET  static assets           (subtree)

Design Principle:
    Handlers handle HTTP concerns only; all storage work is in the store.
"""

from functools import partial

from snippetbox.config import Settings
from snippetbox.dependencies import Application
from snippetbox.routes import health, pages, snippets, static
from snippetbox.routing import ServeMux


def build_mux(app: Application, config: Settings) -> ServeMux:
    mux = ServeMux()
    mux.handle("/", partial(pages.home, app))
    mux.handle("/snippet", partial(snippets.show_snippet, app))
    mux.handle("/snippet/create", partial(snippets.create_snippet, app))
    mux.handle("/health", partial(health.health_check, app))
    mux.handle(
        static.STATIC_PREFIX,
        partial(static.serve_static, static.static_files(config.static_dir)),
    )
    return mux
