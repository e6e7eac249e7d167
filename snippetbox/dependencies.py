"""
Snippetbox - Application-wide Dependencies
===========================================

What:  The one value holding everything handlers share.
Why:   Handlers receive their collaborators explicitly (bound with
       functools.partial when the route table is built) instead of reaching
       for module-level globals. Swapping the store for a test double is a
       constructor argument.
When:  Built once by `create_app()`; read-only afterwards.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from snippetbox.services.snippet_service import SnippetStore
from snippetbox.templating import TemplateRenderer


@dataclass(frozen=True)
class Application:
    """
    Attributes:
        info_log:   informational messages (startup, shutdown)
        error_log:  one entry per unexpected error, with traceback
        snippets:   the snippet store (any `SnippetStore`)
        templates:  HTML renderer for the page handlers
        engine:     the pooled engine behind `snippets`, when it is SQL-backed;
                    used by the health check and the lifespan handler
    """

    info_log: logging.Logger
    error_log: logging.Logger
    snippets: SnippetStore
    templates: TemplateRenderer
    engine: Optional[AsyncEngine] = None
    started_at: float = field(default_factory=time.time)
