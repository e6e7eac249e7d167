"""
Snippetbox - HTML Template Rendering
=====================================

What:  Thin wrapper around a Jinja2 environment rooted at `ui/html`.
How:   `render(files, data)` loads every named template (so a missing layout
       or partial fails the render even when nothing includes it yet) and
       renders the first one, which extends/includes the rest.
Who:   Called by the home handler; any failure surfaces as `TemplateError`.

File naming follows the page/layout/partial convention:
    home.page.html       → {% extends "base.layout.html" %}
    base.layout.html     → {% include "footer.partial.html" %}
"""

from typing import Any, Optional, Sequence

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

__all__ = ["TemplateRenderer", "TemplateError"]


class TemplateRenderer:
    def __init__(self, directory: str):
        self.directory = directory
        self.env = Environment(
            loader=FileSystemLoader(directory),
            autoescape=select_autoescape(["html"]),
        )

    def render(self, files: Sequence[str], data: Optional[Any] = None) -> str:
        """
        Render `files[0]` with `data` bound as `data` in the template context.

        Raises:
            TemplateError: a template is missing or fails to compile or render
        """
        if not files:
            raise TemplateError("no templates given")
        templates = [self.env.get_template(name) for name in files]
        return templates[0].render(data=data)
