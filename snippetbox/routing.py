"""
Snippetbox - Request Router (ServeMux)
=======================================

What:  Maps a request path to a handler coroutine.
How:   Patterns are plain path strings registered with `handle()`.
       An ASGI callable, mounted at the root of the FastAPI app.

Matching rules:
    - A pattern ending in "/" is a subtree pattern: it matches every path
      starting with it. Any other pattern matches only the identical path.
    - The longest matching pattern wins, whatever the registration order.
      "/" is a subtree pattern, so it catches every otherwise unmatched path.
    - No match → 404 "404 page not found".

Redirects (301 Moved Permanently, query string preserved):
    - "/static" when only "/static/" is registered → "/static/"
    - Paths with "." or ".." segments or repeated "/" are cleaned first;
      if cleaning changes the path the client is sent to the cleaned path
      instead of being dispatched.

Handlers are `async def handler(request) -> Response`. Dependencies are
bound before registration (see `snippetbox.routes.build_mux`).
"""

import posixpath
import re
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional, Union

from starlette.requests import Request
from starlette.responses import PlainTextResponse, RedirectResponse, Response
from starlette.types import Receive, Scope, Send
from starlette.websockets import WebSocketClose

Handler = Callable[[Request], Awaitable[Response]]

_REPEATED_SLASHES = re.compile(r"/{2,}")


@dataclass(frozen=True)
class Match:
    pattern: str
    handler: Handler


@dataclass(frozen=True)
class Redirect:
    location: str


def clean_path(path: str) -> str:
    """
    Canonical form of a request path.

    Collapses repeated slashes, resolves "." and ".." (never above the
    root) and keeps a trailing slash when the input had one.

        clean_path("/snippet//create")  → "/snippet/create"
        clean_path("/a/b/../c/")        → "/a/c/"
        clean_path("/../snippet")       → "/snippet"
    """
    if not path:
        return "/"
    if not path.startswith("/"):
        path = "/" + path
    cleaned = posixpath.normpath(_REPEATED_SLASHES.sub("/", path))
    if path.endswith("/") and cleaned != "/":
        cleaned += "/"
    return cleaned


class ServeMux:
    """Pattern table plus the dispatch logic described in the module docstring."""

    def __init__(self) -> None:
        # Every registered pattern, exact and subtree alike
        self._entries: Dict[str, Match] = {}
        # Subtree patterns only, longest first
        self._subtrees: List[Match] = []

    def handle(self, pattern: str, handler: Handler) -> None:
        """
        Register `handler` for `pattern`.

        Raises:
            ValueError: empty/relative pattern, or pattern already registered
        """
        if not pattern or not pattern.startswith("/"):
            raise ValueError(f"invalid pattern {pattern!r}: must start with '/'")
        if pattern in self._entries:
            raise ValueError(f"multiple registrations for {pattern}")

        entry = Match(pattern=pattern, handler=handler)
        self._entries[pattern] = entry
        if pattern.endswith("/"):
            self._subtrees.append(entry)
            self._subtrees.sort(key=lambda e: len(e.pattern), reverse=True)

    def match(self, path: str) -> Optional[Match]:
        """Longest pattern matching `path`, without any redirect logic."""
        entry = self._entries.get(path)
        if entry is not None:
            return entry
        for entry in self._subtrees:
            if path.startswith(entry.pattern):
                return entry
        return None

    def resolve(self, path: str) -> Union[Match, Redirect, None]:
        """
        Decide what a request for `path` gets: a handler, a redirect, or
        nothing (None → 404).
        """
        cleaned = clean_path(path)
        if self._needs_trailing_slash(cleaned):
            return Redirect(cleaned + "/")
        if cleaned != path:
            return Redirect(cleaned)
        return self.match(path)

    def _needs_trailing_slash(self, path: str) -> bool:
        if path in self._entries or path.endswith("/"):
            return False
        return path + "/" in self._entries

    async def dispatch(self, request: Request) -> Response:
        outcome = self.resolve(request.scope["path"])

        if isinstance(outcome, Redirect):
            location = outcome.location
            if request.url.query:
                location = f"{location}?{request.url.query}"
            return RedirectResponse(location, status_code=301)

        if outcome is None:
            return PlainTextResponse("404 page not found", status_code=404)

        return await outcome.handler(request)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "websocket":
            await WebSocketClose()(scope, receive, send)
            return
        request = Request(scope, receive)
        response = await self.dispatch(request)
        await response(scope, receive, send)
