"""
Snippetbox - Exception Hierarchy and Error Kinds
=================================================

What:  Application-specific exceptions and the error-kind enumeration the
       snippet store reports failures with.
Why:   The store translates every storage failure into one of two kinds, so
       no layer above it needs to know the storage engine's error vocabulary.
How:   `ModelError.kind` is an `ErrorKind` member. Handlers branch on the kind
       (a structural check) rather than on exception identity or driver type.
Who:   Raised by the snippet store; inspected by route handlers.

Exception Hierarchy:
    SnippetboxError (base)
    └── ModelError (kind: ErrorKind)
        └── RecordNotFoundError   kind=NOT_FOUND → 404
                                  kind=STORAGE   → 500

Design Decision:
    "No live snippet with this id" is an expected outcome, not a fault.
    Modelling it as a kind on the same exception type lets a handler map
    every store failure in one place:

        except ModelError as exc:
            if exc.kind is ErrorKind.NOT_FOUND:
                return not_found()
            return server_error(app, exc)
"""

import enum
from typing import Any, Dict, Optional


class ErrorKind(enum.Enum):
    """Failure categories reported by the snippet store."""

    # No live record matches the request; never a server fault
    NOT_FOUND = "not_found"
    # Connectivity, constraint or driver failure; logged and surfaced as 500
    STORAGE = "storage"


class SnippetboxError(Exception):
    """
    Base exception for all Snippetbox application errors.

    Attributes:
        message:  Short description, safe to log
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ModelError(SnippetboxError):
    """
    Raised by the snippet store for every failed operation.

    The original driver exception, when there is one, is chained as
    `__cause__` so the server-side log keeps the full detail.
    """

    def __init__(
        self,
        kind: ErrorKind = ErrorKind.STORAGE,
        message: str = "A storage error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.kind = kind

    @property
    def not_found(self) -> bool:
        return self.kind is ErrorKind.NOT_FOUND


class RecordNotFoundError(ModelError):
    """
    No live snippet matches the requested id.

    Covers both "no such row" and "row exists but has expired"; callers
    cannot and should not tell the two apart.
    """

    def __init__(
        self,
        resource: str = "snippet",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"no matching {resource} found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            message = f"no matching {resource} found for id {resource_id}"
            ctx["resource_id"] = resource_id
        super().__init__(kind=ErrorKind.NOT_FOUND, message=message, context=ctx)
