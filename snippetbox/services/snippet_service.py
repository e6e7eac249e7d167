"""
Snippetbox - Snippet Store (Data Access Layer)
===============================================

What:  The only component that talks to the `snippets` table.
Why:   Keeps every SQL statement and every storage error in one place.
How:   Statements are SQLAlchemy ORM/Core constructs, so caller-supplied values
       always travel as bound parameters; SQL text is never assembled from
       strings. SQLAlchemy and driver exceptions are translated into
       `ModelError` before they leave this module.
Who:   Handlers depend on the `SnippetStore` protocol; `SnippetService` is the
       production implementation, tests substitute an in-memory store.

Error translation:
    no live row for the id        → RecordNotFoundError (kind NOT_FOUND)
    SQLAlchemyError / OSError /
    OverflowError                 → ModelError (kind STORAGE), original chained
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from snippetbox.exceptions import ErrorKind, ModelError, RecordNotFoundError
from snippetbox.models.snippet import SnippetRecord
from snippetbox.schemas.snippet import Snippet

logger = logging.getLogger(__name__)

# Errors that mean "the storage layer failed", as opposed to a bug in our code.
# OSError covers drivers that surface socket failures without wrapping them;
# OverflowError, drivers that reject an out-of-range parameter while binding.
STORAGE_ERRORS = (SQLAlchemyError, OSError, OverflowError)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SnippetStore(Protocol):
    """
    Capability interface the handlers depend on.

    Any backend implementing these three coroutines can serve the app.
    Failures are reported only as `ModelError`.
    """

    async def insert(self, title: str, content: str, expires: int) -> int:
        ...

    async def get(self, snippet_id: int) -> Snippet:
        ...

    async def latest(self) -> List[Snippet]:
        ...


class SnippetService:
    """
    SQL implementation of `SnippetStore`.

    Stateless apart from the session factory: each call opens its own
    session, which checks a connection out of the engine's pool and
    returns it when the call finishes. Safe to share between concurrent
    requests.
    """

    latest_limit = 10

    def __init__(
        self,
        sessions: async_sessionmaker[AsyncSession],
        clock: Callable[[], datetime] = utcnow,
    ):
        self._sessions = sessions
        self._clock = clock

    async def insert(self, title: str, content: str, expires: int) -> int:
        """
        Store a new snippet and return its id.

        created = now (UTC), expires = created + `expires` days. The day
        count is trusted; validating it is the caller's job.

        Raises:
            ModelError(STORAGE): connectivity or constraint failure (no retry)
        """
        created = self._clock()
        record = SnippetRecord(
            title=title,
            content=content,
            created=created,
            expires=created + timedelta(days=expires),
        )
        try:
            async with self._sessions() as session:
                async with session.begin():
                    session.add(record)
        except STORAGE_ERRORS as exc:
            raise ModelError(
                ErrorKind.STORAGE,
                message="could not insert snippet",
                context={"error_type": type(exc).__name__},
            ) from exc

        logger.debug("Inserted snippet %d (expires %s)", record.id, record.expires)
        return record.id

    async def get(self, snippet_id: int) -> Snippet:
        """
        Fetch one live snippet.

        Query:
            SELECT ... FROM snippets WHERE id = :id AND expires > :now

        Raises:
            RecordNotFoundError: no row with this id, or the row has expired
            ModelError(STORAGE): any other storage failure
        """
        stmt = select(SnippetRecord).where(
            SnippetRecord.id == snippet_id,
            SnippetRecord.expires > self._clock(),
        )
        try:
            async with self._sessions() as session:
                result = await session.execute(stmt)
                record = result.scalar_one_or_none()
        except STORAGE_ERRORS as exc:
            raise ModelError(
                ErrorKind.STORAGE,
                message="could not fetch snippet",
                context={"snippet_id": snippet_id, "error_type": type(exc).__name__},
            ) from exc

        if record is None:
            raise RecordNotFoundError(resource="snippet", resource_id=snippet_id)
        return Snippet.model_validate(record)

    async def latest(self) -> List[Snippet]:
        """
        The 10 most recently created live snippets, newest first.

        Rows created at the same instant are ordered by id, highest first,
        so the later insert wins the tie.
        """
        stmt = (
            select(SnippetRecord)
            .where(SnippetRecord.expires > self._clock())
            .order_by(SnippetRecord.created.desc(), SnippetRecord.id.desc())
            .limit(self.latest_limit)
        )
        try:
            async with self._sessions() as session:
                result = await session.execute(stmt)
                records = list(result.scalars().all())
        except STORAGE_ERRORS as exc:
            raise ModelError(
                ErrorKind.STORAGE,
                message="could not list latest snippets",
                context={"error_type": type(exc).__name__},
            ) from exc

        return [Snippet.model_validate(record) for record in records]
