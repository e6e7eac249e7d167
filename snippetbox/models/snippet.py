"""
Snippetbox - Snippet SQLAlchemy Model
======================================

What:  ORM mapping of the `snippets` table.
Why:   Lets the snippet store build parameterised statements from Python
       expressions instead of SQL strings.
Who:   Used only by SnippetService and by Alembic; handlers never import it.

Table Design Rationale:
    - Integer auto-increment primary key: ids appear in URLs (/snippet?id=3)
    - created / expires: UTC with timezone; expiry is a query-time filter,
      rows are never deleted or updated by the application
    - Index on created serves the "latest snippets" query (scanned backwards)
"""

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from snippetbox.database import Base


class SnippetRecord(Base):
    """
    One stored snippet.

    Lifecycle:
        1. Inserted with created = now and expires = now + N days
        2. Visible to reads while expires is in the future
        3. Never mutated afterwards
    """

    __tablename__ = "snippets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(100), nullable=False)

    # TEXT: snippets have no artificial length limit
    content: Mapped[str] = mapped_column(Text, nullable=False)

    created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="When the snippet was created (UTC)",
    )

    expires: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="After this instant (UTC) the snippet is no longer served",
    )

    __table_args__ = (
        Index("idx_snippets_created", "created"),
    )

    def __repr__(self) -> str:
        return f"<SnippetRecord(id={self.id}, title={self.title!r}, expires='{self.expires}')>"
