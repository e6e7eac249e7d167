"""
Snippetbox - Pydantic Schemas
==============================

What:  The Snippet domain entity, the create-form contract and the health
       payload.
Why:   The store hands out `Snippet` values, never ORM rows, so nothing
       above the store is tied to SQLAlchemy sessions or lazy loading.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator


class Snippet(BaseModel):
    """
    A titled piece of text with a creation and an expiry timestamp (UTC).

    Immutable once built. `str(snippet)` is the plain-text representation
    served by GET /snippet.
    """

    id: int = Field(ge=1, description="Storage-assigned identifier")
    title: str
    content: str
    created: datetime = Field(description="Creation time (UTC)")
    expires: datetime = Field(description="Expiry time (UTC)")

    model_config = {"from_attributes": True, "frozen": True}

    @field_validator("created", "expires")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Some drivers (SQLite) hand back naive datetimes; stored values are UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    def is_live(self, now: datetime) -> bool:
        return now < self.expires

    def __str__(self) -> str:
        return (
            f"Snippet #{self.id}: {self.title}\n"
            f"Created: {self.created.isoformat()}\n"
            f"Expires: {self.expires.isoformat()}\n"
            f"\n"
            f"{self.content}\n"
        )


class SnippetForm(BaseModel):
    """
    What:  Validated body of POST /snippet/create.
    How:   Built from the url-encoded (or multipart) form; values arrive as
           strings and pydantic coerces `expires` to int.
    """

    title: str = Field(min_length=1, max_length=100)
    content: str = Field(min_length=1)
    expires: int = Field(default=7, ge=1, le=365, description="Days until expiry")

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class HealthResponse(BaseModel):
    """
    What:  Body of GET /health.
    Who:   Docker health checks and load balancers.
    """
    status: str = Field(description="healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since the app was created")
