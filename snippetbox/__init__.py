"""
Snippetbox - Application Package Initializer
=============================================

What: Marks the `snippetbox` directory as a Python package.
Who:  Used by uvicorn, Alembic, pytest and the `snippetbox` console script.

Architecture Note:
    The application is layered the same way top to bottom:

    ┌─────────────────────────────────────┐
    │        Router (ServeMux)            │  ← pattern matching, redirects
    ├─────────────────────────────────────┤
    │        Handlers (routes/)           │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Snippet store (services/)         │  ← all SQL, error translation
    ├─────────────────────────────────────┤
    │   Models & Schemas (data)           │  ← SQLAlchemy table + pydantic entity
    ├─────────────────────────────────────┤
    │   Database (connection pool)        │  ← async SQLAlchemy engine
    └─────────────────────────────────────┘

    Handlers never see SQL or driver exceptions; the store never sees HTTP.
"""

__version__ = "1.0.0"
