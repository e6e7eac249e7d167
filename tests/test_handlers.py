"""
Snippetbox - HTTP Handler Tests
================================

What:  The full app (middleware, mux, handlers) driven over HTTP.
How:   `test_client` wires create_app() to the in-memory snippet store, so
       outcomes (hit, miss, storage failure) are chosen per test.

Status codes under test:
    200  home, show, static, health
    301  unclean or slash-less paths
    303  successful create
    400  invalid create form
    404  unknown path, bad id, missing/expired snippet
    405  non-POST create (with Allow: POST)
    500  storage or template failure (logged, never leaked)
"""

import logging

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.exc import SQLAlchemyError

from snippetbox.config import Settings
from snippetbox.database import session_factory
from snippetbox.main import create_app
from snippetbox.routes.snippets import MAX_ID, parse_id
from snippetbox.services.snippet_service import SnippetService


# ══════════════════════════════════════════════════════════════════════════
# Home
# ══════════════════════════════════════════════════════════════════════════

class TestHome:

    @pytest.mark.asyncio
    async def test_home_renders(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "Snippetbox" in response.text
        assert "Latest Snippets" in response.text
        assert "Powered by" in response.text

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/missing", "/snippet/", "/snippets", "/a/b/c"])
    async def test_unknown_path_404(self, test_client, path):
        response = await test_client.get(path)

        assert response.status_code == 404
        assert response.text == "Not Found"

    @pytest.mark.asyncio
    async def test_template_failure_is_500(self, tmp_path, memory_store, caplog):
        """No templates on disk: the render fails, the client gets an opaque 500."""
        config = Settings(database_url="sqlite+aiosqlite://", ui_dir=str(tmp_path))
        app = create_app(config, snippets=memory_store)

        with caplog.at_level(logging.ERROR, logger="snippetbox.error"):
            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
                response = await client.get("/")

        assert response.status_code == 500
        assert response.text == "Internal Server Error"
        assert "home.page.html" not in response.text
        assert any(r.name == "snippetbox.error" for r in caplog.records)


# ══════════════════════════════════════════════════════════════════════════
# Show snippet
# ══════════════════════════════════════════════════════════════════════════

class TestShowSnippet:

    @pytest.mark.asyncio
    async def test_show_existing(self, test_client, memory_store):
        snippet_id = await memory_store.insert("O snail", "Climb Mount Fuji,\nBut slowly, slowly!", 7)

        response = await test_client.get(f"/snippet?id={snippet_id}")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert response.text.startswith(f"Snippet #{snippet_id}: O snail\n")
        assert "Climb Mount Fuji,\nBut slowly, slowly!" in response.text

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw_id", ["", "abc", "0", "-1", "1.5", " 1", "1_0", "0x1"])
    async def test_bad_id_404(self, test_client, memory_store, raw_id):
        await memory_store.insert("Present", "So id 1 exists", 7)

        response = await test_client.get("/snippet", params={"id": raw_id})

        assert response.status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "raw_id",
        ["9223372036854775808", "100000000000000000000", "9" * 5000],
    )
    async def test_id_beyond_64_bits_404(self, test_client, raw_id):
        response = await test_client.get("/snippet", params={"id": raw_id})

        assert response.status_code == 404
        assert response.text == "Not Found"

    @pytest.mark.asyncio
    async def test_repeated_id_uses_first_value(self, test_client, memory_store):
        snippet_id = await memory_store.insert("First wins", "body", 7)

        response = await test_client.get(f"/snippet?id={snippet_id}&id=x")

        assert response.status_code == 200
        assert "First wins" in response.text

    @pytest.mark.asyncio
    async def test_missing_id_param_404(self, test_client):
        response = await test_client.get("/snippet")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_snippet_404(self, test_client):
        response = await test_client.get("/snippet?id=42")

        assert response.status_code == 404
        assert response.text == "Not Found"

    @pytest.mark.asyncio
    async def test_storage_failure_500(self, test_client, memory_store, caplog):
        memory_store.failing = True

        with caplog.at_level(logging.ERROR, logger="snippetbox.error"):
            response = await test_client.get("/snippet?id=1")

        assert response.status_code == 500
        assert response.text == "Internal Server Error"
        # Driver detail stays server-side
        assert "connection refused" not in response.text
        errors = [r for r in caplog.records if r.name == "snippetbox.error"]
        assert errors
        assert "connection refused" in errors[0].getMessage()
        assert errors[0].exc_info is not None


# ══════════════════════════════════════════════════════════════════════════
# Create snippet
# ══════════════════════════════════════════════════════════════════════════

class TestCreateSnippet:

    @pytest.mark.asyncio
    async def test_create_then_show(self, test_client):
        form = {"title": "O snail", "content": "Climb Mount Fuji", "expires": "7"}

        created = await test_client.post("/snippet/create", data=form)

        assert created.status_code == 303
        assert created.headers["location"] == "/snippet?id=1"

        shown = await test_client.get(created.headers["location"])
        assert shown.status_code == 200
        assert "O snail" in shown.text
        assert "Climb Mount Fuji" in shown.text

    @pytest.mark.asyncio
    async def test_expires_defaults_to_seven_days(self, test_client, memory_store):
        response = await test_client.post(
            "/snippet/create", data={"title": "Default", "content": "No expiry given"}
        )

        assert response.status_code == 303
        stored = memory_store.rows[1]
        assert (stored.expires - stored.created).days == 7

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE", "PATCH"])
    async def test_non_post_405(self, test_client, method):
        response = await test_client.request(method, "/snippet/create")

        assert response.status_code == 405
        assert response.headers["allow"] == "POST"
        assert response.text == "Method Not Allowed"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "form",
        [
            {"title": "", "content": "x"},
            {"title": "   ", "content": "x"},
            {"title": "t" * 101, "content": "x"},
            {"title": "t"},
            {"title": "t", "content": "x", "expires": "abc"},
            {"title": "t", "content": "x", "expires": "0"},
            {"title": "t", "content": "x", "expires": "366"},
        ],
    )
    async def test_invalid_form_400(self, test_client, memory_store, form):
        response = await test_client.post("/snippet/create", data=form)

        assert response.status_code == 400
        assert response.text == "Bad Request"
        assert memory_store.rows == {}

    @pytest.mark.asyncio
    async def test_storage_failure_on_create_500(self, test_client, memory_store):
        memory_store.failing = True

        response = await test_client.post("/snippet/create", data={"title": "t", "content": "c"})

        assert response.status_code == 500
        assert response.text == "Internal Server Error"

    @pytest.mark.asyncio
    async def test_unclean_create_path_redirects(self, test_client):
        response = await test_client.post("/snippet//create", data={"title": "t", "content": "c"})

        assert response.status_code == 301
        assert response.headers["location"] == "/snippet/create"


# ══════════════════════════════════════════════════════════════════════════
# Full request path on real SQL
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def sql_client(test_settings, sqlite_engine):
    """The app wired to SnippetService over the in-memory SQLite engine."""
    app = create_app(test_settings, snippets=SnippetService(session_factory(sqlite_engine)))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


class TestWithSqlStore:

    @pytest.mark.asyncio
    async def test_create_then_show(self, sql_client):
        form = {"title": "O snail", "content": "Climb Mount Fuji,\nBut slowly, slowly!", "expires": "7"}

        created = await sql_client.post("/snippet/create", data=form)

        assert created.status_code == 303
        assert created.headers["location"] == "/snippet?id=1"

        shown = await sql_client.get(created.headers["location"])
        assert shown.status_code == 200
        assert shown.text.startswith("Snippet #1: O snail\n")
        assert "Climb Mount Fuji,\nBut slowly, slowly!" in shown.text

    @pytest.mark.asyncio
    async def test_unknown_id_404(self, sql_client):
        response = await sql_client.get("/snippet?id=7")
        assert response.status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw_id", ["100000000000000000000", "9" * 5000])
    async def test_id_beyond_64_bits_404(self, sql_client, raw_id):
        """Oversized ids never reach the driver, which would reject them."""
        response = await sql_client.get("/snippet", params={"id": raw_id})

        assert response.status_code == 404


class TestParseId:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("1", 1),
            ("+7", 7),
            ("-3", -3),
            (str(MAX_ID), MAX_ID),
            (str(MAX_ID + 1), 0),
            ("9" * 5000, 0),
            ("abc", 0),
        ],
    )
    def test_parse_id(self, raw, expected):
        assert parse_id(raw) == expected


# ══════════════════════════════════════════════════════════════════════════
# Static files
# ══════════════════════════════════════════════════════════════════════════

class TestStatic:

    @pytest.mark.asyncio
    async def test_stylesheet_served(self, test_client):
        response = await test_client.get("/static/css/main.css")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/css")

    @pytest.mark.asyncio
    async def test_prefix_without_slash_redirects(self, test_client):
        response = await test_client.get("/static")

        assert response.status_code == 301
        assert response.headers["location"] == "/static/"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/static/", "/static/css/", "/static/css/missing.css"])
    async def test_directories_and_missing_files_404(self, test_client, path):
        response = await test_client.get(path)
        assert response.status_code == 404


# ══════════════════════════════════════════════════════════════════════════
# Health, middleware and lifespan
# ══════════════════════════════════════════════════════════════════════════

class TestHealth:

    @pytest.mark.asyncio
    async def test_health_without_engine(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "not_configured"
        assert "version" in body

    @pytest.mark.asyncio
    async def test_health_with_database(self, test_settings):
        app = create_app(test_settings)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"
        await app.state.deps.engine.dispose()

    @pytest.mark.asyncio
    async def test_health_with_unreachable_database(self):
        config = Settings(database_url="sqlite+aiosqlite:////nonexistent/dir/snippetbox.db")
        app = create_app(config)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
        assert response.json()["database"] == "disconnected"
        await app.state.deps.engine.dispose()


class TestMiddleware:

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/")
        assert len(response.headers["x-request-id"]) == 8

    @pytest.mark.asyncio
    async def test_request_id_propagated(self, test_client):
        response = await test_client.get("/missing", headers={"X-Request-ID": "abc123"})
        assert response.headers["x-request-id"] == "abc123"


class TestLifespan:

    @pytest.mark.asyncio
    async def test_startup_fails_when_database_unreachable(self):
        config = Settings(
            database_url="sqlite+aiosqlite:////nonexistent/dir/snippetbox.db",
            log_level="WARNING",
        )
        app = create_app(config)

        with pytest.raises(SQLAlchemyError):
            async with app.router.lifespan_context(app):
                pass

    @pytest.mark.asyncio
    async def test_startup_and_shutdown_with_reachable_database(self, test_settings):
        app = create_app(test_settings)

        async with app.router.lifespan_context(app):
            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
                response = await client.get("/health")
            assert response.json()["database"] == "connected"
