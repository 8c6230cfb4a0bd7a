# ==============================================================================
# CONFTEST - Pytest Fixtures and Configuration
# ==============================================================================
# Shared fixtures for all tests
# ==============================================================================

from __future__ import annotations

import json
import os
from typing import Any, AsyncGenerator, Callable, Dict, List

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment before importing the package
os.environ["ENVIRONMENT"] = "development"
os.environ["DEBUG"] = "false"
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_ANON_KEY"] = ""
os.environ["LOCAL_STORE_URL"] = "memory://"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-32chars!"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from smartcow.core.security import create_access_token  # noqa: E402
from smartcow.core.settings import RemoteBackend, RemoteConfig  # noqa: E402
from smartcow.database.factory import StoreFactory  # noqa: E402
from smartcow.database.local_store import MemoryMedium  # noqa: E402
from smartcow.services.facade import SyncFacade  # noqa: E402


# ==============================================================================
# POSTGREST FAKE
# ==============================================================================

def _encode(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


class FakePostgrest:
    """
    In-memory stand-in for a hosted PostgREST endpoint.

    Understands the subset the REST adapter speaks: ``eq.``/``is.null``
    filters, ``order``, ``limit``, ``Prefer: return=representation`` and
    ``on_conflict`` upserts. Set ``down`` to answer every call with 503, or
    ``failing_posts`` to answer that many inserts with 503.
    """

    def __init__(self) -> None:
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.requests: List[httpx.Request] = []
        self.down = False
        self.failing_posts = 0

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.setdefault(table, [])

    @staticmethod
    def _matches(row: Dict[str, Any], filters: Dict[str, str]) -> bool:
        for column, expression in filters.items():
            operator, _, expected = expression.partition(".")
            if operator == "is" and expected == "null":
                if row.get(column) is not None:
                    return False
            elif operator == "eq":
                if _encode(row.get(column)) != expected:
                    return False
            else:
                return False
        return True

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.down:
            return httpx.Response(503, json={"message": "unavailable"})

        path = request.url.path
        if path.rstrip("/").endswith("/rest/v1"):
            return httpx.Response(200, json={})
        if request.method == "POST" and self.failing_posts > 0:
            self.failing_posts -= 1
            return httpx.Response(503, json={"message": "unavailable"})
        table = path.rsplit("/", 1)[-1]
        params = dict(request.url.params)
        order = params.pop("order", None)
        limit = params.pop("limit", None)
        params.pop("select", None)
        on_conflict = params.pop("on_conflict", None)
        rows = self.rows(table)

        if request.method == "GET":
            found = [dict(r) for r in rows if self._matches(r, params)]
            if order:
                column, _, direction = order.partition(".")
                found.sort(key=lambda r: _encode(r.get(column)), reverse=direction == "desc")
            if limit is not None:
                found = found[: int(limit)]
            return httpx.Response(200, json=found)

        if request.method == "POST":
            row = json.loads(request.content)
            if on_conflict:
                keys = on_conflict.split(",")
                for existing in rows:
                    if all(existing.get(k) == row.get(k) for k in keys):
                        existing.update(row)
                        return httpx.Response(201, json=[dict(existing)])
            elif any(r.get("id") == row.get("id") for r in rows):
                return httpx.Response(409, json={"message": "duplicate key"})
            rows.append(dict(row))
            return httpx.Response(201, json=[dict(row)])

        if request.method == "PATCH":
            values = json.loads(request.content)
            changed = []
            for existing in rows:
                if self._matches(existing, params):
                    existing.update(values)
                    changed.append(dict(existing))
            return httpx.Response(200, json=changed)

        if request.method == "DELETE":
            removed = [dict(r) for r in rows if self._matches(r, params)]
            self.tables[table] = [r for r in rows if not self._matches(r, params)]
            return httpx.Response(200, json=removed)

        return httpx.Response(405)


# ==============================================================================
# FACADE FIXTURES
# ==============================================================================

@pytest.fixture
def medium() -> MemoryMedium:
    """Shared in-memory storage medium."""
    return MemoryMedium()


@pytest_asyncio.fixture
async def facade(medium: MemoryMedium) -> AsyncGenerator[SyncFacade, None]:
    """Local-only facade."""
    built = await StoreFactory.build(RemoteConfig.disabled(), medium=medium)
    yield built
    await built.close()


@pytest_asyncio.fixture
async def sibling(medium: MemoryMedium) -> AsyncGenerator[SyncFacade, None]:
    """Second local-only facade on the same medium (another tab)."""
    built = await StoreFactory.build(RemoteConfig.disabled(), medium=medium)
    yield built
    await built.close()


@pytest.fixture
def sql_config(tmp_path) -> RemoteConfig:
    return RemoteConfig(
        url="https://project.remote.test",
        anon_key="anon-key",
        backend=RemoteBackend.SQL,
        database_url=f"sqlite:///{tmp_path / 'remote.db'}",
    )


@pytest_asyncio.fixture
async def sql_facade(sql_config: RemoteConfig) -> AsyncGenerator[SyncFacade, None]:
    """Facade backed by a SQL remote store on a temporary SQLite file."""
    built = await StoreFactory.build(sql_config, medium=MemoryMedium())
    yield built
    await built.close()


@pytest.fixture
def postgrest() -> FakePostgrest:
    return FakePostgrest()


@pytest.fixture
def rest_config() -> RemoteConfig:
    return RemoteConfig(url="https://project.supabase.test", anon_key="anon-key")


@pytest_asyncio.fixture
async def rest_facade(
    postgrest: FakePostgrest,
    rest_config: RemoteConfig,
) -> AsyncGenerator[SyncFacade, None]:
    """Facade backed by the REST adapter talking to the PostgREST fake."""
    built = await StoreFactory.build(
        rest_config,
        medium=MemoryMedium(),
        transport=httpx.MockTransport(postgrest.handle),
    )
    yield built
    await built.close()


# ==============================================================================
# HTTP CLIENT FIXTURES
# ==============================================================================

@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing (local-only storage)."""
    StoreFactory.reset()

    from smartcow.main import app

    await StoreFactory.initialize(RemoteConfig.disabled())

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        timeout=30.0,
    ) as async_client:
        yield async_client

    await StoreFactory.shutdown()
    StoreFactory.reset()


@pytest.fixture
def auth_headers() -> Callable[[str], Dict[str, str]]:
    """Build a bearer header for a role-qualified identity."""

    def build(identity: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(identity)}"}

    return build


# ==============================================================================
# HELPER FIXTURES
# ==============================================================================

@pytest.fixture
def sample_product_data() -> dict:
    return {
        "name": "Compost A",
        "price": 50000,
        "stock": 10,
        "status": "active",
    }


@pytest.fixture
def sample_article_data() -> dict:
    return {
        "title": "Composting cow manure",
        "category": "compost",
        "content": "Turn the pile every week.",
    }
