"""
Shared test fixtures.
"""

import sys
from pathlib import Path

# Add project directory to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

import pytest
from contextlib import ExitStack, contextmanager
from unittest.mock import MagicMock, patch
from datetime import datetime, timezone
from typing import Generator

from tests.factories import ProductFactory


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _resolve_now(row: dict) -> dict:
    """Stand in for Postgres resolving the 'now' timestamp input."""
    return {k: (_now_iso() if v == "now" else v) for k, v in row.items()}


# ===================
# MOCK SUPABASE CLIENT
# ===================

class MockSupabaseResponse:
    """Mock Supabase query response."""

    def __init__(self, data=None, count: int = None):
        self.data = data if data is not None else []
        self.count = count if count is not None else len(self.data)


class MockSupabaseQuery:
    """
    Mock Supabase query builder with chainable methods.

    Filters are accepted but not applied; configure the table data to
    be what the query should return.
    """

    def __init__(self, client, table: str, data: list = None, count: int = None):
        self._client = client
        self._table = table
        self._data = data or []
        self._count = count
        self._operation = "select"

    def select(self, *args, **kwargs):
        return self

    def insert(self, data):
        self._operation = "insert"
        rows = [data] if isinstance(data, dict) else list(data)
        self._client.record(self._table, "insert", rows)
        self._data = [{"id": "test-uuid-123", **_resolve_now(row)} for row in rows]
        return self

    def upsert(self, data, on_conflict: str = "id", **kwargs):
        self._operation = "upsert"
        rows = [data] if isinstance(data, dict) else list(data)
        self._client.record(self._table, "upsert", rows, on_conflict=on_conflict)
        self._data = [_resolve_now(row) for row in rows]
        return self

    def update(self, data):
        self._operation = "update"
        self._client.record(self._table, "update", data)
        # Simulate update - merge with existing data
        self._data = [{**item, **_resolve_now(data)} for item in self._data]
        return self

    def delete(self):
        self._operation = "delete"
        return self

    def eq(self, column, value):
        return self

    def neq(self, column, value):
        return self

    def in_(self, column, values):
        return self

    def order(self, column, **kwargs):
        return self

    def range(self, start, end):
        return self

    def limit(self, count):
        return self

    def execute(self) -> MockSupabaseResponse:
        error = self._client.failures.get((self._table, self._operation))
        if error is not None:
            raise error
        return MockSupabaseResponse(
            data=self._data,
            count=self._count if self._count is not None else len(self._data)
        )


class MockSupabaseClient:
    """
    Mock Supabase client.

    Records every write in `calls` as (table, operation, payload) and
    can be told to fail a given (table, operation).
    """

    def __init__(self):
        self._tables = {}
        self.calls = []
        self.failures = {}
        self.auth = MagicMock()

    def set_table_data(self, table_name: str, data: list, count: int = None):
        """Configure mock data for a table."""
        self._tables[table_name] = {"data": data, "count": count}

    def fail(self, table_name: str, operation: str, error: Exception):
        """Make `operation` on `table_name` raise `error` on execute."""
        self.failures[(table_name, operation)] = error

    def record(self, table: str, operation: str, payload, **kwargs):
        self.calls.append((table, operation, payload))

    def writes(self, table: str, operation: str) -> list:
        return [payload for t, op, payload in self.calls if t == table and op == operation]

    def table(self, name: str) -> MockSupabaseQuery:
        config = self._tables.get(name, {"data": [], "count": None})
        return MockSupabaseQuery(self, name, [dict(r) for r in config["data"]], config["count"])


# ===================
# FIXTURES
# ===================

CLIENT_FACTORIES = (
    "config.database.get_supabase_client",
    "services.product_service.get_supabase_client",
    "services.cart_service.get_supabase_client",
    "services.order_service.get_supabase_client",
)


@contextmanager
def patch_clients(client):
    """Point every module-level client factory at `client`."""
    with ExitStack() as stack:
        for target in CLIENT_FACTORIES:
            stack.enter_context(patch(target, return_value=client))
        yield client


@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Create a mock Supabase client.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("products", [
                {"id": "baby-feeder", "name": "Baby Feeder", ...}
            ])
    """
    return MockSupabaseClient()


@pytest.fixture
def mock_db(mock_supabase) -> Generator:
    """
    Patch the database client with mock.

    Usage:
        def test_something(mock_db, mock_supabase):
            mock_supabase.set_table_data("products", [...])
            # Now any code using get_supabase_client() gets the mock
    """
    with patch_clients(mock_supabase):
        yield mock_supabase


@pytest.fixture
def store_configured(monkeypatch):
    """Settings with both required Supabase values present."""
    from config import settings
    monkeypatch.setattr(settings, "supabase_url", "https://abcd.supabase.co")
    monkeypatch.setattr(settings, "supabase_key", "anon-key")
    monkeypatch.setattr(settings, "supabase_service_key", None)
    return settings


@pytest.fixture
def store_unconfigured(monkeypatch):
    """Settings with neither required Supabase value."""
    from config import settings
    monkeypatch.setattr(settings, "supabase_url", None)
    monkeypatch.setattr(settings, "supabase_key", None)
    monkeypatch.setattr(settings, "supabase_service_key", None)
    return settings


@pytest.fixture
def sample_product_data() -> dict:
    """Sample product row for testing."""
    return ProductFactory.create(
        id="baby-feeder",
        name="Baby Feeder",
        category="Feeders",
        variants=[
            ProductFactory.variant(id="default", sku="FEED-BABY", stock_quantity=300)
        ],
    )


@pytest.fixture
def sample_products_list() -> list:
    """Sample list of product rows for testing."""
    return [
        ProductFactory.create(id="baby-feeder", name="Baby Feeder", category="Feeders"),
        ProductFactory.create(id="drinker-3l", name="3L Drinker", category="Drinkers"),
        ProductFactory.create(
            id="layers",
            name="Layers",
            category="Chickens",
            variants=[
                ProductFactory.variant(id="day-old", name="Day old", stock_quantity=0),
                ProductFactory.variant(id="1-week", name="1 week", stock_quantity=5),
            ],
        ),
    ]


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client_with_mock_db(mock_supabase):
    """
    Create FastAPI test client with mocked database.

    Usage:
        def test_endpoint(test_client_with_mock_db, mock_supabase):
            mock_supabase.set_table_data("products", [...])
            response = test_client_with_mock_db.get("/api/products")
    """
    from fastapi.testclient import TestClient
    from main import app
    from routes.dependencies import get_auth_service
    from services.auth_service import AttemptLimiter, AuthService
    import services.cart_service as cart_service
    import services.order_service as order_service
    import services.product_service as product_service

    def reset_singletons():
        product_service._product_service = None
        cart_service._cart_service = None
        order_service._order_service = None

    reset_singletons()
    app.dependency_overrides[get_auth_service] = lambda: AuthService(
        client=mock_supabase, limiter=AttemptLimiter()
    )
    with patch_clients(mock_supabase):
        yield TestClient(app)
    app.dependency_overrides.clear()
    reset_singletons()
