# tests/conftest.py
import os
from types import SimpleNamespace
from unittest.mock import Mock

import pytest

# Settings are read at import time, so the environment has to be ready first
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "ERROR")
os.environ.setdefault("APP_URL", "https://cognovain.vercel.app")
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")
os.environ.setdefault("SUPABASE_URL", "https://example.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("AUTH_JWT_KEY", "test-secret")
os.environ.setdefault("AUTH_JWT_ALGORITHMS", '["HS256"]')

from jose import jwt  # noqa: E402

from cognovain.services.history_store import HistoryStore  # noqa: E402
from cognovain.services.llm_service import LLMService  # noqa: E402
from cognovain.services.supabase_clients import SupabaseClients  # noqa: E402


class FakeQuery:
    """Chainable stand-in for a supabase-py table query."""
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self._op = None
        self._row = None
        self._filters = []
        self._order = None
        self._range = None

    def insert(self, row):
        self._op = "insert"
        self._row = dict(row)
        return self

    def select(self, columns="*"):
        self._op = "select"
        return self

    def eq(self, column, value):
        self._filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self._order = (column, desc)
        return self

    def range(self, start, end):
        self._range = (start, end)
        return self

    def execute(self):
        self.db.executed.append(self._op)
        if self.db.fail:
            raise RuntimeError("connection refused")

        rows = self.db.tables.setdefault(self.table_name, [])
        if self._op == "insert":
            rows.append(self._row)
            return SimpleNamespace(data=[dict(self._row)])

        result = [
            dict(row) for row in rows
            if all(row.get(column) == value for column, value in self._filters)
        ]
        if self._order:
            column, desc = self._order
            result.sort(key=lambda row: row[column], reverse=desc)
        if self._range:
            start, end = self._range
            result = result[start:end + 1]
        return SimpleNamespace(data=result)


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.fail = False
        self.executed = []

    def table(self, name):
        return FakeQuery(self, name)


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def supabase_clients(fake_supabase):
    return SupabaseClients(
        url="https://example.supabase.co",
        service_role_key="service-role",
        anon_key="anon",
        client_factory=lambda url, key, options=None: fake_supabase,
    )


@pytest.fixture
def history_store(supabase_clients):
    return HistoryStore(supabase_clients, table="analysis_history")


async def no_sleep(delay):
    return None


@pytest.fixture
def gemini_model():
    model = Mock()
    model.generate_content = Mock(return_value=SimpleNamespace(
        text="Analysis:\n• 🧠 This is catastrophizing\n\nReframed Statement:\n• ✅ One setback is not the whole story"
    ))
    return model


@pytest.fixture
def llm_service(gemini_model):
    return LLMService(model=gemini_model, max_retries=3, base_delay=1.0, sleep=no_sleep)


@pytest.fixture
def make_token():
    def _make(subject="user_2abc123def456"):
        return jwt.encode({"sub": subject}, "test-secret", algorithm="HS256")
    return _make


@pytest.fixture
def auth_headers(make_token):
    return {"Authorization": f"Bearer {make_token()}"}
