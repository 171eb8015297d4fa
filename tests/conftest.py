"""
Shared fixtures: an in-memory stand-in for the Supabase client covering the
query-builder calls the services make, plus a TestClient wired to it.
"""

import copy
import uuid
from datetime import datetime, timezone

import pytest
from postgrest.exceptions import APIError

USER_ID = "11111111-1111-1111-1111-111111111111"
OTHER_USER_ID = "22222222-2222-2222-2222-222222222222"


def api_error(message, code=None):
    return APIError({"message": message, "code": code, "hint": None, "details": None})


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = None
        self.payload = None
        self.filters = []
        self.order_by = None
        self.limit_n = None
        self.offset_n = 0
        self.single_mode = None

    # builders
    def select(self, *columns, **kwargs):
        self.op = self.op or "select"
        return self

    def insert(self, payload, **kwargs):
        self.op, self.payload = "insert", payload
        return self

    def update(self, payload, **kwargs):
        self.op, self.payload = "update", payload
        return self

    def delete(self, **kwargs):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def offset(self, n):
        self.offset_n = n
        return self

    def maybe_single(self):
        self.single_mode = "maybe"
        return self

    def single(self):
        self.single_mode = "single"
        return self

    def _matches(self, row):
        return all(f(row) for f in self.filters)

    def execute(self):
        self.db.calls.append((self.table, self.op))
        error = self.db.errors.get((self.table, self.op)) or self.db.errors.get((self.table, "*"))
        if error is not None:
            raise error
        if self.table in self.db.missing_tables:
            raise api_error(f'relation "public.{self.table}" does not exist', "42P01")

        rows = self.db.tables.setdefault(self.table, [])
        if self.op == "insert":
            return FakeResponse(self._insert(rows))
        if self.op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(copy.deepcopy(self.payload))
                    updated.append(copy.deepcopy(row))
            return FakeResponse(updated)
        if self.op == "delete":
            removed = [r for r in rows if self._matches(r)]
            self.db.tables[self.table] = [r for r in rows if not self._matches(r)]
            return FakeResponse(removed)

        result = [copy.deepcopy(r) for r in rows if self._matches(r)]
        if self.order_by:
            column, desc = self.order_by
            result.sort(key=lambda r: str(r.get(column) or ""), reverse=desc)
        result = result[self.offset_n:]
        if self.limit_n is not None:
            result = result[:self.limit_n]
        if self.single_mode == "maybe":
            return FakeResponse(result[0] if result else None)
        if self.single_mode == "single":
            if len(result) != 1:
                raise api_error("JSON object requested, multiple (or no) rows returned", "PGRST116")
            return FakeResponse(result[0])
        return FakeResponse(result)

    def _insert(self, rows):
        items = self.payload if isinstance(self.payload, list) else [self.payload]
        created = []
        for item in items:
            row = copy.deepcopy(item)
            for column in self.db.unique.get(self.table, ()):
                if any(r.get(column) == row.get(column) for r in rows):
                    raise api_error(f"duplicate key value violates unique constraint on {column}", "23505")
            row.setdefault("id", str(uuid.uuid4()))
            row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
            rows.append(row)
            created.append(copy.deepcopy(row))
        return created


class FakeRpc:
    def __init__(self, db, name, params):
        self.db = db
        self.name = name
        self.params = params

    def execute(self):
        self.db.rpc_calls.append((self.name, self.params))
        if self.db.rpc_handler:
            self.db.rpc_handler(self.name, self.params)
        return FakeResponse(None)


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.errors = {}
        self.missing_tables = set()
        self.unique = {"invitations": ("slug",)}
        self.calls = []
        self.rpc_calls = []
        self.rpc_handler = None

    def table(self, name):
        return FakeQuery(self, name)

    def rpc(self, name, params=None):
        return FakeRpc(self, name, params or {})

    def fail(self, table, op, error):
        self.errors[(table, op)] = error


@pytest.fixture
def fake_db():
    return FakeSupabase()


@pytest.fixture
def local_store(tmp_path):
    from taklifnoma.modules.templates.local_store import LocalTemplateStore
    return LocalTemplateStore(str(tmp_path / "local"))


@pytest.fixture
def client(fake_db, local_store):
    from fastapi.testclient import TestClient
    from taklifnoma.main import app
    from taklifnoma.core.dependencies import get_current_user_id, get_user_supabase
    from taklifnoma.database.supabase_client import get_supabase, get_service_supabase
    from taklifnoma.modules.templates.routes import get_local_store

    app.dependency_overrides[get_current_user_id] = lambda: {"id": USER_ID, "email": "couple@example.com"}
    app.dependency_overrides[get_user_supabase] = lambda: fake_db
    app.dependency_overrides[get_supabase] = lambda: fake_db
    app.dependency_overrides[get_service_supabase] = lambda: fake_db
    app.dependency_overrides[get_local_store] = lambda: local_store
    yield TestClient(app)
    app.dependency_overrides.clear()
