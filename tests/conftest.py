"""Shared test fixtures.

Provides an in-memory stand-in for the Supabase client (fluent table
queries plus storage buckets), a ``test_client`` that injects it into the
FastAPI app, and seed fixtures for a published form and an active
campaign.
"""

from __future__ import annotations

import copy
from collections.abc import Generator
from datetime import datetime, timedelta, timezone
from typing import Any, Callable
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient


# ---------------------------------------------------------------------------
# In-memory Supabase
# ---------------------------------------------------------------------------

def _as_datetime(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return value


class FakeResult:
    def __init__(self, data: list[dict[str, Any]]) -> None:
        self.data = data
        self.count = None


class FakeQuery:
    """Subset of the postgrest query builder used by the services."""

    def __init__(self, db: "FakeSupabase", table: str) -> None:
        self.db = db
        self.table_name = table
        self.op = "select"
        self.columns = "*"
        self.payload: Any = None
        self.filters: list[Callable[[dict[str, Any]], bool]] = []
        self.order_by: list[tuple[str, bool]] = []
        self.limit_n: int | None = None
        self.range_: tuple[int, int] | None = None

    def select(self, columns: str = "*", **_: Any) -> "FakeQuery":
        if self.op == "select":
            self.columns = columns
        return self

    def insert(self, payload: Any, **_: Any) -> "FakeQuery":
        self.op, self.payload = "insert", payload
        return self

    def update(self, payload: dict[str, Any], **_: Any) -> "FakeQuery":
        self.op, self.payload = "update", payload
        return self

    def delete(self, **_: Any) -> "FakeQuery":
        self.op = "delete"
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def gte(self, column: str, value: Any) -> "FakeQuery":
        bound = _as_datetime(value)
        self.filters.append(
            lambda row: row.get(column) is not None and _as_datetime(row[column]) >= bound
        )
        return self

    def order(self, column: str, desc: bool = False, **_: Any) -> "FakeQuery":
        self.order_by.append((column, desc))
        return self

    def limit(self, count: int) -> "FakeQuery":
        self.limit_n = count
        return self

    def range(self, start: int, end: int) -> "FakeQuery":
        self.range_ = (start, end)
        return self

    def _project(self, row: dict[str, Any]) -> dict[str, Any]:
        columns = self.columns.strip()
        if columns == "*" or "(" in columns:
            return copy.deepcopy(row)
        names = [c.strip() for c in columns.split(",")]
        return {name: copy.deepcopy(row.get(name)) for name in names}

    def execute(self) -> FakeResult:
        self.db.calls.append((self.table_name, self.op))
        failure = self.db.failures.get((self.table_name, self.op))
        if failure is not None:
            raise failure

        rows = self.db.tables.setdefault(self.table_name, [])

        if self.op == "insert":
            items = self.payload if isinstance(self.payload, list) else [self.payload]
            created = []
            for item in items:
                row = copy.deepcopy(item)
                stamp = self.db.next_timestamp()
                row.setdefault("id", str(uuid4()))
                row.setdefault("created_at", stamp)
                row.setdefault("updated_at", stamp)
                rows.append(row)
                created.append(copy.deepcopy(row))
            return FakeResult(created)

        matched = [row for row in rows if all(f(row) for f in self.filters)]

        if self.op == "update":
            for row in matched:
                row.update(copy.deepcopy(self.payload))
            return FakeResult([copy.deepcopy(row) for row in matched])

        if self.op == "delete":
            self.db.tables[self.table_name] = [row for row in rows if row not in matched]
            return FakeResult([copy.deepcopy(row) for row in matched])

        for column, desc in reversed(self.order_by):
            matched.sort(key=lambda row: str(row.get(column) or ""), reverse=desc)
        if self.range_ is not None:
            matched = matched[self.range_[0]:self.range_[1] + 1]
        if self.limit_n is not None:
            matched = matched[: self.limit_n]
        return FakeResult([self._project(row) for row in matched])


class FakeBucket:
    def __init__(self, storage: "FakeStorage", name: str) -> None:
        self.storage = storage
        self.name = name

    def upload(self, path: str, file: bytes, file_options: Any = None) -> dict[str, str]:
        if self.storage.fail_uploads:
            raise RuntimeError("storage unavailable")
        self.storage.objects[(self.name, path)] = file
        return {"Key": f"{self.name}/{path}"}

    def get_public_url(self, path: str) -> str:
        return f"https://storage.test/{self.name}/{path}"


class FakeStorage:
    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], bytes] = {}
        self.fail_uploads = False

    def from_(self, bucket: str) -> FakeBucket:
        return FakeBucket(self, bucket)


class FakeSupabase:
    """In-memory replacement for ``supabase.Client``."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.calls: list[tuple[str, str]] = []
        self.failures: dict[tuple[str, str], Exception] = {}
        self.storage = FakeStorage()
        self._clock = datetime(2026, 10, 1, 9, 0, tzinfo=timezone.utc)

    def next_timestamp(self) -> str:
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def fail_on(self, table: str, op: str, exc: Exception | None = None) -> None:
        self.failures[(table, op)] = exc or RuntimeError(f"{table}.{op} failed")

    def rows(self, table: str) -> list[dict[str, Any]]:
        return self.tables.get(table, [])

    def seed(self, table: str, **row: Any) -> dict[str, Any]:
        return self.table(table).insert(row).execute().data[0]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

APPLICATION_FIELDS: list[dict[str, Any]] = [
    {"id": "field_name", "type": "text", "label": "Name", "required": True},
    {"id": "field_email", "type": "email", "label": "Email", "required": True},
]


@pytest.fixture()
def fake_supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture()
def test_client(fake_supabase: FakeSupabase) -> Generator[TestClient, None, None]:
    """Provide a FastAPI TestClient wired to ``fake_supabase``."""
    from app.db.supabase import get_supabase
    from app.main import app

    app.dependency_overrides[get_supabase] = lambda: fake_supabase
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture()
def published_form(fake_supabase: FakeSupabase) -> dict[str, Any]:
    """A published form with required Name (text) and Email (email) fields."""
    return fake_supabase.seed(
        "forms",
        title="Engineer Application",
        description="Apply here",
        fields=copy.deepcopy(APPLICATION_FIELDS),
        is_published=True,
    )


@pytest.fixture()
def active_campaign(
    fake_supabase: FakeSupabase, published_form: dict[str, Any]
) -> dict[str, Any]:
    return fake_supabase.seed(
        "campaigns",
        title="Frontend Engineer",
        description="Hiring",
        status="active",
        form_id=published_form["id"],
    )
