"""
Shared fixtures.

FakeSupabase mimics the slice of the supabase-py client the app uses:
table(...).select/insert/update/delete with eq/in_/gte/lte/order/single,
embedded selects such as "project_id, projects(*)", and the auth calls
sign_up / sign_in_with_password / get_user plus admin.sign_out / admin.delete_user.
One fake stands in for the data, auth and service clients. Rows live in plain
dicts so tests can inspect them directly.
"""

from __future__ import annotations

import asyncio
import itertools
import time
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import httpx
import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from app.main import app, limiter
from app.core import inflight
from app.database.supabase_client import get_supabase, get_auth_supabase, get_service_supabase
from app.modules.auth.service import clear_auth_cache

UNIQUE_COLUMNS = {
    "roles": ["name"],
    "users": ["username"],
}

_BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


def no_rows_error() -> APIError:
    return APIError({
        "code": "PGRST116",
        "message": "JSON object requested, multiple (or no) rows returned",
        "details": "The result contains 0 rows",
        "hint": None,
    })


def backend_failure(message: str = "connection reset by peer", code: str = "08006") -> APIError:
    return APIError({"code": code, "message": message, "details": None, "hint": None})


def _split_top_level(select: str):
    parts, depth, current = [], 0, ""
    for ch in select:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        if ch == "," and depth == 0:
            parts.append(current.strip())
            current = ""
        else:
            current += ch
    if current.strip():
        parts.append(current.strip())
    return parts


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.operation = "select"
        self.columns = "*"
        self.payload = None
        self.filters = []
        self.orders = []
        self.want_single = False

    # builders
    def select(self, columns: str = "*"):
        if self.operation == "select":
            self.columns = columns
        return self

    def insert(self, data):
        self.operation = "insert"
        self.payload = data
        return self

    def update(self, data):
        self.operation = "update"
        self.payload = data
        return self

    def delete(self):
        self.operation = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def gte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) >= value)
        return self

    def lte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) <= value)
        return self

    def order(self, column, desc=False):
        self.orders.append((column, desc))
        return self

    def single(self):
        self.want_single = True
        return self

    # execution
    def _matching(self):
        return [row for row in self.db.tables[self.table_name] if all(f(row) for f in self.filters)]

    def _embed(self, row, token):
        name, inner = token.split("(", 1)
        inner = inner.rstrip(")")
        fk = name[:-1] + "_id"
        target = next((r for r in self.db.tables.get(name, []) if r["id"] == row.get(fk)), None)
        if target is None:
            return None
        return self._project(target, inner)

    def _project(self, row, columns):
        out = {}
        for token in _split_top_level(columns):
            if "(" in token:
                out[token.split("(", 1)[0]] = self._embed(row, token)
            elif token == "*":
                out.update(row)
            else:
                out[token] = row.get(token)
        return out

    def _check_unique(self, row):
        for column in UNIQUE_COLUMNS.get(self.table_name, []):
            value = row.get(column)
            if value is None:
                continue
            if any(r.get(column) == value for r in self.db.tables[self.table_name]):
                raise APIError({
                    "code": "23505",
                    "message": f'duplicate key value violates unique constraint "{self.table_name}_{column}_key"',
                    "details": None,
                    "hint": None,
                })

    def execute(self):
        self.db.calls.append((self.table_name, self.operation))
        delay = self.db.delays.get((self.table_name, self.operation))
        if delay:
            time.sleep(delay)
        failure = self.db.pop_failure(self.table_name, self.operation)
        if failure is not None:
            raise failure

        if self.operation == "insert":
            rows = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for data in rows:
                row = dict(data)
                row.setdefault("id", str(uuid.uuid4()))
                stamp = self.db.next_timestamp()
                row.setdefault("created_at", stamp)
                row.setdefault("updated_at", stamp)
                self._check_unique(row)
                self.db.tables[self.table_name].append(row)
                inserted.append(dict(row))
            return SimpleNamespace(data=inserted)

        if self.operation == "update":
            updated = []
            for row in self._matching():
                row.update(self.payload)
                updated.append(dict(row))
            return SimpleNamespace(data=updated)

        if self.operation == "delete":
            doomed = self._matching()
            self.db.tables[self.table_name] = [r for r in self.db.tables[self.table_name] if r not in doomed]
            return SimpleNamespace(data=[dict(r) for r in doomed])

        rows = self._matching()
        for column, desc in reversed(self.orders):
            rows = sorted(rows, key=lambda r: (r.get(column) is None, r.get(column) or ""), reverse=desc)
        data = [self._project(row, self.columns) for row in rows]
        if self.want_single:
            if len(data) != 1:
                raise no_rows_error()
            return SimpleNamespace(data=data[0])
        return SimpleNamespace(data=data)


class FakeAuth:
    def __init__(self):
        self.accounts = {}
        self.tokens = {}
        self.admin = FakeAuthAdmin(self)
        self.get_user_calls = 0
        self._counter = itertools.count(1)

    def _user(self, account):
        return SimpleNamespace(
            id=account["id"],
            email=account["email"],
            user_metadata=account["user_metadata"],
            app_metadata={},
            created_at="2026-01-01T00:00:00+00:00",
            updated_at=None,
        )

    def sign_up(self, credentials):
        email = credentials["email"]
        if email in self.accounts:
            raise Exception("User already registered")
        account = {
            "id": str(uuid.uuid4()),
            "email": email,
            "password": credentials["password"],
            "user_metadata": credentials.get("options", {}).get("data", {}),
        }
        self.accounts[email] = account
        return SimpleNamespace(user=self._user(account), session=None)

    def sign_in_with_password(self, credentials):
        account = self.accounts.get(credentials["email"])
        if account is None or account["password"] != credentials["password"]:
            raise Exception("Invalid login credentials")
        token = f"token-{next(self._counter)}"
        self.tokens[token] = account
        return SimpleNamespace(user=self._user(account), session=SimpleNamespace(access_token=token))

    def get_user(self, jwt=None):
        self.get_user_calls += 1
        account = self.tokens.get(jwt)
        if account is None:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=self._user(account))


class FakeAuthAdmin:
    def __init__(self, auth: FakeAuth):
        self._auth = auth
        self.sign_out_calls = 0
        self.deleted_users = []

    def sign_out(self, jwt, scope="global"):
        """Revoke every session of the token's user, like GoTrue's global scope."""
        self.sign_out_calls += 1
        account = self._auth.tokens.get(jwt)
        if account is None:
            raise Exception("invalid JWT: unable to parse or verify signature")
        for token, owner in list(self._auth.tokens.items()):
            if owner is account:
                del self._auth.tokens[token]

    def delete_user(self, id, should_soft_delete=False):
        self.deleted_users.append(id)
        for email, account in list(self._auth.accounts.items()):
            if account["id"] == id:
                del self._auth.accounts[email]


class FakeSupabase:
    def __init__(self):
        self.tables = {name: [] for name in ("users", "roles", "projects", "user_roles", "workboards", "tasks")}
        self.auth = FakeAuth()
        self.calls = []
        self._failures = []
        self.delays = {}
        self._clock = itertools.count(1)

    def table(self, name):
        self.tables.setdefault(name, [])
        return FakeQuery(self, name)

    def next_timestamp(self) -> str:
        return (_BASE_TIME + timedelta(seconds=next(self._clock))).isoformat()

    def fail_next(self, table, operation, error=None):
        """Make the next `operation` on `table` raise error (a backend failure by default)."""
        self._failures.append((table, operation, error or backend_failure()))

    def slow_down(self, table, operation, seconds):
        """Make every `operation` on `table` take at least `seconds`."""
        self.delays[(table, operation)] = seconds

    def pop_failure(self, table, operation):
        for i, (t, op, error) in enumerate(self._failures):
            if t == table and op == operation:
                del self._failures[i]
                return error
        return None

    def count(self, table, operation):
        return sum(1 for call in self.calls if call == (table, operation))

    def add_role(self, name):
        return self.table("roles").insert({"name": name, "description": None}).execute().data[0]


@pytest.fixture
def fake_supabase():
    fake = FakeSupabase()
    for name in ("admin", "member", "viewer"):
        fake.add_role(name)
    return fake


@pytest.fixture
def client(fake_supabase):
    clear_auth_cache()
    inflight.clear()
    limiter.reset()
    for dependency in (get_supabase, get_auth_supabase, get_service_supabase):
        app.dependency_overrides[dependency] = lambda: fake_supabase
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        clear_auth_cache()
        inflight.clear()
        limiter.reset()


def send_concurrently(*requests):
    """Send (method, url, kwargs) requests to the app at the same time; responses come back in order."""
    async def _send():
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
            return await asyncio.gather(*(http.request(method, url, **kwargs) for method, url, kwargs in requests))
    return asyncio.run(_send())


def register_and_login(client, email, password="s3cret-pass", full_name=None, username=None):
    """Register through the API and return (user_id, auth headers)."""
    body = {"email": email, "password": password}
    if full_name:
        body["full_name"] = full_name
    if username:
        body["username"] = username
    response = client.post("/api/v1/auth/register", json=body)
    assert response.status_code == 201, response.text
    login = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert login.status_code == 200, login.text
    token = login.json()["access_token"]
    return response.json()["user_id"], {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice(client):
    return register_and_login(client, "alice@example.com", full_name="Alice", username="alice")


@pytest.fixture
def bob(client):
    return register_and_login(client, "bob@example.com", full_name="Bob", username="bob")
