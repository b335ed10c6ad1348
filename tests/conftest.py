"""
Pytest configuration and fixtures.

FakeSupabase mimics the slice of the supabase-py query builder the service uses
(table().select/insert/update/delete().eq/in_/order/limit().execute()) over
in-memory tables, enforcing the same unique keys as the real schema.
"""

import itertools
from collections import defaultdict
from types import SimpleNamespace
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from access_control.modules.auth.schemas import Principal
from access_control.modules.auth.service import SessionResolver

UNIQUE_KEYS = {
    "roles": [("id",), ("name",)],
    "permissions": [("id",), ("name",)],
    "role_permissions": [("role_id", "permission_id")],
    "user_roles": [("user_id", "role_id")],
}
GENERATED_IDS = {"roles", "permissions"}


class FakeAPIError(Exception):
    pass


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table_name: str):
        self.db = db
        self.table_name = table_name
        self.op = "select"
        self.columns = "*"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.max_rows = None

    def select(self, columns: str = "*"):
        self.op = "select"
        self.columns = columns
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.op = "update"
        self.payload = payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc: bool = False):
        self.order_by = (column, desc)
        return self

    def limit(self, size: int):
        self.max_rows = size
        return self

    def _matches(self, row) -> bool:
        return all(f(row) for f in self.filters)

    def _project(self, row) -> Dict:
        if self.columns.strip() == "*":
            return dict(row)
        return {c.strip(): row.get(c.strip()) for c in self.columns.split(",")}

    def execute(self):
        self.db.executed.append((self.table_name, self.op))
        if self.table_name in self.db.failing_tables:
            raise ConnectionError(f"connection to {self.table_name} refused")
        rows = self.db.tables[self.table_name]
        if self.op == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            return SimpleNamespace(data=[self.db.insert_row(self.table_name, dict(r)) for r in payload])
        if self.op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return SimpleNamespace(data=updated)
        if self.op == "delete":
            deleted = [row for row in rows if self._matches(row)]
            self.db.tables[self.table_name] = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=deleted)
        selected = [row for row in rows if self._matches(row)]
        if self.order_by:
            column, desc = self.order_by
            selected = sorted(selected, key=lambda r: r.get(column) or "", reverse=desc)
        if self.max_rows is not None:
            selected = selected[:self.max_rows]
        return SimpleNamespace(data=[self._project(row) for row in selected])


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[Dict]] = defaultdict(list)
        self.executed = []
        self.failing_tables = set()
        self._ids = itertools.count(1)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    @property
    def query_count(self) -> int:
        return len(self.executed)

    def insert_row(self, table_name: str, row: Dict) -> Dict:
        if table_name in GENERATED_IDS and "id" not in row:
            row["id"] = f"{table_name[:-1]}-{next(self._ids)}"
        for key in UNIQUE_KEYS.get(table_name, []):
            value = tuple(row.get(c) for c in key)
            if any(tuple(r.get(c) for c in key) == value for r in self.tables[table_name]):
                raise FakeAPIError(f"duplicate key value violates unique constraint on {table_name} {key}")
        self.tables[table_name].append(row)
        return dict(row)

    # Direct provisioning helpers; these do not count as queries
    def add_role(self, name: str, description: Optional[str] = None) -> str:
        return self.insert_row("roles", {"name": name, "description": description})["id"]

    def add_permission(self, name: str) -> str:
        resource, action = name.rsplit(".", 1)
        return self.insert_row("permissions", {"name": name, "resource": resource, "action": action})["id"]

    def _id_of(self, table_name: str, name: str) -> str:
        for row in self.tables[table_name]:
            if row["name"] == name:
                return row["id"]
        raise KeyError(name)

    def grant(self, role_name: str, permission_name: str):
        try:
            permission_id = self._id_of("permissions", permission_name)
        except KeyError:
            permission_id = self.add_permission(permission_name)
        self.insert_row("role_permissions", {
            "role_id": self._id_of("roles", role_name),
            "permission_id": permission_id,
        })

    def assign(self, user_id: str, role_name: str):
        self.insert_row("user_roles", {"user_id": user_id, "role_id": self._id_of("roles", role_name)})

    def unassign(self, user_id: str, role_name: str):
        role_id = self._id_of("roles", role_name)
        self.tables["user_roles"] = [
            r for r in self.tables["user_roles"]
            if not (r["user_id"] == user_id and r["role_id"] == role_id)
        ]


class FakeSessions(SessionResolver):
    """Token -> Principal map with a call counter"""

    def __init__(self, principals: Dict[str, Principal]):
        self.principals = principals
        self.calls = 0

    def get_session(self, credentials):
        self.calls += 1
        if not credentials:
            return None
        return self.principals.get(credentials)


ALICE = Principal(id="U-alice", email="alice@example.com", name="Alice")
BOB = Principal(id="U-bob", email="bob@example.com", name="Bob")
CAROL = Principal(id="U-carol", email="carol@example.com", name="Carol")


@pytest.fixture
def db():
    """Empty in-memory store with the default roles provisioned."""
    fake = FakeSupabase()
    for name in ("super_admin", "editor", "content_manager", "customer"):
        fake.add_role(name, f"{name} role")
    return fake


@pytest.fixture
def sessions():
    return FakeSessions({"alice-token": ALICE, "bob-token": BOB, "carol-token": CAROL})


@pytest.fixture
def client(db, sessions):
    """Return a TestClient wired to the in-memory store and fake sessions."""
    from access_control.core.dependencies import get_session_resolver
    from access_control.database.supabase_client import get_supabase, get_supabase_service
    from access_control.main import app

    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_supabase_service] = lambda: db
    app.dependency_overrides[get_session_resolver] = lambda: sessions
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def auth(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
