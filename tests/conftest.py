"""
In-memory stand-in for the Supabase client used by the services under test.

Only the query-builder surface the app calls is modelled: table().select /
insert / update / delete with eq, neq, lt, in_, contains, or_, order, limit,
offset, maybe_single and count="exact", plus the handful of auth calls.
"""
import itertools
import re
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from app.database.supabase_client import get_supabase
from app.main import app
from app.modules.auth.service import clear_auth_cache

_BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)
_clock = itertools.count()


def _next_timestamp() -> str:
    return (_BASE_TIME + timedelta(seconds=next(_clock))).isoformat()


def _split_top_level(expr: str):
    parts, depth, current = [], 0, ""
    for ch in expr:
        if ch == "," and depth == 0:
            parts.append(current)
            current = ""
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        current += ch
    if current:
        parts.append(current)
    return parts


def _ilike(value, pattern: str) -> bool:
    if value is None:
        return False
    regex = "^" + ".*".join(re.escape(p) for p in pattern.split("%")) + "$"
    return re.match(regex, str(value), re.IGNORECASE) is not None


def _parse_condition(expr: str):
    expr = expr.strip()
    if expr.startswith("and(") and expr.endswith(")"):
        inner = [_parse_condition(p) for p in _split_top_level(expr[4:-1])]
        return lambda row: all(c(row) for c in inner)
    if expr.startswith("or(") and expr.endswith(")"):
        inner = [_parse_condition(p) for p in _split_top_level(expr[3:-1])]
        return lambda row: any(c(row) for c in inner)
    column, op, value = expr.split(".", 2)
    if op == "eq":
        return lambda row: str(row.get(column)) == value
    if op == "neq":
        return lambda row: str(row.get(column)) != value
    if op == "ilike":
        return lambda row: _ilike(row.get(column), value)
    if op == "lt":
        return lambda row: row.get(column) is not None and str(row.get(column)) < value
    if op == "is" and value == "null":
        return lambda row: row.get(column) is None
    raise NotImplementedError(op)


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table_name = table
        self.operation = "select"
        self.columns = "*"
        self.count_mode = None
        self.payload = None
        self.filters = []
        self.order_by = []
        self.limit_value = None
        self.offset_value = 0
        self.single_mode = False

    @property
    def rows(self):
        return self.db.tables.setdefault(self.table_name, [])

    def select(self, columns="*", count=None):
        self.columns = columns
        self.count_mode = count
        return self

    def insert(self, payload):
        self.operation = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.operation = "update"
        self.payload = payload
        return self

    def delete(self):
        self.operation = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column, value):
        self.filters.append(lambda row: row.get(column) != value)
        return self

    def lt(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row.get(column) < value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def contains(self, column, values):
        self.filters.append(lambda row: set(values).issubset(set(row.get(column) or [])))
        return self

    def or_(self, expr):
        conditions = [_parse_condition(p) for p in _split_top_level(expr)]
        self.filters.append(lambda row: any(c(row) for c in conditions))
        return self

    def order(self, column, desc=False):
        self.order_by.append((column, desc))
        return self

    def limit(self, value):
        self.limit_value = value
        return self

    def offset(self, value):
        self.offset_value = value
        return self

    def maybe_single(self):
        self.single_mode = True
        return self

    def _project(self, row):
        if "*" in self.columns:
            return dict(row)
        names = [c.strip() for c in self.columns.split(",")]
        return {n: row.get(n) for n in names}

    def _matches(self):
        return [row for row in self.rows if all(f(row) for f in self.filters)]

    def execute(self):
        self.db.calls.append((self.table_name, self.operation))
        if self.table_name in self.db.failing_tables:
            raise RuntimeError(f"{self.table_name} is unavailable")
        if self.operation == "insert":
            items = self.payload if isinstance(self.payload, list) else [self.payload]
            created = []
            for item in items:
                row = {"id": str(uuid.uuid4()), "created_at": _next_timestamp(), **item}
                self.rows.append(row)
                created.append(dict(row))
            return SimpleNamespace(data=created, count=None)
        if self.operation == "update":
            updated = []
            for row in self._matches():
                row.update(self.payload)
                updated.append(dict(row))
            return SimpleNamespace(data=updated, count=None)
        if self.operation == "delete":
            doomed = self._matches()
            self.db.tables[self.table_name] = [r for r in self.rows if r not in doomed]
            return SimpleNamespace(data=[dict(r) for r in doomed], count=None)

        matched = self._matches()
        for column, desc in reversed(self.order_by):
            matched.sort(key=lambda r: (r.get(column) is None, r.get(column) or ""), reverse=desc)
        total = len(matched)
        matched = matched[self.offset_value:]
        if self.limit_value is not None:
            matched = matched[:self.limit_value]
        data = [self._project(r) for r in matched]
        if self.single_mode:
            return SimpleNamespace(data=data[0] if data else None, count=None)
        return SimpleNamespace(data=data, count=total if self.count_mode else None)


class FakeAuth:
    def __init__(self, db):
        self.db = db
        self.users = {}
        self.signed_out = 0

    def sign_up(self, credentials):
        email = credentials["email"]
        if any(u.email == email for u in self.users.values()):
            raise RuntimeError("User already registered")
        user = SimpleNamespace(
            id=str(uuid.uuid4()),
            email=email,
            user_metadata=credentials.get("options", {}).get("data", {}),
            created_at=_next_timestamp(),
            password=credentials["password"],
        )
        self.users[user.id] = user
        return SimpleNamespace(user=user, session=None)

    def sign_in_with_password(self, credentials):
        for user in self.users.values():
            if user.email == credentials["email"] and user.password == credentials["password"]:
                session = SimpleNamespace(access_token=f"token-{user.id}", refresh_token=f"refresh-{user.id}")
                return SimpleNamespace(user=user, session=session)
        raise RuntimeError("Invalid login credentials")

    def get_user(self, jwt=None):
        user_id = (jwt or "").replace("token-", "", 1)
        if user_id not in self.users:
            raise RuntimeError("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=self.users[user_id])

    def sign_out(self):
        self.signed_out += 1


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.calls = []
        self.failing_tables = set()
        self.auth = FakeAuth(self)

    def table(self, name):
        return FakeQuery(self, name)

    def add_user(self, role="student", full_name=None, **profile):
        """Create an auth user plus profile row; returns the profile dict"""
        user_id = str(uuid.uuid4())
        email = profile.pop("email", f"{user_id[:8]}@campus.edu")
        self.auth.users[user_id] = SimpleNamespace(
            id=user_id, email=email, user_metadata={}, created_at=_next_timestamp(), password="secret123"
        )
        row = {
            "id": user_id,
            "email": email,
            "full_name": full_name or f"User {user_id[:4]}",
            "role": role,
            "is_online": False,
            "last_seen": None,
            "created_at": _next_timestamp(),
            **profile,
        }
        self.tables.setdefault("profiles", []).append(row)
        return row


@pytest.fixture
def fake_db():
    clear_auth_cache()
    return FakeSupabase()


@pytest.fixture
def client(fake_db):
    app.dependency_overrides[get_supabase] = lambda: fake_db
    yield TestClient(app)
    app.dependency_overrides.clear()
    clear_auth_cache()


@pytest.fixture
def student(fake_db):
    return fake_db.add_user(role="student", full_name="Asha Rao", department="Computer Science", year_of_study=2, skills=["Python", "AI"])


@pytest.fixture
def other_student(fake_db):
    return fake_db.add_user(role="student", full_name="Ben Okafor", department="Mathematics", year_of_study=3, skills=["React"])


@pytest.fixture
def faculty(fake_db):
    return fake_db.add_user(role="faculty", full_name="Dr. Lena Park", department="Computer Science")


def _headers_for(profile):
    return {"Authorization": f"Bearer token-{profile['id']}"}


@pytest.fixture
def auth_headers():
    return _headers_for
