"""
Test fixtures: an in-memory stand-in for the supabase client.

FakeSupabaseClient keeps rows per table and answers the query-builder
chain the services use (select / eq / in_ / order / limit / insert /
update / execute). FakeAuth mimics the auth client, including the
session-change subscription. Every executed query is recorded in
``client.executed`` so tests can assert that nothing hit the network.
"""
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional

import pytest
from postgrest.exceptions import APIError
from supabase_auth.errors import AuthError


class FakeAuthError(AuthError):
    def __init__(self, message: str):
        Exception.__init__(self, message)
        self.message = message


def make_session(user_id: str, email: Optional[str] = None, token: str = "access-token"):
    return SimpleNamespace(
        access_token=token,
        user=SimpleNamespace(id=user_id, email=email or f"{user_id}@example.com"),
    )


def api_error(message: str) -> APIError:
    return APIError({"message": message, "code": "42501", "hint": None, "details": None})


class FakeQuery:

    def __init__(self, client: "FakeSupabaseClient", table: str):
        self.client = client
        self.table = table
        self.operation = "select"
        self.columns = "*"
        self.payload: Any = None
        self.filters: List[tuple] = []
        self.ordering: Optional[tuple] = None
        self.row_limit: Optional[int] = None

    def select(self, columns: str = "*"):
        self.operation = "select"
        self.columns = columns
        return self

    def insert(self, payload):
        self.operation = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.operation = "update"
        self.payload = payload
        return self

    def eq(self, column, value):
        self.filters.append(("eq", column, value))
        return self

    def in_(self, column, values):
        self.filters.append(("in", column, list(values)))
        return self

    def order(self, column, desc: bool = False):
        self.ordering = (column, desc)
        return self

    def limit(self, count: int):
        self.row_limit = count
        return self

    def _matches(self, row: Dict) -> bool:
        for kind, column, value in self.filters:
            if kind == "eq" and row.get(column) != value:
                return False
            if kind == "in" and row.get(column) not in value:
                return False
        return True

    def _project(self, row: Dict) -> Dict:
        if self.columns.strip() == "*":
            return dict(row)
        wanted = [c.strip() for c in self.columns.split(",")]
        return {c: row.get(c) for c in wanted}

    def execute(self):
        self.client.executed.append(self)
        if self.client.before_execute:
            self.client.before_execute(self)

        error = self.client.errors.get((self.table, self.operation))
        if error is not None:
            raise error

        rows = self.client.tables.setdefault(self.table, [])

        if self.operation == "insert":
            rows.append(dict(self.payload))
            return SimpleNamespace(data=[dict(self.payload)])

        if self.operation == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return SimpleNamespace(data=updated)

        data = [row for row in rows if self._matches(row)]
        if self.ordering:
            column, desc = self.ordering
            data = sorted(data, key=lambda r: r[column], reverse=desc)
        if self.row_limit is not None:
            data = data[: self.row_limit]
        return SimpleNamespace(data=[self._project(row) for row in data])


class FakeAuth:

    def __init__(self):
        self.session = None
        self.accounts: Dict[str, tuple] = {}
        self.subscribers: List[Callable] = []
        self.calls: List[tuple] = []
        self.notify_on_sign_out = True
        self.sign_out_error: Optional[Exception] = None

    def emit(self, event: str, session):
        self.session = session
        for callback in list(self.subscribers):
            callback(event, session)

    def on_auth_state_change(self, callback):
        self.subscribers.append(callback)

        def unsubscribe():
            if callback in self.subscribers:
                self.subscribers.remove(callback)

        return SimpleNamespace(unsubscribe=unsubscribe)

    def get_session(self):
        return self.session

    def sign_in_with_password(self, credentials):
        self.calls.append(("sign_in_with_password", credentials))
        account = self.accounts.get(credentials["email"])
        if account is None or account[0] != credentials["password"]:
            raise FakeAuthError("Invalid login credentials")
        session = make_session(account[1], credentials["email"])
        self.emit("SIGNED_IN", session)
        return SimpleNamespace(user=session.user, session=session)

    def sign_up(self, credentials):
        self.calls.append(("sign_up", credentials))
        if credentials["email"] in self.accounts:
            raise FakeAuthError("User already registered")
        user = SimpleNamespace(id=f"user-{len(self.accounts) + 1}", email=credentials["email"])
        self.accounts[credentials["email"]] = (credentials["password"], user.id)
        return SimpleNamespace(user=user, session=None)

    def reset_password_for_email(self, email, options=None):
        self.calls.append(("reset_password_for_email", email, options))

    def sign_out(self):
        self.calls.append(("sign_out",))
        if self.sign_out_error is not None:
            raise self.sign_out_error
        if self.notify_on_sign_out:
            self.emit("SIGNED_OUT", None)
        else:
            self.session = None


class FakeSupabaseClient:

    def __init__(self):
        self.tables: Dict[str, List[Dict]] = {}
        self.errors: Dict[tuple, Exception] = {}
        self.executed: List[FakeQuery] = []
        self.before_execute: Optional[Callable[[FakeQuery], None]] = None
        self.auth = FakeAuth()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def fail(self, table: str, operation: str, message: str = "permission denied"):
        self.errors[(table, operation)] = api_error(message)


@pytest.fixture
def client():
    return FakeSupabaseClient()


@pytest.fixture
def congregation_data(client):
    """Two members (one admin) with a handful of contributions."""
    client.tables["profiles"] = [
        {"id": "u-admin", "first_name": "Grace", "last_name": "Wanjiru"},
        {"id": "u-member", "first_name": "John", "last_name": "Doe"},
        {"id": "u-blank", "first_name": None, "last_name": ""},
    ]
    client.tables["user_roles"] = [
        {"user_id": "u-admin", "role": "admin"},
    ]
    client.tables["contributions"] = [
        {"id": "c1", "user_id": "u-member", "amount": 100, "contribution_type": "tithe",
         "created_at": "2024-01-01T09:30:00+00:00"},
        {"id": "c2", "user_id": "u-member", "amount": 50, "contribution_type": "offering",
         "created_at": "2024-01-02T18:00:00+00:00"},
        {"id": "c3", "user_id": "u-admin", "amount": 250.5, "contribution_type": "sacrifice",
         "created_at": "2024-01-02T07:15:00.123456+00:00"},
        {"id": "c4", "user_id": "u-blank", "amount": 20, "contribution_type": "tithe",
         "created_at": "2024-01-03T12:00:00+00:00"},
    ]
    return client
