from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from attendance_tracker.gateway.base import AuthSession, AuthUser, GatewayFailure, GatewayResult

WRITE_OPS = {"insert", "update", "delete"}


class InMemoryGateway:
    """Gateway fake emulating what the stores rely on from the backend.

    - rows are only visible to their owner (RLS)
    - ordering, the `subject:subjects(...)` join and TIME columns as 'HH:MM:SS'
    - timetable entries restrict deleting the subject they reference
    - `fail["insert:profiles"] = "msg"` makes that call return an error
    """

    def __init__(self) -> None:
        self.tables: Dict[str, List[dict]] = {"profiles": [], "subjects": [], "timetable_entries": []}
        self.accounts: Dict[str, dict] = {}
        self.session: Optional[AuthSession] = None
        self.listeners: List[Callable[[Optional[AuthSession]], None]] = []
        self.calls: List[tuple] = []
        self.fail: Dict[str, str] = {}
        self.deleted_accounts: List[str] = []
        self._ids = itertools.count(1)
        self._clock = datetime(2025, 1, 6, 8, 0, tzinfo=timezone.utc)

    # ----- helpers -----

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"

    def _now(self) -> str:
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def _failure(self, op: str, table: str = "") -> Optional[GatewayResult]:
        message = self.fail.get(f"{op}:{table}") or self.fail.get(op)
        if message:
            return GatewayResult(error=GatewayFailure(message))
        return None

    def _emit(self) -> None:
        for listener in list(self.listeners):
            listener(self.session)

    def writes(self) -> List[tuple]:
        return [c for c in self.calls if c[0] in WRITE_OPS]

    def count(self, op: str, table: str) -> int:
        return sum(1 for c in self.calls if c[:2] == (op, table))

    @staticmethod
    def _normalize_time(value: str) -> str:
        return value if len(value) == 8 else f"{value}:00"

    def login_as(self, email: str = "student@example.com", password: str = "secret123") -> AuthUser:
        """Create an account and sign it in (test setup shortcut)."""
        if email not in self.accounts:
            self.accounts[email] = {"id": self._next_id("user"), "password": password}
        user = AuthUser(id=self.accounts[email]["id"], email=email)
        self.session = AuthSession(access_token=f"token-{user.id}", user=user)
        self._emit()
        return user

    # ----- auth -----

    async def sign_in_with_password(self, email, password):
        self.calls.append(("sign_in", email))
        failure = self._failure("sign_in")
        if failure:
            return failure
        account = self.accounts.get(email)
        if not account or account["password"] != password:
            return GatewayResult(error=GatewayFailure("Invalid login credentials"))
        user = AuthUser(id=account["id"], email=email)
        self.session = AuthSession(access_token=f"token-{user.id}", user=user)
        self._emit()
        return GatewayResult()

    async def sign_up(self, email, password):
        self.calls.append(("sign_up", email))
        failure = self._failure("sign_up")
        if failure:
            return failure
        if email in self.accounts:
            return GatewayResult(error=GatewayFailure("User already registered"))
        user_id = self._next_id("user")
        self.accounts[email] = {"id": user_id, "password": password}
        return GatewayResult(data=AuthUser(id=user_id, email=email))

    async def sign_out(self):
        self.calls.append(("sign_out",))
        failure = self._failure("sign_out")
        if failure:
            return failure
        self.session = None
        self._emit()
        return GatewayResult()

    async def get_session(self):
        failure = self._failure("get_session")
        return failure or GatewayResult(data=self.session)

    async def get_user(self):
        failure = self._failure("get_user")
        return failure or GatewayResult(data=self.session.user if self.session else None)

    def on_session_change(self, listener):
        self.listeners.append(listener)
        return lambda: self.listeners.remove(listener)

    async def delete_account(self, user_id):
        self.calls.append(("delete_account", user_id))
        failure = self._failure("delete_account")
        if failure:
            return failure
        for email, account in list(self.accounts.items()):
            if account["id"] == user_id:
                del self.accounts[email]
        self.deleted_accounts.append(user_id)
        return GatewayResult()

    # ----- tables -----

    def _owned(self, table: str) -> List[dict]:
        uid = self.session.user.id if self.session else None
        if table == "profiles":
            return [r for r in self.tables[table] if r["id"] == uid]
        return [r for r in self.tables[table] if r["user_id"] == uid]

    async def select(self, table, *, columns="*", filters=None, order_by=()):
        self.calls.append(("select", table))
        failure = self._failure("select", table)
        if failure:
            return failure
        rows = [dict(r) for r in self._owned(table)]
        for column, value in (filters or {}).items():
            rows = [r for r in rows if r.get(column) == value]
        for column in reversed(list(order_by)):
            rows.sort(key=lambda r: r[column])
        if "subject:subjects" in columns:
            subjects = {s["id"]: s for s in self.tables["subjects"]}
            for r in rows:
                s = subjects.get(r["subject_id"])
                r["subject"] = {"id": s["id"], "name": s["name"], "type": s["type"]} if s else None
        return GatewayResult(data=rows)

    async def insert(self, table, rows):
        self.calls.append(("insert", table))
        failure = self._failure("insert", table)
        if failure:
            return failure
        for row in rows:
            new = dict(row)
            if table == "timetable_entries":
                if not any(s["id"] == new["subject_id"] for s in self.tables["subjects"]):
                    return GatewayResult(
                        error=GatewayFailure(
                            'insert or update on table "timetable_entries" violates foreign key constraint',
                            code="23503",
                        )
                    )
                new["start_time"] = self._normalize_time(new["start_time"])
                new["end_time"] = self._normalize_time(new["end_time"])
            if table == "subjects":
                new.setdefault("attendance_threshold", 75)
            new.setdefault("id", self._next_id(table))
            new["created_at"] = new["updated_at"] = self._now()
            self.tables[table].append(new)
        return GatewayResult()

    async def update(self, table, changes, row_id):
        self.calls.append(("update", table, dict(changes)))
        failure = self._failure("update", table)
        if failure:
            return failure
        for row in self._owned(table):
            if row["id"] == row_id:
                row.update(changes)
                for key in ("start_time", "end_time"):
                    if key in changes:
                        row[key] = self._normalize_time(changes[key])
                row["updated_at"] = self._now()
        return GatewayResult()

    async def delete(self, table, row_id):
        self.calls.append(("delete", table))
        failure = self._failure("delete", table)
        if failure:
            return failure
        if table == "subjects" and any(e["subject_id"] == row_id for e in self.tables["timetable_entries"]):
            return GatewayResult(
                error=GatewayFailure(
                    'update or delete on table "subjects" violates foreign key constraint '
                    '"timetable_entries_subject_id_fkey" on table "timetable_entries"',
                    code="23503",
                )
            )
        owned_ids = {r["id"] for r in self._owned(table)}
        self.tables[table] = [r for r in self.tables[table] if not (r["id"] == row_id and row_id in owned_ids)]
        return GatewayResult()
