"""In-memory Data API backend for exercising the statement pipeline."""

from __future__ import annotations

import threading
import time

from adasql.domain.errors import BackendError
from adasql.providers.base.backend import ExecuteResult


class FakeBackend:
    """Records every call; results, delays and failures are configured per SQL text."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.results: dict[str, ExecuteResult] = {}
        self.delays: dict[str, float] = {}
        self.failing: set[str] = set()
        self.schemas: list[str] = []
        self.tables: dict[str, list[str]] = {}
        self.columns: dict[tuple[str, str], list[str]] = {}
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()
        self._transactions = 0

    def _enter(self) -> None:
        with self._lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)

    def _leave(self) -> None:
        with self._lock:
            self.active -= 1

    def _maybe_fail(self, key: str) -> None:
        if key in self.failing:
            raise BackendError(message=f"{key} exploded", code="BadRequestException")

    def execute_statement(self, sql, *, database=None, transaction_id=None) -> ExecuteResult:
        self._enter()
        try:
            self.calls.append(("execute", sql, database, transaction_id))
            time.sleep(self.delays.get(sql, 0))
            self._maybe_fail(sql)
            return self.results.get(sql, ExecuteResult())
        finally:
            self._leave()

    def begin_transaction(self, database=None) -> str:
        self.calls.append(("begin", database))
        self._maybe_fail("begin")
        self._transactions += 1
        return f"tx-{self._transactions}"

    def commit_transaction(self, transaction_id) -> None:
        self.calls.append(("commit", transaction_id))
        self._maybe_fail("commit")

    def rollback_transaction(self, transaction_id) -> None:
        self.calls.append(("rollback", transaction_id))
        self._maybe_fail("rollback")

    def list_schemas(self) -> list[str]:
        self.calls.append(("list_schemas",))
        self._maybe_fail("list_schemas")
        return list(self.schemas)

    def list_tables(self, database) -> list[str]:
        self.calls.append(("list_tables", database))
        self._maybe_fail("list_tables")
        return list(self.tables.get(database, []))

    def list_columns(self, database, table) -> list[str]:
        self.calls.append(("list_columns", database, table))
        self._maybe_fail(f"list_columns:{table}")
        return list(self.columns.get((database, table), []))
