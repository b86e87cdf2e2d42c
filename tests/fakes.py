"""In-memory stand-in for the Supabase client used by the route and service tests.

Supports the query-builder chains the API uses:

    client.table(t).insert(rows).execute()
    client.table(t).update(values).eq(...).or_(...).execute()
    client.table(t).delete().eq(...).execute()
    client.table(t).select(cols).eq(...).limit(n).order(col, desc=True).execute()
    client.rpc(name, params).execute()

Every ``execute()`` is recorded in ``calls`` as ``(target, op)``, and any
``(table, op)`` pair can be made to fail with ``fail()``.
"""
import copy
from typing import Any, Callable, Dict, List, Optional, Tuple


class FakeAPIError(Exception):
    """Shaped like postgrest's APIError: carries a ``message`` attribute."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FakeResponse:
    def __init__(self, data: Any):
        self.data = data


def _same(a: Any, b: Any) -> bool:
    if a is None or b is None:
        return a is b
    return a == b or str(a) == str(b)


def _parse_or(expression: str) -> Callable[[Dict[str, Any]], bool]:
    """Parse PostgREST ``or`` filters of the form ``col.is.null,col.neq.value``."""
    conditions = []
    for part in expression.split(","):
        column, operator, value = part.split(".", 2)
        conditions.append((column, operator, value))

    def matches(row: Dict[str, Any]) -> bool:
        for column, operator, value in conditions:
            current = row.get(column)
            if operator == "is" and value == "null" and current is None:
                return True
            if operator == "eq" and current is not None and str(current) == value:
                return True
            if operator == "neq" and current is not None and str(current) != value:
                return True
        return False

    return matches


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.op: Optional[str] = None
        self.payload: Any = None
        self.columns = "*"
        self.filters: List[Callable[[Dict[str, Any]], bool]] = []
        self.limit_count: Optional[int] = None
        self.order_by: Optional[Tuple[str, bool]] = None

    def select(self, columns: str = "*"):
        if self.op is None:
            self.op = "select"
        self.columns = columns
        return self

    def insert(self, rows: Any):
        self.op = "insert"
        self.payload = rows
        return self

    def update(self, values: Dict[str, Any]):
        self.op = "update"
        self.payload = values
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column: str, value: Any):
        self.filters.append(lambda row: _same(row.get(column), value))
        return self

    def neq(self, column: str, value: Any):
        self.filters.append(lambda row: not _same(row.get(column), value))
        return self

    def or_(self, expression: str):
        self.filters.append(_parse_or(expression))
        return self

    def limit(self, count: int):
        self.limit_count = count
        return self

    def order(self, column: str, desc: bool = False):
        self.order_by = (column, desc)
        return self

    def _matching(self) -> List[Dict[str, Any]]:
        return [row for row in self.db.rows(self.table) if all(f(row) for f in self.filters)]

    def _project(self, row: Dict[str, Any]) -> Dict[str, Any]:
        if self.columns.strip() == "*":
            return copy.deepcopy(row)
        wanted = [c.strip() for c in self.columns.split(",")]
        return {c: copy.deepcopy(row.get(c)) for c in wanted}

    def execute(self) -> FakeResponse:
        self.db.calls.append((self.table, self.op))
        self.db.check_failure(self.table, self.op)

        if self.op == "insert":
            rows = self.payload if isinstance(self.payload, list) else [self.payload]
            return FakeResponse([copy.deepcopy(self.db.add(self.table, row)) for row in rows])

        if self.op == "update":
            updated = []
            for row in self._matching():
                row.update(copy.deepcopy(self.payload))
                updated.append(copy.deepcopy(row))
            return FakeResponse(updated)

        if self.op == "delete":
            removed = self._matching()
            self.db.tables[self.table] = [r for r in self.db.rows(self.table) if r not in removed]
            return FakeResponse(copy.deepcopy(removed))

        rows = self._matching()
        if self.order_by:
            column, desc = self.order_by
            rows = sorted(rows, key=lambda r: str(r.get(column) or ""), reverse=desc)
        if self.limit_count is not None:
            rows = rows[: self.limit_count]
        return FakeResponse([self._project(row) for row in rows])


class FakeRpcCall:
    def __init__(self, db: "FakeSupabase", name: str, params: Dict[str, Any]):
        self.db = db
        self.name = name
        self.params = params

    def execute(self) -> FakeResponse:
        self.db.calls.append(("rpc", self.name))
        self.db.rpc_params.append((self.name, copy.deepcopy(self.params)))
        self.db.check_failure("rpc", self.name)
        handler = self.db.rpc_handlers.get(self.name)
        if handler is None:
            raise FakeAPIError(f"Could not find the function public.{self.name}")
        return FakeResponse(handler(self.db, self.params))


class FakeSupabase:
    """Tables are lists of dict rows; ids are assigned as ``<table>-<n>``."""

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.calls: List[Tuple[str, Optional[str]]] = []
        # (table, op) -> [error, successes allowed before failing]
        self.failures: Dict[Tuple[str, Optional[str]], List[Any]] = {}
        self.rpc_handlers: Dict[str, Callable[["FakeSupabase", Dict[str, Any]], Any]] = {}
        self.rpc_params: List[Tuple[str, Dict[str, Any]]] = []
        self._sequence = 0

    # Builder entry points

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: Optional[Dict[str, Any]] = None) -> FakeRpcCall:
        return FakeRpcCall(self, name, params or {})

    # Test helpers

    def rows(self, table: str) -> List[Dict[str, Any]]:
        return self.tables.setdefault(table, [])

    def add(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        self._sequence += 1
        stored = copy.deepcopy(row)
        stored.setdefault("id", f"{table}-{self._sequence}")
        stored.setdefault("created_at", f"2026-01-01T00:00:00.{self._sequence:06d}")
        self.rows(table).append(stored)
        return stored

    def seed(self, table: str, *rows: Dict[str, Any]) -> List[Dict[str, Any]]:
        return [self.add(table, row) for row in rows]

    def fail(self, table: str, op: str, message: str = "backend unavailable", after: int = 0) -> None:
        """Make ``(table, op)`` raise, optionally after ``after`` successful calls."""
        self.failures[(table, op)] = [FakeAPIError(message), after]

    def check_failure(self, target: str, op: Optional[str]) -> None:
        entry = self.failures.get((target, op))
        if entry is None:
            return
        if entry[1] > 0:
            entry[1] -= 1
            return
        raise entry[0]

    def on_rpc(self, name: str, handler: Callable[["FakeSupabase", Dict[str, Any]], Any]) -> None:
        self.rpc_handlers[name] = handler

    def writes(self) -> List[Tuple[str, Optional[str]]]:
        return [call for call in self.calls if call[1] in ("insert", "update", "delete")]
