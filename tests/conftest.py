from __future__ import annotations

import re
from typing import Any, Iterator, Optional
from unittest.mock import MagicMock

import pytest

from delta_crud.config import ConnectionSettings


class StoreError(RuntimeError):
    pass


class InMemoryRunner:
    """
    SqlRunner stand-in that understands exactly the statements in delta_crud.data.queries.
    Rows live in a list per table, so duplicate ids are kept like the real table would.
    """

    def __init__(self) -> None:
        self.tables: dict[str, list[tuple]] = {}
        self.schemas = ["default", "demo"]
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.fail_on: set[str] = set()

    @staticmethod
    def _table_name(statement: str) -> str:
        m = re.search(r"(?:INTO|FROM|UPDATE|EXISTS)\s+([\w.]+)", statement)
        assert m, statement
        return m.group(1)

    def _begin(self, statement: str, params: Optional[dict[str, Any]]) -> str:
        self.calls.append((statement, dict(params or {})))
        verb = statement.split()[0].upper()
        if verb in self.fail_on:
            raise StoreError(f"{verb} failed")
        return verb

    def _rows(self, name: str) -> list[tuple]:
        if name not in self.tables:
            raise StoreError(f"[TABLE_OR_VIEW_NOT_FOUND] {name}")
        return self.tables[name]

    def execute(self, statement: str, params: Optional[dict[str, Any]] = None) -> int:
        verb = self._begin(statement, params)
        name = self._table_name(statement)
        if verb == "CREATE":
            self.tables.setdefault(name, [])
            return 0
        if verb == "DROP":
            self.tables.pop(name, None)
            return 0
        rows = self._rows(name)
        if verb == "INSERT":
            rows.append((params["id"], params["name"], params["price"], params["quantity"]))
            return 1
        if verb == "UPDATE":
            n = 0
            for i, r in enumerate(rows):
                if r[0] == params["id"]:
                    rows[i] = (r[0], params["name"], params["price"], params["quantity"])
                    n += 1
            return n
        if verb == "DELETE":
            keep = [r for r in rows if r[0] != params["id"]]
            n = len(rows) - len(keep)
            rows[:] = keep
            return n
        raise AssertionError(f"unexpected statement: {statement}")

    def fetch(self, statement: str, params: Optional[dict[str, Any]] = None) -> Iterator[tuple]:
        verb = self._begin(statement, params)
        if verb == "SHOW":
            yield from ((s,) for s in self.schemas)
            return
        rows = list(self._rows(self._table_name(statement)))
        if params and "id" in params:
            rows = [r for r in rows if r[0] == params["id"]]
        yield from rows

    def fetch_one(self, statement: str, params: Optional[dict[str, Any]] = None) -> Optional[tuple]:
        return next(iter(self.fetch(statement, params)), None)


@pytest.fixture
def settings() -> ConnectionSettings:
    return ConnectionSettings(
        host="https://adb-1234567890.12.azuredatabricks.net/",
        http_path="/sql/1.0/warehouses/abc123",
        token="dapi-test-token",
        catalog="main",
        schema="demo",
        table_name="products",
    )


@pytest.fixture
def runner() -> InMemoryRunner:
    return InMemoryRunner()


@pytest.fixture
def fake_connect(monkeypatch):
    """Patch databricks.sql.connect; returns (connect_mock, conn, cursor)."""
    cur = MagicMock(name="cursor")
    cur.__enter__.return_value = cur
    cur.description = None
    cur.rowcount = -1

    conn = MagicMock(name="connection")
    conn.__enter__.return_value = conn
    conn.cursor.return_value = cur

    connect = MagicMock(name="connect", return_value=conn)
    monkeypatch.setattr("delta_crud.data.connection.sql.connect", connect)
    return connect, conn, cur
