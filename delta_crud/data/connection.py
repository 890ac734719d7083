from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Optional, Protocol

from databricks import sql

from delta_crud.config import ConnectionSettings
from delta_crud.logger import get_logger

log = get_logger(__name__)

Params = Optional[dict[str, Any]]


class DatabricksAuthError(RuntimeError):
    pass


class SqlRunner(Protocol):
    """How ProductService reaches the warehouse. Swap in a pooled runner without touching the service."""

    def execute(self, statement: str, params: Params = None) -> int: ...

    def fetch(self, statement: str, params: Params = None) -> Iterator[tuple]: ...

    def fetch_one(self, statement: str, params: Params = None) -> Optional[tuple]: ...


def _rows_affected(cur: Any) -> int:
    # Databricks DML answers with a one-row result set (num_affected_rows, ...)
    cols = [d[0] for d in (cur.description or [])]
    if "num_affected_rows" in cols:
        row = cur.fetchone()
        if row is not None:
            return int(row[cols.index("num_affected_rows")])
    rowcount = cur.rowcount if isinstance(cur.rowcount, int) else 0
    return max(rowcount, 0)


@dataclass(frozen=True)
class SqlClient:
    """
    Scoped-connection runner: every call opens its own Databricks SQL
    connection, runs one statement on one cursor, and closes both on the way out.
    """
    cfg: ConnectionSettings
    arraysize: int = 1000

    def _connect(self):
        if not self.cfg.token:
            raise DatabricksAuthError(
                "Missing DATABRICKS_TOKEN for Databricks SQL authentication. "
                "Set DATABRICKS_TOKEN (PAT) in .env or the process environment."
            )
        # HTTPS on 443 with PAT auth is fixed by the connector
        return sql.connect(
            server_hostname=self.cfg.server_hostname,
            http_path=self.cfg.http_path,
            access_token=self.cfg.token,
        )

    def execute(self, statement: str, params: Params = None) -> int:
        log.debug("execute: %s", statement.strip())
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(statement, params or {})
                return _rows_affected(cur)

    def fetch(self, statement: str, params: Params = None) -> Iterator[tuple]:
        """Lazy; the connection stays open until the iterator is exhausted or closed."""
        log.debug("fetch: %s", statement.strip())
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(statement, params or {})
                while True:
                    batch = cur.fetchmany(self.arraysize)
                    if not batch:
                        break
                    for row in batch:
                        yield tuple(row)

    def fetch_one(self, statement: str, params: Params = None) -> Optional[tuple]:
        log.debug("fetch_one: %s", statement.strip())
        with self._connect() as conn:
            with conn.cursor() as cur:
                cur.execute(statement, params or {})
                row = cur.fetchone()
                return tuple(row) if row is not None else None


def get_sql_client(cfg: ConnectionSettings) -> SqlClient:
    return SqlClient(cfg=cfg)
