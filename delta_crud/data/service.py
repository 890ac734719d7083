from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Callable, Iterator, Optional

import pandas as pd

from delta_crud.config import ConnectionSettings
from delta_crud.data import queries
from delta_crud.data.connection import SqlRunner, get_sql_client
from delta_crud.data.models import COLUMNS, Product
from delta_crud.logger import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class StepResult:
    label: str
    ok: bool
    value: Any = None
    error: Optional[BaseException] = None


def attempt(label: str, fn: Callable[[], Any], best_effort: bool = False) -> StepResult:
    """
    Run one operation and report it as a StepResult; the caller decides whether a failure is fatal.
    The traceback stays on the returned error for the caller to report.
    """
    try:
        return StepResult(label=label, ok=True, value=fn())
    except Exception as e:
        if best_effort:
            log.warning("%s failed (continuing): %s", label, e)
        else:
            log.error("%s failed: %s", label, e)
        return StepResult(label=label, ok=False, error=e)


class ProductService:
    """
    CRUD over the products Delta table.

    Holds only the runner and the fully qualified table name; no connection is
    opened until an operation runs. Store errors propagate to the caller.
    """

    def __init__(self, cfg: ConnectionSettings, runner: Optional[SqlRunner] = None):
        self.cfg = cfg
        self.runner: SqlRunner = runner if runner is not None else get_sql_client(cfg)
        self.table = cfg.fq_table

    # create
    def create_product(self, product: Product) -> None:
        self.runner.execute(*queries.q_insert(self.table, product))
        log.debug("Product created: %s", product.name)

    # read - single
    def get_product(self, product_id: int) -> Optional[Product]:
        row = self.runner.fetch_one(*queries.q_select_one(self.table, product_id))
        return Product.from_row(row) if row is not None else None

    # read - all
    def iter_products(self) -> Iterator[Product]:
        for row in self.runner.fetch(*queries.q_select_all(self.table)):
            yield Product.from_row(row)

    def products_frame(self) -> pd.DataFrame:
        return pd.DataFrame([asdict(p) for p in self.iter_products()], columns=list(COLUMNS))

    # update
    def update_product(self, product: Product) -> int:
        n = self.runner.execute(*queries.q_update(self.table, product))
        log.debug("Product updated: %s (Rows affected: %d)", product.name, n)
        return n

    # delete
    def delete_product(self, product_id: int) -> int:
        n = self.runner.execute(*queries.q_delete(self.table, product_id))
        log.debug("Product deleted: ID %s (Rows affected: %d)", product_id, n)
        return n

    def create_table_if_not_exists(self) -> None:
        self.runner.execute(*queries.q_create_table(self.table))
        log.info("Table '%s' created or already exists.", self.table)

    def drop_table_if_exists(self) -> None:
        self.runner.execute(*queries.q_drop_table(self.table))
        log.info("Table '%s' dropped if it existed.", self.table)

    def list_schemas(self, catalog: Optional[str] = None, like: Optional[str] = None) -> Iterator[str]:
        catalog = catalog or self.cfg.catalog
        for row in self.runner.fetch(*queries.q_show_schemas(catalog, like)):
            yield str(row[0])


def get_product_service(cfg: ConnectionSettings) -> ProductService:
    return ProductService(cfg)
