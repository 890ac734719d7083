"""
Linear CRUD demo against a Databricks Delta table.

    python -m delta_crud
    delta-crud

All configuration reads happen ONLY in config.py.
Exit codes: 0 success, 1 store failure, 2 configuration failure.
"""

from __future__ import annotations

import sys
import traceback
from decimal import Decimal
from pathlib import Path
from typing import Mapping, Optional

from delta_crud.config import ConfigError, load_settings
from delta_crud.data.models import Product
from delta_crud.data.service import ProductService, StepResult, attempt, get_product_service
from delta_crud.logger import setup_logger

EXIT_OK = 0
EXIT_STORE_ERROR = 1
EXIT_CONFIG_ERROR = 2


def _banner(title: str) -> None:
    print(f"\n=== {title} ===")


def print_products(service: ProductService) -> None:
    df = service.products_frame()
    print("\n--- All Products ---")
    print(df.to_string(index=False) if not df.empty else "(no rows)")


def print_schemas(service: ProductService) -> None:
    # collected before printing; a failed listing prints nothing
    names = list(service.list_schemas())
    print(f"\n--- Available Schemas in {service.cfg.catalog} ---")
    for name in names:
        print(f"Schema: {name}")


def _pause() -> None:
    try:
        input("\nPress Enter to exit...")
    except EOFError:
        # no interactive stdin (CI, piped runs)
        pass


def _report_failure(step: StepResult) -> int:
    err = step.error
    print(f"Error: {err}")
    print("Stack Trace:")
    print("".join(traceback.format_exception(type(err), err, err.__traceback__)))
    return EXIT_STORE_ERROR


def run_demo(service: ProductService) -> int:
    _banner("Checking available catalogs and schemas")
    schemas = attempt("list schemas", lambda: print_schemas(service), best_effort=True)
    if not schemas.ok:
        # best-effort step: report and keep going
        print(f"Could not list catalogs/schemas: {schemas.error}")

    laptop = Product(id=1, name="Laptop", price=Decimal("999.99"), quantity=10)
    mouse = Product(id=2, name="Mouse", price=Decimal("29.99"), quantity=50)

    def update_laptop() -> None:
        laptop.price = Decimal("899.99")
        laptop.quantity = 15
        n = service.update_product(laptop)
        print(f"Product updated: {laptop.name} (Rows affected: {n})")

    def delete_mouse() -> None:
        n = service.delete_product(mouse.id)
        print(f"Product deleted: ID {mouse.id} (Rows affected: {n})")

    def create(product: Product) -> None:
        service.create_product(product)
        print(f"Product created: {product.name}")

    steps = (
        ("Dropping Table if Exists", [("drop table", service.drop_table_if_exists)]),
        ("Creating/Verifying Table", [("create table", service.create_table_if_not_exists)]),
        ("CREATE Operation", [
            ("create laptop", lambda: create(laptop)),
            ("create mouse", lambda: create(mouse)),
        ]),
        ("READ Operation", [("read all", lambda: print_products(service))]),
        ("UPDATE Operation", [
            ("update laptop", update_laptop),
            ("read all", lambda: print_products(service)),
        ]),
        ("DELETE Operation", [
            ("delete mouse", delete_mouse),
            ("read all", lambda: print_products(service)),
        ]),
    )

    for title, ops in steps:
        _banner(title)
        for label, fn in ops:
            result = attempt(label, fn)
            if not result.ok:
                return _report_failure(result)

    _banner("CRUD Operations Completed Successfully")
    return EXIT_OK


def main(config_dir: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> int:
    try:
        cfg = load_settings(config_dir, environ)
    except ConfigError as e:
        print(e)
        return EXIT_CONFIG_ERROR

    setup_logger(cfg.log_level)
    try:
        return run_demo(get_product_service(cfg))
    finally:
        if cfg.pause_on_exit:
            _pause()


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
