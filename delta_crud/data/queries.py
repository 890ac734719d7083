from __future__ import annotations

from typing import Any, Optional

from delta_crud.data.models import COLUMNS, Product

Statement = tuple[str, dict[str, Any]]

_COLS = ", ".join(COLUMNS)


def escape_sql_string(value: str) -> str:
    """
    Double single quotes so `value` can sit inside a '...' literal.
    Only for spots where bound parameters are not accepted; this is not an injection guard.
    """
    return value.replace("'", "''")


def q_insert(table: str, product: Product) -> Statement:
    return (
        f"INSERT INTO {table} ({_COLS}) VALUES (:id, :name, :price, :quantity)",
        {"id": product.id, "name": product.name, "price": product.price, "quantity": product.quantity},
    )


def q_select_one(table: str, product_id: int) -> Statement:
    return f"SELECT {_COLS} FROM {table} WHERE id = :id", {"id": product_id}


def q_select_all(table: str) -> Statement:
    return f"SELECT {_COLS} FROM {table}", {}


def q_update(table: str, product: Product) -> Statement:
    return (
        f"UPDATE {table} SET name = :name, price = :price, quantity = :quantity WHERE id = :id",
        {"id": product.id, "name": product.name, "price": product.price, "quantity": product.quantity},
    )


def q_delete(table: str, product_id: int) -> Statement:
    return f"DELETE FROM {table} WHERE id = :id", {"id": product_id}


def q_create_table(table: str) -> Statement:
    return f"""
    CREATE TABLE IF NOT EXISTS {table} (
      id INT,
      name STRING,
      price DECIMAL(10,2),
      quantity INT
    ) USING DELTA
    """, {}


def q_drop_table(table: str) -> Statement:
    return f"DROP TABLE IF EXISTS {table}", {}


def q_show_schemas(catalog: str, like: Optional[str] = None) -> Statement:
    # SHOW statements do not take parameter markers
    like_clause = f" LIKE '{escape_sql_string(like)}'" if like else ""
    return f"SHOW SCHEMAS IN {catalog}{like_clause}", {}
