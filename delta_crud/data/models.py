from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional, Sequence


COLUMNS = ("id", "name", "price", "quantity")


@dataclass
class Product:
    id: int
    name: Optional[str]
    price: Decimal
    quantity: int

    @classmethod
    def from_row(cls, row: Sequence[Any]) -> "Product":
        # price goes through str() so a float from any driver is not carried over as binary
        return cls(
            id=int(row[0]),
            name=str(row[1]) if row[1] is not None else None,
            price=Decimal(str(row[2])),
            quantity=int(row[3]),
        )
