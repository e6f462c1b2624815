from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterator

from .models_catalog import Product


@dataclass
class Cart:
    """Products picked at the till, one unit per entry."""

    entries: list[Product] = field(default_factory=list)

    def add(self, product: Product) -> None:
        self.entries.append(product)

    def remove(self, index: int) -> Product:
        return self.entries.pop(index)

    def clear(self) -> None:
        self.entries.clear()

    @property
    def items(self) -> tuple[Product, ...]:
        return tuple(self.entries)

    @property
    def total(self) -> Decimal:
        return sum((item.price for item in self.entries), Decimal("0"))

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def render(self) -> dict[str, object]:
        return {
            "count": len(self.entries),
            "total": self.total,
            "rows": [item.display_label for item in self.entries],
        }

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Product]:
        return iter(self.entries)
