from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

PARTNER_MODEL = "res.partner"
PRODUCT_MODEL = "product.product"

PARTNER_FIELDS = (
    "id",
    "name",
    "email",
    "street",
    "street2",
    "city",
    "country_id",
    "phone",
    "customer_rank",
    "supplier_rank",
    "vat",
)
PRODUCT_FIELDS = ("id", "name", "list_price", "default_code", "qty_available")


@dataclass(frozen=True)
class Partner:
    id: int
    name: str = ""
    email: str = ""
    phone: str = ""
    vat: str = ""
    street: str = ""
    street2: str = ""
    city: str = ""
    country: str = ""
    is_customer: bool = False
    is_supplier: bool = False

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Product:
    id: int
    name: str = ""
    price: Decimal = Decimal("0")
    default_code: str = ""
    quantity: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        # Callers may pass floats or text; arithmetic downstream is Decimal only.
        for name in ("price", "quantity"):
            value = getattr(self, name)
            if not isinstance(value, Decimal):
                object.__setattr__(self, name, Decimal(str(value)))

    @property
    def display_label(self) -> str:
        return f"{self.name} (Ref: {self.default_code}) - ${self.price:.2f}"

    def __str__(self) -> str:
        return self.display_label
