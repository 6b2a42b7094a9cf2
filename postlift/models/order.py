"""Order and line item records."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from postlift.models.fields import (
    normalize_email,
    parse_count,
    parse_price,
    parse_timestamp,
)


@dataclass(frozen=True)
class LineItem:
    """A purchased product line on an order."""

    title: str
    quantity: int = 1
    price: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "title", str(self.title or ""))
        object.__setattr__(self, "quantity", parse_count(self.quantity))
        object.__setattr__(self, "price", parse_price(self.price))

    @classmethod
    def create(cls, title: Any, quantity: Any = 1, price: Any = None) -> "LineItem":
        return cls(title=title, quantity=quantity, price=price)


@dataclass(frozen=True)
class Order:
    """
    An e-commerce order.

    Fields are normalized on construction, whatever the caller passes:
    `created_at` becomes timezone-aware UTC, `total_price` a non-negative
    float (0 when unparseable) and `customer_email` trimmed lowercase or
    None. Timestamps that cannot be parsed at all raise ValueError.
    """

    id: str
    created_at: datetime
    total_price: float
    customer_email: str | None = None
    line_items: tuple[LineItem, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "id", str(self.id))
        object.__setattr__(self, "created_at", parse_timestamp(self.created_at))
        object.__setattr__(self, "total_price", parse_price(self.total_price))
        object.__setattr__(self, "customer_email", normalize_email(self.customer_email))
        object.__setattr__(self, "line_items", tuple(self.line_items or ()))

    @classmethod
    def create(
        cls,
        id: str | int,
        created_at: datetime | str,
        total_price: Any,
        customer_email: str | None = None,
        line_items: list[LineItem] | tuple[LineItem, ...] = (),
    ) -> "Order":
        return cls(
            id=id,
            created_at=created_at,
            total_price=total_price,
            customer_email=customer_email,
            line_items=line_items,
        )

    @classmethod
    def from_shopify(cls, payload: dict[str, Any]) -> "Order":
        """
        Build an order from a Shopify order payload.

        The customer's email wins over the order-level email, matching how
        Shopify fills `customer` for logged-in buyers only.
        """
        customer = payload.get("customer") or {}
        email = customer.get("email") or payload.get("email")

        line_items = [
            LineItem.create(
                title=item.get("title"),
                quantity=item.get("quantity", 1),
                price=item.get("price"),
            )
            for item in payload.get("line_items") or []
        ]

        return cls.create(
            id=payload["id"],
            created_at=payload["created_at"],
            total_price=payload.get("total_price"),
            customer_email=email,
            line_items=line_items,
        )
