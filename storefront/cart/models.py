"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from typing import List, Union

from storefront.services.money import multiply, round_money, to_decimal, to_float


@dataclass
class CartLine:
    """Single product line in the cart."""
    product_id: str
    quantity: int
    price: Decimal

    def __post_init__(self):
        self.price = to_decimal(self.price)

    @property
    def total_price(self) -> Decimal:
        """Price for all units of the line."""
        return round_money(multiply(self.price, self.quantity))

    def to_dict(self) -> dict:
        """Shape of one element of the ``carts.items`` JSON column."""
        return {
            "product_id": self.product_id,
            "quantity": self.quantity,
            "price": to_float(self.price),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        return cls(
            product_id=str(data["product_id"]),
            quantity=int(data["quantity"]),
            price=to_decimal(data.get("price", 0)),
        )


@dataclass(frozen=True)
class GuestOwner:
    """Anonymous visitor identified by a locally persisted token."""
    session_id: str

    key_column = "session_id"

    @property
    def key(self) -> str:
        return self.session_id

    @property
    def is_guest(self) -> bool:
        return True


@dataclass(frozen=True)
class UserOwner:
    """Authenticated user."""
    user_id: str

    key_column = "user_id"

    @property
    def key(self) -> str:
        return self.user_id

    @property
    def is_guest(self) -> bool:
        return False


CartOwner = Union[GuestOwner, UserOwner]


@dataclass
class Cart:
    """Durable cart row: one per owner."""
    owner: CartOwner
    lines: List[CartLine] = field(default_factory=list)
    updated_at: str = ""

    def __post_init__(self):
        if not self.updated_at:
            self.updated_at = datetime.now(UTC).isoformat()

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def total_price(self) -> Decimal:
        return sum((line.total_price for line in self.lines), Decimal("0"))

    @classmethod
    def from_row(cls, owner: CartOwner, row: dict) -> "Cart":
        """Build from a ``carts`` row; a null ``items`` column is an empty cart."""
        items = row.get("items") or []
        return cls(
            owner=owner,
            lines=[CartLine.from_dict(item) for item in items],
            updated_at=row.get("updated_at") or "",
        )
