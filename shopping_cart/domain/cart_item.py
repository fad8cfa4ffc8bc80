# shopping_cart/domain/cart_item.py
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from shopping_cart.domain.conditions import Condition, DISCOUNT, FEE
from shopping_cart.domain.money import ZERO, round_money, to_decimal
from shopping_cart.utils.config import ConfigAccessor
from shopping_cart.utils.currency import CurrencyFormatter
from shopping_cart.utils.serialization import jsonable


def new_item_id() -> str:
    return f"cart_item_{uuid.uuid4().hex}"


@dataclass(eq=False)
class CartItem:
    """
    One priced line of a cart.

    Name and price are copied from the buyable when the item is created and
    never follow later changes of the source entity. ``tax_rate`` is stored
    per item so a later change of the default rate does not rewrite history.
    ``buyable`` is a transient handle filled by ``Cart.load_buyables``.
    """
    buyable_type: str
    buyable_id: int
    name: str
    price: Decimal
    quantity: int = 1
    attributes: dict = field(default_factory=dict)
    conditions: list = field(default_factory=list)
    tax_rate: Decimal | None = None
    id: str = field(default_factory=new_item_id)
    buyable: Any = field(default=None, repr=False)
    config: ConfigAccessor = field(default_factory=ConfigAccessor, repr=False)
    formatter: CurrencyFormatter = field(init=False, repr=False)

    def __post_init__(self):
        self.buyable_id = int(self.buyable_id)
        self.quantity = int(self.quantity)
        self.price = round_money(self.price)

        if self.quantity < 1:
            raise ValueError("Quantity must be at least 1")
        if self.price < 0:
            raise ValueError("Price cannot be negative")

        if self.tax_rate is None:
            self.tax_rate = self.config.tax_default_rate
        self.tax_rate = to_decimal(self.tax_rate)
        self.formatter = CurrencyFormatter(self.config)

        # JSON-native values only, so merge identity survives a storage round trip
        self.attributes = jsonable(dict(self.attributes or {}))
        self.conditions = [
            c if isinstance(c, Condition) else Condition.for_item(c)
            for c in (self.conditions or [])
        ]

    # merge identity: same buyable and exactly the same attributes
    def matches(self, other: "CartItem") -> bool:
        return (
            self.buyable_type == other.buyable_type
            and self.buyable_id == other.buyable_id
            and self.attributes == other.attributes
        )

    @property
    def subtotal(self) -> Decimal:
        return round_money(self.price * self.quantity)

    @property
    def tax(self) -> Decimal:
        if not self.config.tax_enabled:
            return ZERO

        subtotal = self.subtotal
        if self.config.tax_included:
            # price already contains tax, back it out
            return round_money(subtotal - subtotal / (1 + self.tax_rate))

        return round_money(subtotal * self.tax_rate)

    @property
    def total(self) -> Decimal:
        subtotal = self.subtotal
        discount = self.condition_total(DISCOUNT)
        fee = self.condition_total(FEE)

        if self.config.tax_included:
            return round_money(subtotal - discount + fee)

        return round_money(subtotal + self.tax - discount + fee)

    def condition_total(self, condition_type: str) -> Decimal:
        subtotal = self.subtotal
        total = sum(
            (c.resolve(subtotal) for c in self.conditions if c.type == condition_type),
            ZERO,
        )
        return round_money(total)

    def formatted_price(self) -> str:
        return self.formatter.format(self.price)

    def formatted_subtotal(self) -> str:
        return self.formatter.format(self.subtotal)

    def formatted_tax(self) -> str:
        return self.formatter.format(self.tax)

    def formatted_total(self) -> str:
        return self.formatter.format(self.total)

    def to_snapshot(self) -> dict:
        """Persisted fields only."""
        return {
            "id": self.id,
            "buyable_type": self.buyable_type,
            "buyable_id": self.buyable_id,
            "name": self.name,
            "quantity": self.quantity,
            "price": self.price,
            "attributes": dict(self.attributes),
            "conditions": [c.to_dict() for c in self.conditions],
            "tax_rate": self.tax_rate,
        }

    def to_dict(self) -> dict:
        data = self.to_snapshot()
        data["subtotal"] = self.subtotal
        data["tax"] = self.tax
        data["total"] = self.total
        return data

    @classmethod
    def from_dict(cls, data: dict, config: ConfigAccessor | None = None) -> "CartItem":
        kwargs = dict(
            buyable_type=data["buyable_type"],
            buyable_id=data["buyable_id"],
            name=data.get("name") or "Product",
            price=data.get("price") or 0,
            quantity=data.get("quantity") or 1,
            attributes=data.get("attributes") or {},
            conditions=data.get("conditions") or [],
            tax_rate=data.get("tax_rate"),
            config=config or ConfigAccessor(),
        )
        if data.get("id"):
            kwargs["id"] = data["id"]
        return cls(**kwargs)
