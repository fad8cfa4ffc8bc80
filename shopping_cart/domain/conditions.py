# shopping_cart/domain/conditions.py
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Union

from shopping_cart.domain.money import to_decimal

DISCOUNT = "discount"
FEE = "fee"
TAX = "tax"
CONDITION_TYPES = (DISCOUNT, FEE, TAX)

TARGET_SUBTOTAL = "subtotal"
TARGET_TOTAL = "total"
TARGET_PERCENTAGE = "percentage"


@dataclass(frozen=True)
class Amount:
    """A literal currency amount."""
    amount: Decimal

    def resolve(self, base: Decimal) -> Decimal:
        return self.amount

    def serialize(self) -> Decimal:
        return self.amount


@dataclass(frozen=True)
class Percentage:
    """A percentage of some base amount (10 means 10%)."""
    percent: Decimal

    def resolve(self, base: Decimal) -> Decimal:
        return base * self.percent / 100

    def serialize(self) -> str:
        return f"{self.percent}%"


ConditionValue = Union[Amount, Percentage]


def parse_value(raw: Any, target: str | None = None) -> ConditionValue:
    """
    Turn a raw condition value into a tagged one.

    "10%" is a percentage, 10 or "10" is an amount. Passing the
    "percentage" target makes a bare number a percentage as well; only item
    conditions are read that way.
    """
    if isinstance(raw, (Amount, Percentage)):
        return raw

    if isinstance(raw, str) and "%" in raw:
        return Percentage(to_decimal(raw.replace("%", "").strip()))

    if target == TARGET_PERCENTAGE:
        return Percentage(to_decimal(raw))

    return Amount(to_decimal(raw))


@dataclass
class Condition:
    """A discount, fee or tax rule attached to a cart or to a single item."""
    type: str
    value: ConditionValue
    target: str = TARGET_SUBTOTAL
    name: str | None = None
    rules: dict = field(default_factory=dict)

    def __post_init__(self):
        if self.type not in CONDITION_TYPES:
            raise ValueError(f"Unknown condition type: {self.type}")
        self.value = parse_value(self.value)

    def resolve(self, base: Decimal) -> Decimal:
        return self.value.resolve(base)

    @classmethod
    def for_item(cls, data: dict) -> "Condition":
        """Item condition: a bare number aimed at the "percentage" target is a percentage."""
        target = data.get("target") or TARGET_SUBTOTAL
        return cls(
            type=data["type"],
            value=parse_value(data["value"], target),
            target=target,
            name=data.get("name"),
            rules=dict(data.get("rules") or {}),
        )

    @classmethod
    def from_dict(cls, data: dict) -> "Condition":
        return cls(
            type=data["type"],
            value=data["value"],
            target=data.get("target") or TARGET_SUBTOTAL,
            name=data.get("name"),
            rules=dict(data.get("rules") or {}),
        )

    def to_dict(self) -> dict:
        data: dict[str, Any] = {}
        if self.name is not None:
            data["name"] = self.name
        data["type"] = self.type
        data["value"] = self.value.serialize()
        data["target"] = self.target
        if self.name is not None or self.rules:
            data["rules"] = dict(self.rules)
        return data
