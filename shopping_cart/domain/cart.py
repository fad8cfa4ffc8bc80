# shopping_cart/domain/cart.py
from decimal import Decimal
from typing import Any, Callable, Mapping

from shopping_cart.domain.buyable import BuyableResolver, snapshot_buyable
from shopping_cart.domain.cart_item import CartItem
from shopping_cart.domain.conditions import (
    Condition,
    DISCOUNT,
    FEE,
    TARGET_SUBTOTAL,
    TARGET_TOTAL,
)
from shopping_cart.domain.money import ZERO, round_money, to_decimal
from shopping_cart.errors import InvalidCoupon, LimitExceeded
from shopping_cart.storage.base import DEFAULT_INSTANCE, CartStorage
from shopping_cart.utils.config import ConfigAccessor
from shopping_cart.utils.currency import CurrencyFormatter
from shopping_cart.utils.logging import get_logger
from shopping_cart.utils.serialization import dumps, jsonable

logger = get_logger(__name__)

CouponValidator = Callable[[str, "Cart"], Any]


class Cart:
    """
    Cart of one owner (session or user) and one named instance.

    Loads its snapshot on construction and whenever the instance changes.
    Every mutating call clears the memoized aggregates and saves the snapshot
    back to storage before returning.
    """

    def __init__(
        self,
        storage: CartStorage,
        identifier: str,
        config: ConfigAccessor | None = None,
        instance: str = DEFAULT_INSTANCE,
        resolvers: Mapping[str, BuyableResolver] | None = None,
    ):
        self.storage = storage
        self.identifier = identifier
        self.config = config or ConfigAccessor()
        self.formatter = CurrencyFormatter(self.config)
        self.resolvers = dict(resolvers or {})
        self.instance_name = instance

        self._items: list[CartItem] = []
        self._conditions: dict[str, Condition] = {}
        self._metadata: dict[str, Any] = {}

        self._cached_subtotal: Decimal | None = None
        self._cached_tax: Decimal | None = None
        self._cached_discount: Decimal | None = None
        self._cached_total: Decimal | None = None

        self.load()

    # =====================================================
    # LIFECYCLE
    # =====================================================
    def instance(self, name: str) -> "Cart":
        self.instance_name = name
        self.load()
        return self

    def load(self) -> None:
        self._reset()
        data = self.storage.get(self.identifier, self.instance_name)

        if data:
            self._items = [CartItem.from_dict(i, self.config) for i in data.get("items") or []]
            self._metadata = dict(data.get("metadata") or {})
            self._conditions = {
                name: Condition.from_dict({"name": name, **c})
                for name, c in (data.get("conditions") or {}).items()
            }

        logger.debug(f"Loaded cart {self.identifier}/{self.instance_name} with {len(self._items)} items")

    def save(self) -> None:
        self.storage.put(self.identifier, self.to_snapshot(), self.instance_name)

    def to_snapshot(self) -> dict:
        return {
            "items": [item.to_snapshot() for item in self._items],
            "metadata": dict(self._metadata),
            "conditions": self._conditions_dict(),
        }

    def _reset(self) -> None:
        self._items = []
        self._conditions = {}
        self._metadata = {}
        self._clear_cache()

    def _clear_cache(self) -> None:
        self._cached_subtotal = None
        self._cached_tax = None
        self._cached_discount = None
        self._cached_total = None

    def _commit(self) -> None:
        self._clear_cache()
        self.save()

    # =====================================================
    # ITEMS
    # =====================================================
    def add(self, buyable: Any, quantity: int = 1, attributes: dict | None = None) -> CartItem:
        if quantity < 1:
            raise ValueError("Quantity must be at least 1")

        max_items = self.config.max_items
        if len(self._items) >= max_items:
            raise LimitExceeded(f"Cart cannot exceed {max_items} items")

        max_quantity = self.config.max_quantity
        if quantity > max_quantity:
            raise LimitExceeded(f"Quantity cannot exceed {max_quantity}")

        item = CartItem.from_dict(snapshot_buyable(buyable, quantity, dict(attributes or {})), self.config)

        existing = next((i for i in self._items if i.matches(item)), None)
        if existing:
            if existing.quantity + quantity > max_quantity:
                raise LimitExceeded(f"Quantity cannot exceed {max_quantity}")
            logger.info(
                f"Item {existing.id} already in cart {self.identifier}, "
                f"quantity {existing.quantity} -> {existing.quantity + quantity}"
            )
            existing.quantity += quantity
        else:
            logger.info(f"Adding {item.buyable_type}#{item.buyable_id} to cart {self.identifier} as {item.id}")
            self._items.append(item)

        self._commit()
        return existing or item

    def update(self, item_id: str, patch: Mapping[str, Any]) -> CartItem | None:
        item = self.get(item_id)
        if item is None:
            return None

        quantity = patch.get("quantity")
        if quantity is not None:
            quantity = int(quantity)
            if quantity < 1:
                raise ValueError("Quantity must be at least 1")
            if quantity > self.config.max_quantity:
                raise LimitExceeded(f"Quantity cannot exceed {self.config.max_quantity}")

        price = patch.get("price")
        if price is not None:
            price = round_money(price)
            if price < 0:
                raise ValueError("Price cannot be negative")

        if quantity is not None:
            item.quantity = quantity
        if price is not None:
            item.price = price
        if patch.get("attributes") is not None:
            item.attributes = jsonable({**item.attributes, **patch["attributes"]})

        logger.info(f"Updated item {item_id} in cart {self.identifier}")
        self._commit()
        return item

    def remove(self, item_id: str) -> bool:
        self._items = [i for i in self._items if i.id != item_id]
        self._commit()
        return True

    def get(self, item_id: str) -> CartItem | None:
        return next((i for i in self._items if i.id == item_id), None)

    def find(self, buyable_type: str, buyable_id: int) -> CartItem | None:
        buyable_id = int(buyable_id)
        return next(
            (i for i in self._items if i.buyable_type == buyable_type and i.buyable_id == buyable_id),
            None,
        )

    def items(self) -> list[CartItem]:
        return list(self._items)

    def count(self) -> int:
        return sum(i.quantity for i in self._items)

    def is_empty(self) -> bool:
        return not self._items

    def clear(self) -> None:
        self._reset()
        self.save()
        logger.info(f"Cleared cart {self.identifier}/{self.instance_name}")

    def destroy(self) -> None:
        self.storage.forget(self.identifier, self.instance_name)
        self._reset()
        logger.info(f"Destroyed cart {self.identifier}/{self.instance_name}")

    # =====================================================
    # CONDITIONS & COUPONS
    # =====================================================
    def condition(
        self,
        name: str,
        type: str,
        value: Any,
        target: str = TARGET_SUBTOTAL,
        rules: dict | None = None,
    ) -> "Cart":
        self._conditions[name] = Condition(
            type=type, value=value, target=target, name=name, rules=dict(rules or {})
        )
        self._commit()
        return self

    def remove_condition(self, name: str) -> "Cart":
        self._conditions.pop(name, None)
        self._commit()
        return self

    def get_conditions(self) -> dict[str, Condition]:
        return dict(self._conditions)

    def apply_coupon(self, code: str, validator: CouponValidator | None = None) -> "Cart":
        if validator is not None and not validator(code, self):
            logger.info(f"Coupon {code!r} rejected for cart {self.identifier}")
            raise InvalidCoupon(f"Invalid coupon code: {code}")

        self._metadata["coupon"] = code
        self._commit()
        return self

    def _conditions_dict(self) -> dict[str, dict]:
        return {name: c.to_dict() for name, c in self._conditions.items()}

    # =====================================================
    # AGGREGATES
    # =====================================================
    def subtotal(self) -> Decimal:
        if self._cached_subtotal is None:
            self._cached_subtotal = round_money(sum((i.subtotal for i in self._items), ZERO))
        return self._cached_subtotal

    def tax(self) -> Decimal:
        if self._cached_tax is None:
            self._cached_tax = round_money(sum((i.tax for i in self._items), ZERO))
        return self._cached_tax

    def discount(self) -> Decimal:
        if self._cached_discount is None:
            self._cached_discount = round_money(self._sum_conditions(DISCOUNT))
        return self._cached_discount

    def total(self) -> Decimal:
        if self._cached_total is None:
            fees = self._sum_conditions(FEE)
            self._cached_total = round_money(self._gross() - self.discount() + fees)
        return self._cached_total

    def _gross(self) -> Decimal:
        # base of "total"-target conditions
        return self.subtotal() + self.tax()

    def _condition_base(self, condition: Condition) -> Decimal:
        if condition.target == TARGET_TOTAL:
            return self._gross()
        return self.subtotal()

    def _sum_conditions(self, condition_type: str) -> Decimal:
        return sum(
            (
                to_decimal(c.resolve(self._condition_base(c)))
                for c in self._conditions.values()
                if c.type == condition_type
            ),
            ZERO,
        )

    def formatted_subtotal(self) -> str:
        return self.formatter.format(self.subtotal())

    def formatted_tax(self) -> str:
        return self.formatter.format(self.tax())

    def formatted_discount(self) -> str:
        return self.formatter.format(self.discount())

    def formatted_total(self) -> str:
        return self.formatter.format(self.total())

    # =====================================================
    # METADATA
    # =====================================================
    def set_metadata(self, key: str, value: Any) -> "Cart":
        self._metadata[key] = value
        self._commit()
        return self

    def get_metadata(self, key: str | None = None) -> Any:
        if key is None:
            return dict(self._metadata)
        return self._metadata.get(key)

    # =====================================================
    # BUYABLES
    # =====================================================
    def load_buyables(self, resolvers: Mapping[str, BuyableResolver] | None = None) -> "Cart":
        """
        Attach the source entity to every item, one resolver call per type.

        Types without a registered resolver are left untouched.
        """
        resolvers = {**self.resolvers, **(resolvers or {})}

        grouped: dict[str, list[CartItem]] = {}
        for item in self._items:
            grouped.setdefault(item.buyable_type, []).append(item)

        for buyable_type, items in grouped.items():
            resolver = resolvers.get(buyable_type)
            if resolver is None:
                logger.debug(f"No resolver for buyable type {buyable_type}, skipping")
                continue

            ids = list(dict.fromkeys(i.buyable_id for i in items))
            found = resolver(ids)
            for item in items:
                item.buyable = found.get(item.buyable_id)

        return self

    # =====================================================
    # SERIALIZATION
    # =====================================================
    def to_dict(self) -> dict:
        return {
            "identifier": self.identifier,
            "instance": self.instance_name,
            "items": [i.to_dict() for i in self._items],
            "count": self.count(),
            "subtotal": self.subtotal(),
            "tax": self.tax(),
            "discount": self.discount(),
            "total": self.total(),
            "conditions": self._conditions_dict(),
            "metadata": dict(self._metadata),
        }

    def to_json(self, **kwargs) -> str:
        return dumps(self.to_dict(), **kwargs)
