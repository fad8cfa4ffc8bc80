"""Shopping cart engine: priced line items, conditions, tax and pluggable storage."""

from shopping_cart.domain.buyable import Buyable
from shopping_cart.domain.cart import Cart
from shopping_cart.domain.cart_item import CartItem
from shopping_cart.domain.conditions import Amount, Condition, Percentage
from shopping_cart.errors import CartError, InvalidCoupon, LimitExceeded, StorageError
from shopping_cart.services.cart_service import CartService, default_identifier
from shopping_cart.storage import (
    ArraySessionStore,
    DatabaseStorage,
    RedisSessionStore,
    SessionStorage,
    create_storage,
)
from shopping_cart.utils.config import ConfigAccessor
from shopping_cart.utils.currency import CurrencyFormatter

__all__ = [
    "Amount",
    "ArraySessionStore",
    "Buyable",
    "Cart",
    "CartError",
    "CartItem",
    "CartService",
    "Condition",
    "ConfigAccessor",
    "CurrencyFormatter",
    "DatabaseStorage",
    "InvalidCoupon",
    "LimitExceeded",
    "Percentage",
    "RedisSessionStore",
    "SessionStorage",
    "StorageError",
    "create_storage",
    "default_identifier",
]
