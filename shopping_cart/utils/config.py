# shopping_cart/utils/config.py
from decimal import Decimal
from typing import Any, Mapping

from shopping_cart.utils import settings

_MISSING = object()

DEFAULTS: dict[str, Any] = {
    "storage": "session",
    "database.connection": None,
    "database.carts_table": "carts",
    "database.cart_items_table": "cart_items",
    "session.key": "shopping_cart",
    "session.store": "array",
    "tax.enabled": True,
    "tax.default_rate": 0.0,
    "tax.included_in_price": False,
    "currency.code": "USD",
    "currency.symbol": "$",
    "currency.decimals": 2,
    "currency.decimal_separator": ".",
    "currency.thousand_separator": ",",
    "expiration": 10080,
    "limits.max_items": 100,
    "limits.max_quantity_per_item": 999,
}


def env_config() -> dict[str, Any]:
    """Configuration tree built from the environment (see utils/settings.py)."""
    return {
        "storage": settings.CART_STORAGE,
        "database": {
            "connection": settings.CART_DB_CONNECTION,
            "carts_table": settings.CARTS_TABLE,
            "cart_items_table": settings.CART_ITEMS_TABLE,
        },
        "session": {"key": "shopping_cart", "store": settings.CART_SESSION_STORE},
        "tax": {
            "enabled": settings.CART_TAX_ENABLED,
            "default_rate": settings.CART_TAX_RATE,
            "included_in_price": settings.CART_TAX_INCLUDED,
        },
        "currency": {
            "code": settings.CART_CURRENCY,
            "symbol": settings.CART_CURRENCY_SYMBOL,
            "decimals": 2,
            "decimal_separator": ".",
            "thousand_separator": ",",
        },
        "expiration": settings.CART_EXPIRATION,
        "limits": {
            "max_items": settings.CART_MAX_ITEMS,
            "max_quantity_per_item": settings.CART_MAX_QUANTITY,
        },
    }


def _lookup(source: Mapping, key: str) -> Any:
    # flat dotted keys win over nested lookup
    if key in source:
        return source[key]

    node: Any = source
    for part in key.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return _MISSING
        node = node[part]
    return node


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _as_optional_int(value: Any) -> int | None:
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in ("", "null", "none"):
        return None
    return int(value)


class ConfigAccessor:
    """
    Read-through view over a configuration source.

    The source is any mapping, nested (``{"tax": {"enabled": True}}``) or flat
    with dotted keys (``{"tax.enabled": True}``). Missing keys fall back to
    DEFAULTS. Every key is read once and memoized on this object; call
    ``invalidate()`` after changing the source at runtime.
    """

    def __init__(self, source: Mapping[str, Any] | None = None):
        self._source = env_config() if source is None else source
        self._memo: dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._memo:
            value = _lookup(self._source, key)
            if value is _MISSING:
                value = DEFAULTS.get(key, default)
            self._memo[key] = value
        return self._memo[key]

    def invalidate(self, key: str | None = None) -> None:
        if key is None:
            self._memo.clear()
        else:
            self._memo.pop(key, None)

    # --- storage ---
    @property
    def storage_driver(self) -> str:
        return str(self.get("storage"))

    @property
    def database_connection(self) -> str | None:
        return self.get("database.connection")

    @property
    def carts_table(self) -> str:
        return self.get("database.carts_table")

    @property
    def cart_items_table(self) -> str:
        return self.get("database.cart_items_table")

    @property
    def session_key(self) -> str:
        return self.get("session.key")

    @property
    def session_store(self) -> str:
        return str(self.get("session.store"))

    @property
    def expiration(self) -> int | None:
        """Sliding expiry window in minutes, None when carts never expire."""
        return _as_optional_int(self.get("expiration"))

    # --- tax ---
    @property
    def tax_enabled(self) -> bool:
        return _as_bool(self.get("tax.enabled"))

    @property
    def tax_included(self) -> bool:
        return _as_bool(self.get("tax.included_in_price"))

    @property
    def tax_default_rate(self) -> Decimal:
        return Decimal(str(self.get("tax.default_rate") or 0))

    # --- currency ---
    @property
    def currency_code(self) -> str:
        return self.get("currency.code")

    @property
    def currency_symbol(self) -> str:
        return self.get("currency.symbol")

    @property
    def currency_decimals(self) -> int:
        return int(self.get("currency.decimals"))

    @property
    def decimal_separator(self) -> str:
        return self.get("currency.decimal_separator")

    @property
    def thousand_separator(self) -> str:
        return self.get("currency.thousand_separator")

    # --- limits ---
    @property
    def max_items(self) -> int:
        return int(self.get("limits.max_items"))

    @property
    def max_quantity(self) -> int:
        return int(self.get("limits.max_quantity_per_item"))
