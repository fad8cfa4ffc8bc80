# shopping_cart/domain/buyable.py
from typing import TYPE_CHECKING, Any, Callable, Mapping, Protocol, runtime_checkable

if TYPE_CHECKING:
    from shopping_cart.domain.cart import Cart
    from shopping_cart.domain.cart_item import CartItem

# resolves a batch of ids of one buyable type to their entities
BuyableResolver = Callable[[list[int]], Mapping[int, Any]]


@runtime_checkable
class Buyable(Protocol):
    """
    Anything that can be put in a cart.

    Implementations may also define ``buyable_type``; otherwise the class
    name is used as the type discriminator.
    """
    id: int
    name: str
    price: Any


def buyable_type_of(buyable: Any) -> str:
    return getattr(buyable, "buyable_type", None) or type(buyable).__qualname__


def buyable_key(buyable: Any) -> tuple[str, int]:
    if isinstance(buyable, Mapping):
        return buyable["buyable_type"], int(buyable.get("buyable_id", buyable.get("id")))
    return buyable_type_of(buyable), int(buyable.id)


def snapshot_buyable(buyable: Any, quantity: int, attributes: dict) -> dict:
    """
    Item data copied out of a buyable.

    Only plain values are kept, never the entity itself. A mapping may carry
    a live entity under "buyable"; it is dropped. A mapping "id" names the
    buyable, never the cart item: it fills "buyable_id" when that is absent.
    """
    if isinstance(buyable, Mapping):
        data = {k: v for k, v in buyable.items() if k not in ("buyable", "id")}
        if "buyable_id" not in data and "id" in buyable:
            data["buyable_id"] = buyable["id"]
        data["quantity"] = quantity
        data["attributes"] = attributes
        return data

    data = {
        "buyable_type": buyable_type_of(buyable),
        "buyable_id": buyable.id,
        "name": getattr(buyable, "name", None) or "Product",
        "price": getattr(buyable, "price", None) or 0,
        "quantity": quantity,
        "attributes": attributes,
    }
    tax_rate = getattr(buyable, "tax_rate", None)
    if tax_rate is not None:
        data["tax_rate"] = tax_rate
    return data


def add_to_cart(cart: "Cart", buyable: Any, quantity: int = 1, attributes: dict | None = None) -> "CartItem":
    return cart.add(buyable, quantity, attributes)


def cart_item(cart: "Cart", buyable: Any) -> "CartItem | None":
    return cart.find(*buyable_key(buyable))


def in_cart(cart: "Cart", buyable: Any) -> bool:
    return cart_item(cart, buyable) is not None


def remove_from_cart(cart: "Cart", buyable: Any) -> bool:
    item = cart_item(cart, buyable)
    if item is None:
        return False
    return cart.remove(item.id)
