#import all models so SQLAlchemy registers them on Base.metadata

from shopping_cart.data.models.cart import CartModel
from shopping_cart.data.models.cart_item import CartItemModel

__all__ = ["CartModel", "CartItemModel"]
