# shopping_cart/services/cart_service.py
from typing import Callable, Mapping

from sqlalchemy.orm import sessionmaker

from shopping_cart.domain.buyable import BuyableResolver
from shopping_cart.domain.cart import Cart
from shopping_cart.storage import CartStorage, SessionStore, create_storage
from shopping_cart.storage.base import DEFAULT_INSTANCE
from shopping_cart.utils.config import ConfigAccessor
from shopping_cart.utils.logging import get_logger

logger = get_logger(__name__)

IdentifierPolicy = Callable[[str | None, int | str | None], str]


def default_identifier(session_id: str | None, user_id: int | str | None = None) -> str:
    """Signed-in users own "user_<id>", guests own their session id."""
    if user_id is not None:
        return f"user_{user_id}"
    if not session_id:
        raise ValueError("Either a session id or a user id is required")
    return session_id


class CartService:
    """
    Builds carts for the current caller.

    Holds the pieces every cart shares (config, storage backend, buyable
    resolvers) and the policy that turns a session/user into a cart
    identifier. There is no ambient "current cart": callers ask for one and
    keep the handle.
    """

    def __init__(
        self,
        config: ConfigAccessor | None = None,
        storage: CartStorage | None = None,
        identifier_policy: IdentifierPolicy = default_identifier,
        resolvers: Mapping[str, BuyableResolver] | None = None,
        session_store: SessionStore | None = None,
        session_factory: sessionmaker | None = None,
    ):
        self.config = config or ConfigAccessor()
        self.storage = storage or create_storage(self.config, session_store, session_factory)
        self.identifier_policy = identifier_policy
        self.resolvers = dict(resolvers or {})

    def identifier_for(self, session_id: str | None = None, user_id: int | str | None = None) -> str:
        return self.identifier_policy(session_id, user_id)

    def cart(
        self,
        session_id: str | None = None,
        user_id: int | str | None = None,
        instance: str = DEFAULT_INSTANCE,
    ) -> Cart:
        identifier = self.identifier_for(session_id, user_id)
        logger.debug(f"Opening cart {identifier}/{instance}")
        return Cart(
            self.storage,
            identifier,
            config=self.config,
            instance=instance,
            resolvers=self.resolvers,
        )
