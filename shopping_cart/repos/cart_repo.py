# shopping_cart/repos/cart_repo.py
from datetime import datetime
from typing import Iterable

from sqlalchemy import delete, insert, or_, select, update
from sqlalchemy.orm import Session

from shopping_cart.data.models.cart import CartModel
from shopping_cart.data.models.cart_item import CartItemModel


def _active(now: datetime):
    return or_(CartModel.expires_at.is_(None), CartModel.expires_at > now)


class CartRepo:
    """Row-level queries on carts and cart items. Transactions belong to the caller."""

    def __init__(self, db: Session):
        self.db = db

    def find_cart(self, identifier: str, instance: str) -> CartModel | None:
        stmt = select(CartModel).where(
            CartModel.identifier == identifier,
            CartModel.instance == instance,
        )
        return self.db.scalars(stmt).first()

    def find_active_cart(self, identifier: str, instance: str, now: datetime) -> CartModel | None:
        stmt = select(CartModel).where(
            CartModel.identifier == identifier,
            CartModel.instance == instance,
            _active(now),
        )
        return self.db.scalars(stmt).first()

    def active_exists(self, identifier: str, instance: str, now: datetime) -> bool:
        stmt = select(CartModel.id).where(
            CartModel.identifier == identifier,
            CartModel.instance == instance,
            _active(now),
        )
        return self.db.scalars(stmt).first() is not None

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.flush()
        return cart

    def get_cart_items(self, cart_id: int) -> list[CartItemModel]:
        stmt = (
            select(CartItemModel)
            .where(CartItemModel.cart_id == cart_id)
            .order_by(CartItemModel.position)
        )
        return list(self.db.scalars(stmt))

    def get_cart_item_ids(self, cart_id: int) -> set[str]:
        stmt = select(CartItemModel.id).where(CartItemModel.cart_id == cart_id)
        return set(self.db.scalars(stmt))

    def delete_cart_items(self, cart_id: int, item_ids: Iterable[str]) -> None:
        item_ids = list(item_ids)
        if not item_ids:
            return
        self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.id.in_(item_ids),
            )
        )

    def insert_cart_items(self, rows: list[dict]) -> None:
        if rows:
            self.db.execute(insert(CartItemModel), rows)

    def update_cart_items(self, rows: list[dict]) -> None:
        # ORM bulk UPDATE by primary key: every row carries its "id"
        if rows:
            self.db.execute(update(CartItemModel), rows)

    def delete_carts(self, cart_ids: list[int]) -> int:
        if not cart_ids:
            return 0
        # items first, SQLite does not enforce ON DELETE CASCADE by default
        self.db.execute(delete(CartItemModel).where(CartItemModel.cart_id.in_(cart_ids)))
        result = self.db.execute(delete(CartModel).where(CartModel.id.in_(cart_ids)))
        return result.rowcount

    def delete_cart(self, identifier: str, instance: str) -> int:
        stmt = select(CartModel.id).where(
            CartModel.identifier == identifier,
            CartModel.instance == instance,
        )
        return self.delete_carts(list(self.db.scalars(stmt)))

    def delete_expired_carts(self, now: datetime) -> int:
        stmt = select(CartModel.id).where(CartModel.expires_at <= now)
        return self.delete_carts(list(self.db.scalars(stmt)))

    def delete_all(self) -> None:
        self.db.execute(delete(CartItemModel))
        self.db.execute(delete(CartModel))
