# shopping_cart/storage/database.py
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from shopping_cart.data.models.cart import CartModel
from shopping_cart.data.models.cart_item import CartItemModel
from shopping_cart.domain.cart_item import new_item_id
from shopping_cart.domain.money import round_money, to_decimal
from shopping_cart.errors import StorageError
from shopping_cart.repos.cart_repo import CartRepo
from shopping_cart.storage.base import DEFAULT_INSTANCE, Snapshot
from shopping_cart.utils.config import ConfigAccessor
from shopping_cart.utils.logging import get_logger
from shopping_cart.utils.serialization import jsonable

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _item_snapshot(row: CartItemModel) -> dict:
    return {
        "id": row.id,
        "buyable_type": row.buyable_type,
        "buyable_id": row.buyable_id,
        "name": row.name,
        "quantity": row.quantity,
        "price": row.price,
        "attributes": row.attributes or {},
        "conditions": row.conditions or [],
        "tax_rate": row.tax_rate,
    }


class DatabaseStorage:
    """
    Cart snapshots normalized into a carts row plus one cart_items row per item.

    - put: single transaction (upsert cart, delete stale items, bulk insert, bulk update)
    - get: active carts only, slides expires_at forward on every read
    - expired carts are hidden but not deleted here (see tasks/expire.py)
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        config: ConfigAccessor,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.session_factory = session_factory
        self.config = config
        self.clock = clock

    @contextmanager
    def _transaction(self, action: str) -> Iterator[CartRepo]:
        try:
            with self.session_factory.begin() as db:
                yield CartRepo(db)
        except SQLAlchemyError as e:
            logger.error(f"Cart storage {action} failed: {e}")
            raise StorageError(f"Cart storage {action} failed") from e

    def _expires_at(self, now: datetime) -> datetime | None:
        minutes = self.config.expiration
        if minutes:
            return now + timedelta(minutes=minutes)
        return None

    def get(self, identifier: str, instance: str = DEFAULT_INSTANCE) -> Snapshot | None:
        now = self.clock()
        with self._transaction("get") as repo:
            cart = repo.find_active_cart(identifier, instance, now)
            if cart is None:
                return None

            # sliding expiration
            expires_at = self._expires_at(now)
            if expires_at is not None:
                cart.expires_at = expires_at

            items = repo.get_cart_items(cart.id)
            return {
                "items": [_item_snapshot(row) for row in items],
                "metadata": cart.cart_metadata or {},
                "conditions": cart.conditions or {},
            }

    def put(self, identifier: str, snapshot: Snapshot, instance: str = DEFAULT_INSTANCE) -> None:
        now = self.clock()
        with self._transaction("put") as repo:
            cart = repo.find_cart(identifier, instance)
            if cart is None:
                cart = repo.create_cart(CartModel(identifier=identifier, instance=instance))

            cart.cart_metadata = jsonable(snapshot.get("metadata") or {})
            cart.conditions = jsonable(snapshot.get("conditions") or {})
            cart.expires_at = self._expires_at(now)
            cart.updated_at = now

            rows = [
                self._item_row(cart.id, position, item, now)
                for position, item in enumerate(snapshot.get("items") or [])
            ]

            existing_ids = repo.get_cart_item_ids(cart.id)
            incoming_ids = {row["id"] for row in rows}

            repo.delete_cart_items(cart.id, existing_ids - incoming_ids)
            repo.insert_cart_items(
                [{**row, "created_at": now} for row in rows if row["id"] not in existing_ids]
            )
            repo.update_cart_items([row for row in rows if row["id"] in existing_ids])

            logger.debug(
                f"Stored cart {identifier}/{instance}: {len(rows)} items, "
                f"{len(existing_ids - incoming_ids)} removed"
            )

    def _item_row(self, cart_id: int, position: int, item: dict, now: datetime) -> dict:
        tax_rate = item.get("tax_rate")
        if tax_rate is None:
            tax_rate = self.config.tax_default_rate

        return {
            "id": item.get("id") or new_item_id(),
            "cart_id": cart_id,
            "position": position,
            "buyable_type": item["buyable_type"],
            "buyable_id": int(item["buyable_id"]),
            "name": item["name"],
            "quantity": int(item["quantity"]),
            "price": round_money(item["price"]),
            "attributes": jsonable(item.get("attributes") or {}),
            "conditions": jsonable(item.get("conditions") or []),
            "tax_rate": to_decimal(tax_rate),
            "updated_at": now,
        }

    def has(self, identifier: str, instance: str = DEFAULT_INSTANCE) -> bool:
        with self._transaction("has") as repo:
            return repo.active_exists(identifier, instance, self.clock())

    def forget(self, identifier: str, instance: str = DEFAULT_INSTANCE) -> None:
        with self._transaction("forget") as repo:
            repo.delete_cart(identifier, instance)

    def flush(self) -> None:
        with self._transaction("flush") as repo:
            repo.delete_all()
