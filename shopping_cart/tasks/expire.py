# shopping_cart/tasks/expire.py
from datetime import datetime, timezone

from sqlalchemy.orm import sessionmaker

from shopping_cart.celery_worker import celery_app
from shopping_cart.data.database import get_session_factory
from shopping_cart.repos.cart_repo import CartRepo
from shopping_cart.utils.config import ConfigAccessor
from shopping_cart.utils.logging import get_logger

logger = get_logger(__name__)


def purge_expired_carts(session_factory: sessionmaker, now: datetime | None = None) -> int:
    """Delete every cart whose expires_at has passed, with its items."""
    now = now or datetime.now(timezone.utc)

    with session_factory.begin() as db:
        deleted = CartRepo(db).delete_expired_carts(now)

    logger.info(f"Purged {deleted} expired carts")
    return deleted


@celery_app.task(name="shopping_cart.tasks.expire.purge_expired_carts_task")
def purge_expired_carts_task() -> int:
    logger.info("Purge expired carts task started")
    return purge_expired_carts(get_session_factory(ConfigAccessor().database_connection))
