# shopping_cart/storage/__init__.py
from sqlalchemy.orm import sessionmaker

from shopping_cart.storage.base import DEFAULT_INSTANCE, CartStorage, Snapshot
from shopping_cart.storage.database import DatabaseStorage
from shopping_cart.storage.session import (
    ArraySessionStore,
    RedisSessionStore,
    SessionStorage,
    SessionStore,
)
from shopping_cart.utils.config import ConfigAccessor
from shopping_cart.utils.logging import get_logger

logger = get_logger(__name__)


def create_storage(
    config: ConfigAccessor,
    session_store: SessionStore | None = None,
    session_factory: sessionmaker | None = None,
) -> CartStorage:
    """Pick the backend named by the "storage" setting; unknown names fall back to session."""
    driver = config.storage_driver

    if driver == "database":
        if session_factory is None:
            from shopping_cart.data.database import get_session_factory
            session_factory = get_session_factory(config.database_connection)
        return DatabaseStorage(session_factory, config)

    if driver != "session":
        logger.warning(f"Unknown cart storage driver {driver!r}, using session")

    if session_store is None:
        session_store = create_session_store(config)
    return SessionStorage(session_store, config)


def create_session_store(config: ConfigAccessor) -> SessionStore:
    """Session store named by "session.store": "redis" or the in-process "array"."""
    store = config.session_store

    if store == "redis":
        # keys live as long as a database cart would
        ttl = config.expiration * 60 if config.expiration else None
        return RedisSessionStore(ttl=ttl)

    if store != "array":
        logger.warning(f"Unknown session store {store!r}, using array")
    return ArraySessionStore()


__all__ = [
    "DEFAULT_INSTANCE",
    "CartStorage",
    "Snapshot",
    "DatabaseStorage",
    "SessionStorage",
    "SessionStore",
    "ArraySessionStore",
    "RedisSessionStore",
    "create_session_store",
    "create_storage",
]
