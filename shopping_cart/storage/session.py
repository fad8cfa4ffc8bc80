# shopping_cart/storage/session.py
import copy
import json
import re
from functools import wraps
from typing import Any, Protocol

import redis
from redis.exceptions import RedisError

from shopping_cart.errors import StorageError
from shopping_cart.storage.base import DEFAULT_INSTANCE, Snapshot
from shopping_cart.utils.config import ConfigAccessor
from shopping_cart.utils.logging import get_logger
from shopping_cart.utils.retry import redis_retry
from shopping_cart.utils.serialization import dumps
from shopping_cart.utils.settings import REDIS_URL

logger = get_logger(__name__)


class SessionStore(Protocol):
    """
    Key-value session. Keys are dotted paths: forgetting a key also drops
    every key below it ("shopping_cart" takes "shopping_cart.abc.default").
    """

    def get(self, key: str) -> Any: ...

    def put(self, key: str, value: Any) -> None: ...

    def has(self, key: str) -> bool: ...

    def forget(self, key: str) -> None: ...


class ArraySessionStore:
    """In-process session, for tests and single-process apps."""

    def __init__(self):
        self._data: dict[str, Any] = {}

    def get(self, key: str) -> Any:
        return copy.deepcopy(self._data.get(key))

    def put(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def has(self, key: str) -> bool:
        return key in self._data

    def forget(self, key: str) -> None:
        prefix = f"{key}."
        for k in [k for k in self._data if k == key or k.startswith(prefix)]:
            del self._data[k]


def _storage_errors(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except RedisError as e:
            logger.error(f"Redis session {fn.__name__} failed: {e}")
            raise StorageError(f"Redis session {fn.__name__} failed") from e
    return wrapper


class RedisSessionStore:
    """
    Session values kept as JSON strings in Redis.
    Decimals are written as strings.
    """

    def __init__(self, client: redis.Redis | None = None, url: str | None = None, ttl: int | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl

    @_storage_errors
    @redis_retry()
    def get(self, key: str) -> Any:
        raw = self.redis.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    @_storage_errors
    @redis_retry()
    def put(self, key: str, value: Any) -> None:
        self.redis.set(name=key, value=dumps(value), ex=self.ttl)

    @_storage_errors
    @redis_retry()
    def has(self, key: str) -> bool:
        return bool(self.redis.exists(key))

    @_storage_errors
    @redis_retry()
    def forget(self, key: str) -> None:
        pattern = re.sub(r"([*?\[\]\\])", r"\\\1", key) + ".*"
        keys = [key, *self.redis.scan_iter(match=pattern)]
        self.redis.delete(*keys)


class SessionStorage:
    """Cart snapshots stored in a session under "{session.key}.{identifier}.{instance}"."""

    def __init__(self, store: SessionStore, config: ConfigAccessor):
        self.store = store
        self.config = config

    def _key(self, identifier: str, instance: str) -> str:
        return f"{self.config.session_key}.{identifier}.{instance}"

    def get(self, identifier: str, instance: str = DEFAULT_INSTANCE) -> Snapshot | None:
        return self.store.get(self._key(identifier, instance))

    def put(self, identifier: str, snapshot: Snapshot, instance: str = DEFAULT_INSTANCE) -> None:
        key = self._key(identifier, instance)
        logger.debug(f"Session put {key}")
        self.store.put(key, snapshot)

    def has(self, identifier: str, instance: str = DEFAULT_INSTANCE) -> bool:
        return self.store.has(self._key(identifier, instance))

    def forget(self, identifier: str, instance: str = DEFAULT_INSTANCE) -> None:
        self.store.forget(self._key(identifier, instance))

    def flush(self) -> None:
        self.store.forget(self.config.session_key)
