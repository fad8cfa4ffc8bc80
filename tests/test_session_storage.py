"""Tests for session-backed cart storage"""
import json
from decimal import Decimal
from unittest.mock import Mock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from shopping_cart.errors import StorageError
from shopping_cart.storage import ArraySessionStore, RedisSessionStore, SessionStorage


SNAPSHOT = {"items": [], "metadata": {"note": "x"}, "conditions": {}}


class TestArraySessionStore:

    def test_values_are_copied(self):
        store = ArraySessionStore()
        value = {"items": [1]}
        store.put("a", value)

        value["items"].append(2)
        fetched = store.get("a")
        fetched["items"].append(3)

        assert store.get("a") == {"items": [1]}

    def test_forget_drops_descendants_only(self):
        store = ArraySessionStore()
        store.put("cart", 1)
        store.put("cart.a.default", 2)
        store.put("cart.b.wishlist", 3)
        store.put("cartography", 4)

        store.forget("cart")

        assert not store.has("cart")
        assert not store.has("cart.a.default")
        assert not store.has("cart.b.wishlist")
        assert store.get("cartography") == 4


class TestSessionStorage:

    def test_key_layout(self, session_store, session_storage):
        session_storage.put("sess-1", SNAPSHOT, "wishlist")

        assert session_store.has("shopping_cart.sess-1.wishlist")
        assert session_storage.get("sess-1", "wishlist") == SNAPSHOT
        assert session_storage.get("sess-1") is None

    def test_has_and_forget(self, session_storage):
        session_storage.put("sess-1", SNAPSHOT)
        session_storage.put("sess-1", SNAPSHOT, "wishlist")

        session_storage.forget("sess-1")

        assert not session_storage.has("sess-1")
        assert session_storage.has("sess-1", "wishlist")

    def test_flush_drops_every_cart(self, session_store, session_storage):
        session_store.put("other", "kept")
        session_storage.put("sess-1", SNAPSHOT)
        session_storage.put("sess-2", SNAPSHOT, "wishlist")

        session_storage.flush()

        assert not session_storage.has("sess-1")
        assert not session_storage.has("sess-2", "wishlist")
        assert session_store.get("other") == "kept"

    def test_custom_session_key(self, session_store, make_config):
        storage = SessionStorage(session_store, make_config(**{"session.key": "carts"}))

        storage.put("u", SNAPSHOT)

        assert session_store.has("carts.u.default")


class TestRedisSessionStore:

    def test_put_serializes_decimals(self):
        client = Mock()
        store = RedisSessionStore(client=client, ttl=120)

        store.put("shopping_cart.s.default", {"price": Decimal("9.90")})

        client.set.assert_called_once_with(
            name="shopping_cart.s.default",
            value=json.dumps({"price": "9.90"}),
            ex=120,
        )

    def test_get(self):
        client = Mock()
        client.get.return_value = '{"items": []}'
        store = RedisSessionStore(client=client)

        assert store.get("k") == {"items": []}

    def test_get_missing(self):
        client = Mock()
        client.get.return_value = None

        assert RedisSessionStore(client=client).get("k") is None

    def test_has(self):
        client = Mock()
        client.exists.return_value = 0

        assert RedisSessionStore(client=client).has("k") is False

    def test_forget_deletes_key_and_descendants(self):
        client = Mock()
        client.scan_iter.return_value = iter(["shopping_cart.a.default", "shopping_cart.b.default"])
        store = RedisSessionStore(client=client)

        store.forget("shopping_cart")

        client.scan_iter.assert_called_once_with(match="shopping_cart.*")
        client.delete.assert_called_once_with(
            "shopping_cart", "shopping_cart.a.default", "shopping_cart.b.default"
        )

    def test_redis_errors_become_storage_errors(self):
        client = Mock()
        client.get.side_effect = RedisConnectionError("down")
        store = RedisSessionStore(client=client)

        with pytest.raises(StorageError):
            store.get("k")

        # retried before giving up
        assert client.get.call_count == 3
