"""Tests for cart identity and storage selection"""
from unittest.mock import Mock, patch

import pytest

from shopping_cart.services.cart_service import CartService, default_identifier
from shopping_cart.storage import (
    ArraySessionStore,
    DatabaseStorage,
    RedisSessionStore,
    SessionStorage,
    create_storage,
)


class TestDefaultIdentifier:

    def test_user_wins_over_session(self):
        assert default_identifier("sess-1", 42) == "user_42"

    def test_guest_uses_session_id(self):
        assert default_identifier("sess-1") == "sess-1"

    def test_neither_is_an_error(self):
        with pytest.raises(ValueError):
            default_identifier(None, None)


class TestCreateStorage:

    def test_session_driver(self, config, session_store):
        storage = create_storage(config, session_store=session_store)

        assert isinstance(storage, SessionStorage)
        assert storage.store is session_store

    def test_database_driver(self, make_config, session_factory):
        storage = create_storage(make_config(storage="database"), session_factory=session_factory)

        assert isinstance(storage, DatabaseStorage)
        assert storage.session_factory is session_factory

    def test_unknown_driver_falls_back_to_session(self, make_config):
        assert isinstance(create_storage(make_config(storage="file")), SessionStorage)

    def test_array_session_store_by_default(self, config):
        assert isinstance(create_storage(config).store, ArraySessionStore)

    def test_redis_session_store(self, make_config):
        config = make_config(session__store="redis", expiration=60)

        with patch("shopping_cart.storage.session.redis.Redis.from_url") as from_url:
            storage = create_storage(config)

        assert isinstance(storage, SessionStorage)
        assert isinstance(storage.store, RedisSessionStore)
        assert storage.store.redis is from_url.return_value
        assert storage.store.ttl == 3600

    def test_redis_session_store_without_expiration(self, make_config):
        config = make_config(session__store="redis", expiration=None)

        with patch("shopping_cart.storage.session.redis.Redis.from_url"):
            storage = create_storage(config)

        assert storage.store.ttl is None

    def test_unknown_session_store_falls_back_to_array(self, make_config):
        storage = create_storage(make_config(session__store="memcached"))

        assert isinstance(storage.store, ArraySessionStore)


class TestCartService:

    def test_guest_and_user_carts_are_separate(self, config, session_store, keyboard):
        service = CartService(config=config, session_store=session_store)

        service.cart(session_id="sess-1").add(keyboard)

        assert service.cart(session_id="sess-1").count() == 1
        assert service.cart(session_id="sess-1", user_id=7).is_empty()
        assert service.cart(session_id="other", user_id=7).identifier == "user_7"

    def test_instance(self, config, session_store, keyboard):
        service = CartService(config=config, session_store=session_store)

        service.cart(session_id="s", instance="wishlist").add(keyboard)

        assert service.cart(session_id="s").is_empty()
        assert service.cart(session_id="s", instance="wishlist").count() == 1

    def test_custom_identifier_policy(self, config, session_storage):
        service = CartService(
            config=config,
            storage=session_storage,
            identifier_policy=lambda session_id, user_id: f"tenant-a:{user_id or session_id}",
        )

        assert service.cart(session_id="s").identifier == "tenant-a:s"

    def test_resolvers_are_handed_to_carts(self, config, session_storage, keyboard):
        resolver = Mock(return_value={1: keyboard})
        service = CartService(config=config, storage=session_storage, resolvers={"product": resolver})
        cart = service.cart(session_id="s")
        cart.add(keyboard)

        cart.load_buyables()

        assert cart.items()[0].buyable is keyboard
