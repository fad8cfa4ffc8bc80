"""Pytest configuration and fixtures"""
import os
from dataclasses import dataclass
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("LOG_LEVEL", "WARNING")

from shopping_cart.data.database import Base  # noqa: E402
from shopping_cart.data import models  # noqa: E402,F401
from shopping_cart.storage import ArraySessionStore, DatabaseStorage, SessionStorage  # noqa: E402
from shopping_cart.utils.config import ConfigAccessor  # noqa: E402


BASE_CONFIG = {
    "storage": "session",
    "session.key": "shopping_cart",
    "tax.enabled": True,
    "tax.default_rate": 0.0,
    "tax.included_in_price": False,
    "expiration": 60,
    "limits.max_items": 100,
    "limits.max_quantity_per_item": 999,
}


@dataclass
class Product:
    """A buyable entity as the calling application would have it."""
    id: int
    name: str
    price: Decimal
    buyable_type: str = "product"


@pytest.fixture
def make_config():
    """Factory: ConfigAccessor over BASE_CONFIG with dotted-key overrides."""
    def _make(**overrides) -> ConfigAccessor:
        source = dict(BASE_CONFIG)
        source.update({key.replace("__", "."): value for key, value in overrides.items()})
        return ConfigAccessor(source)
    return _make


@pytest.fixture
def config(make_config):
    return make_config()


@pytest.fixture
def session_store():
    return ArraySessionStore()


@pytest.fixture
def session_storage(session_store, config):
    return SessionStorage(session_store, config)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db_storage(session_factory, config):
    return DatabaseStorage(session_factory, config)


@pytest.fixture
def keyboard():
    return Product(id=1, name="Keyboard", price=Decimal("100.00"))


@pytest.fixture
def mouse():
    return Product(id=2, name="Mouse", price=Decimal("49.50"))
