# shopping_cart/data/database.py
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from shopping_cart.utils.settings import DATABASE_URL

Base = declarative_base()


@lru_cache
def get_engine(url: str | None = None) -> Engine:
    url = url or DATABASE_URL
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args)


def get_session_factory(url: str | None = None) -> sessionmaker:
    return sessionmaker(bind=get_engine(url), autoflush=False, expire_on_commit=False)


def init_db(engine: Engine | None = None) -> None:
    # models must be imported so they are registered on Base.metadata
    from shopping_cart.data import models  # noqa: F401

    Base.metadata.create_all(bind=engine or get_engine())
