# shopping_cart/data/models/cart.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, JSON, Index, UniqueConstraint
from sqlalchemy.orm import relationship

from shopping_cart.data.database import Base
from shopping_cart.utils.settings import CARTS_TABLE


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CartModel(Base):
    __tablename__ = CARTS_TABLE

    id = Column(Integer, primary_key=True)
    identifier = Column(String(255), nullable=False)
    instance = Column(String(255), nullable=False, default="default")

    # "metadata" is reserved on declarative classes
    cart_metadata = Column("metadata", JSON, nullable=True)
    conditions = Column(JSON, nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    items = relationship(
        "CartItemModel",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItemModel.position",
    )

    __table_args__ = (
        UniqueConstraint("identifier", "instance", name="carts_identifier_instance_unique"),
        Index("carts_lookup_index", "identifier", "instance", "expires_at"),
    )
