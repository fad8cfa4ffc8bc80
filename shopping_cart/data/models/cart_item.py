from sqlalchemy import Column, Integer, BigInteger, ForeignKey, Numeric, String, DateTime, JSON, Index
from sqlalchemy.orm import relationship

from shopping_cart.data.database import Base
from shopping_cart.data.models.cart import utcnow
from shopping_cart.utils.settings import CARTS_TABLE, CART_ITEMS_TABLE


class CartItemModel(Base):
    __tablename__ = CART_ITEMS_TABLE

    # item ids come from the domain so they survive save/reload
    id = Column(String(64), primary_key=True)
    cart_id = Column(Integer, ForeignKey(f"{CARTS_TABLE}.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    buyable_type = Column(String(255), nullable=False)
    buyable_id = Column(BigInteger, nullable=False)
    name = Column(String(255), nullable=False)

    quantity = Column(Integer, nullable=False, default=1)
    price = Column(Numeric(15, 2), nullable=False)
    attributes = Column(JSON, nullable=True)
    conditions = Column(JSON, nullable=True)
    tax_rate = Column(Numeric(8, 4), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    cart = relationship("CartModel", back_populates="items")

    __table_args__ = (
        Index("items_buyable_index", "buyable_type", "buyable_id"),
    )
