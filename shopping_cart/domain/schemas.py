# shopping_cart/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, Field


class ItemIn(BaseModel):
    """Adding a product to the cart."""

    product_id: int = Field(..., gt=0, description="Product id (> 0)")
    quantity: int = Field(1, gt=0, description="Quantity (> 0)")
    attributes: Dict[str, Any] = Field(default_factory=dict, description="Variant selectors, e.g. size/color")


class ItemUpdateIn(BaseModel):
    quantity: int = Field(..., gt=0, description="New quantity (> 0)")


class CouponIn(BaseModel):
    coupon_code: str = Field(..., min_length=1, max_length=64)


class Coupon(BaseModel):
    """A coupon known to the calling application."""

    code: str
    type: Literal["percentage", "fixed"]
    value: Decimal = Field(..., ge=0)
    minimum_purchase: Decimal = Decimal("0.00")
    is_active: bool = True
    starts_at: datetime | None = None
    expires_at: datetime | None = None


class CartItemOut(BaseModel):
    id: str
    buyable_type: str
    buyable_id: int
    name: str
    quantity: int
    price: Decimal
    attributes: Dict[str, Any]
    conditions: List[Dict[str, Any]]
    tax_rate: Decimal
    subtotal: Decimal
    tax: Decimal
    total: Decimal


class CartOut(BaseModel):
    identifier: str
    instance: str
    items: List[CartItemOut]
    count: int
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal
    conditions: Dict[str, Dict[str, Any]]
    metadata: Dict[str, Any]
