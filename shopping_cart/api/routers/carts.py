#shopping_cart/api/routers/carts.py
from datetime import datetime, timezone
from functools import lru_cache
from typing import Dict

import requests
from fastapi import APIRouter, Depends, Header, HTTPException, Query

from shopping_cart.domain.cart import Cart
from shopping_cart.domain.conditions import Amount, DISCOUNT, Percentage
from shopping_cart.domain.schemas import CartOut, Coupon, CouponIn, ItemIn, ItemUpdateIn
from shopping_cart.errors import InvalidCoupon, LimitExceeded
from shopping_cart.services.cart_service import CartService
from shopping_cart.services.product_client import ProductClient
from shopping_cart.storage.base import DEFAULT_INSTANCE

router = APIRouter(prefix="/cart", tags=["cart"])


@lru_cache
def get_cart_service() -> CartService:
    return CartService()


def get_product_client() -> ProductClient:
    return ProductClient()


def get_coupons() -> Dict[str, Coupon]:
    """Coupons known to the application, keyed by code. Override in the host app."""
    return {}


def get_cart(
    x_session_id: str | None = Header(None),
    user_id: int | None = Query(None),
    instance: str = Query(DEFAULT_INSTANCE),
    service: CartService = Depends(get_cart_service),
) -> Cart:
    try:
        return service.cart(session_id=x_session_id, user_id=user_id, instance=instance)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def coupon_validator(coupons: Dict[str, Coupon]):
    """Checks activity window and minimum purchase, then registers the discount."""

    def validate(code: str, cart: Cart) -> bool:
        coupon = coupons.get(code)
        now = datetime.now(timezone.utc)

        if coupon is None or not coupon.is_active:
            return False
        if coupon.starts_at and _aware(coupon.starts_at) > now:
            return False
        if coupon.expires_at and _aware(coupon.expires_at) < now:
            return False
        if cart.subtotal() < coupon.minimum_purchase:
            return False

        value = Percentage(coupon.value) if coupon.type == "percentage" else Amount(coupon.value)
        cart.condition("coupon", DISCOUNT, value)
        return True

    return validate


@router.get("/", response_model=CartOut)
def view_cart(cart: Cart = Depends(get_cart)):
    return cart.to_dict()


@router.post("/items", response_model=CartOut)
def add_item(
    payload: ItemIn,
    cart: Cart = Depends(get_cart),
    products: ProductClient = Depends(get_product_client),
):
    try:
        product = products.fetch_product(payload.product_id)
    except requests.HTTPError as e:
        if e.response is not None and e.response.status_code == 404:
            raise HTTPException(status_code=404, detail="Product not found")
        raise HTTPException(status_code=502, detail="Product service unavailable")
    except requests.RequestException:
        raise HTTPException(status_code=502, detail="Product service unavailable")

    try:
        cart.add(products.as_buyable(product), payload.quantity, payload.attributes)
    except (LimitExceeded, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    return cart.to_dict()


@router.put("/items/{item_id}", response_model=CartOut)
def update_item(item_id: str, payload: ItemUpdateIn, cart: Cart = Depends(get_cart)):
    try:
        item = cart.update(item_id, {"quantity": payload.quantity})
    except (LimitExceeded, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    if item is None:
        raise HTTPException(status_code=404, detail="Item not found in cart")
    return cart.to_dict()


@router.delete("/items/{item_id}", response_model=CartOut)
def remove_item(item_id: str, cart: Cart = Depends(get_cart)):
    cart.remove(item_id)
    return cart.to_dict()


@router.delete("/", response_model=CartOut)
def clear_cart(cart: Cart = Depends(get_cart)):
    cart.clear()
    return cart.to_dict()


@router.post("/coupon", response_model=CartOut)
def apply_coupon(
    payload: CouponIn,
    cart: Cart = Depends(get_cart),
    coupons: Dict[str, Coupon] = Depends(get_coupons),
):
    try:
        cart.apply_coupon(payload.coupon_code, coupon_validator(coupons))
    except InvalidCoupon:
        raise HTTPException(status_code=400, detail="Invalid or expired coupon code")
    return cart.to_dict()


@router.delete("/coupon", response_model=CartOut)
def remove_coupon(cart: Cart = Depends(get_cart)):
    cart.remove_condition("coupon")
    return cart.to_dict()
