"""
Cart exceptions.

Missing items are not errors: lookups return None and removal is a no-op.
"""


class CartError(Exception):
    """Base class for every error raised by the cart engine."""


class LimitExceeded(CartError):
    """Adding or updating would exceed max items per cart or max quantity per item."""


class InvalidCoupon(CartError):
    """The caller-supplied coupon validator rejected the code."""


class StorageError(CartError):
    """A storage backend failed to read or write a cart snapshot."""
