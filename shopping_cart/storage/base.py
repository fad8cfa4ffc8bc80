# shopping_cart/storage/base.py
from typing import Any, Protocol

DEFAULT_INSTANCE = "default"

# {"items": [...], "metadata": {...}, "conditions": {...}}
Snapshot = dict[str, Any]


class CartStorage(Protocol):
    """Persistence of cart snapshots keyed by (identifier, instance)."""

    def get(self, identifier: str, instance: str = DEFAULT_INSTANCE) -> Snapshot | None:
        ...

    def put(self, identifier: str, snapshot: Snapshot, instance: str = DEFAULT_INSTANCE) -> None:
        ...

    def has(self, identifier: str, instance: str = DEFAULT_INSTANCE) -> bool:
        ...

    def forget(self, identifier: str, instance: str = DEFAULT_INSTANCE) -> None:
        ...

    def flush(self) -> None:
        """Drop every cart held by this backend."""
        ...
