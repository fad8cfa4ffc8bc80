# shopping_cart/services/product_client.py
import requests

from shopping_cart.utils.retry import http_retry
from shopping_cart.utils.settings import PRODUCT_SERVICE_URL
from shopping_cart.utils.logging import get_logger

logger = get_logger(__name__)


class ProductClient:
    """
    HTTP client of the product service.

    Products are plain dicts ({"id", "name", "price", ...}). ``fetch_products``
    has the resolver signature expected by ``Cart.load_buyables``.
    """

    buyable_type = "product"

    def __init__(self, base_url: str | None = None, timeout: int = 2):
        self.base_url = (base_url or PRODUCT_SERVICE_URL).rstrip("/")
        self.timeout = timeout

    @http_retry()
    def fetch_product(self, product_id: int) -> dict:
        url = f"{self.base_url}/products/{product_id}"
        logger.info(f"ProductClient GET {url}")

        resp = requests.get(url, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    @http_retry()
    def fetch_products(self, product_ids: list[int]) -> dict[int, dict]:
        if not product_ids:
            return {}

        url = f"{self.base_url}/products"
        logger.info(f"ProductClient GET {url} for {len(product_ids)} ids")

        resp = requests.get(
            url,
            params={"ids": ",".join(str(i) for i in product_ids)},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return {int(p["id"]): p for p in resp.json()}

    def as_buyable(self, product: dict) -> dict:
        """Item data for ``Cart.add`` built from a product payload."""
        return {
            "buyable_type": self.buyable_type,
            "buyable_id": product["id"],
            "name": product.get("name") or "Product",
            "price": product.get("price") or 0,
        }
