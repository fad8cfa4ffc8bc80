# shopping_cart/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./shopping_cart.db")
REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", REDIS_URL)
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", REDIS_URL)
PRODUCT_SERVICE_URL = os.getenv("PRODUCT_SERVICE_URL", "http://product-service:8000")

# table names are fixed when the ORM models are declared
CARTS_TABLE = os.getenv("CART_CARTS_TABLE", "carts")
CART_ITEMS_TABLE = os.getenv("CART_ITEMS_TABLE", "cart_items")

CART_STORAGE = os.getenv("CART_STORAGE", "session")
CART_SESSION_STORE = os.getenv("CART_SESSION_STORE", "array")  # array | redis
CART_DB_CONNECTION = os.getenv("CART_DB_CONNECTION") or None
CART_CURRENCY = os.getenv("CART_CURRENCY", "USD")
CART_CURRENCY_SYMBOL = os.getenv("CART_CURRENCY_SYMBOL", "$")
CART_EXPIRATION = os.getenv("CART_EXPIRATION", "10080")  # minutes, "" or "null" = never
CART_MAX_ITEMS = int(os.getenv("CART_MAX_ITEMS", 100))
CART_MAX_QUANTITY = int(os.getenv("CART_MAX_QUANTITY", 999))
CART_TAX_ENABLED = os.getenv("CART_TAX_ENABLED", "true")
CART_TAX_RATE = os.getenv("CART_TAX_RATE", "0.0")
CART_TAX_INCLUDED = os.getenv("CART_TAX_INCLUDED", "false")

PURGE_INTERVAL_SECONDS = float(os.getenv("CART_PURGE_INTERVAL_SECONDS", 60 * 60))
