# shopping_cart/celery_worker.py
from celery import Celery

from shopping_cart.utils.settings import (
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    PURGE_INTERVAL_SECONDS,
)

celery_app = Celery(
    "shopping_cart",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# tasks have to be imported explicitly so the worker registers them
celery_app.conf.imports = ("shopping_cart.tasks.expire",)

celery_app.conf.beat_schedule = {
    "purge-expired-carts": {
        "task": "shopping_cart.tasks.expire.purge_expired_carts_task",
        "schedule": PURGE_INTERVAL_SECONDS,
    },
}

celery_app.conf.timezone = "UTC"
