# shopping_cart/utils/retry.py
import requests
import redis
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from shopping_cart.utils.logging import get_logger

logger = get_logger(__name__)


def _log_retry(state):
    logger.warning(
        f"Retrying {state.fn.__qualname__} after {state.outcome.exception()!r} "
        f"(attempt {state.attempt_number})"
    )


def http_retry(attempts: int = 3):
    """Retry connection failures and timeouts of the product client. HTTP errors are not retried."""
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
        before_sleep=_log_retry,
    )


def redis_retry(attempts: int = 3):
    """Retry transient Redis failures of the session store."""
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(redis.RedisError),
        before_sleep=_log_retry,
    )
