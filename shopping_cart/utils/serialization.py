# shopping_cart/utils/serialization.py
import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any


def json_default(value: Any) -> Any:
    # money goes out as a string so nothing is lost to float rounding
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dumps(value: Any, **kwargs) -> str:
    return json.dumps(value, default=json_default, **kwargs)


def jsonable(value: Any) -> Any:
    """Plain JSON types only, e.g. before handing a value to a JSON column."""
    return json.loads(dumps(value))
