# shopping_cart/utils/currency.py
from decimal import Decimal, ROUND_HALF_UP

from shopping_cart.utils.config import ConfigAccessor


def number_format(
    amount,
    decimals: int = 2,
    decimal_separator: str = ".",
    thousand_separator: str = ",",
) -> str:
    value = Decimal(str(amount)).quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)

    sign = "-" if value < 0 else ""
    whole, _, fraction = f"{abs(value):f}".partition(".")
    grouped = f"{int(whole):,}".replace(",", thousand_separator)

    if decimals > 0:
        return f"{sign}{grouped}{decimal_separator}{fraction}"
    return f"{sign}{grouped}"


class CurrencyFormatter:
    """Formats amounts with the configured symbol, separators and precision."""

    def __init__(self, config: ConfigAccessor):
        self.config = config

    @property
    def code(self) -> str:
        return self.config.currency_code

    @property
    def symbol(self) -> str:
        return self.config.currency_symbol

    def format(self, amount, include_symbol: bool = True) -> str:
        formatted = number_format(
            amount,
            self.config.currency_decimals,
            self.config.decimal_separator,
            self.config.thousand_separator,
        )
        if include_symbol:
            return f"{self.symbol}{formatted}"
        return formatted

    def format_with_code(self, amount) -> str:
        return f"{self.format(amount, include_symbol=False)} {self.code}"
