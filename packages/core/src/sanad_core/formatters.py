"""Display formatting for amounts and file sizes."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

DEFAULT_CURRENCY = "DA"

_CENT = Decimal("0.01")
_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def format_amount(
    amount: Union[Decimal, int, float, str],
    currency: str = DEFAULT_CURRENCY,
) -> str:
    """Format an amount with thousands separators and a currency label.

    At most two decimals are shown and trailing zeros are dropped, so
    ``Decimal("3000")`` renders as ``"3,000 DA"`` and ``Decimal("1500.50")``
    as ``"1,500.5 DA"``.
    """
    value = Decimal(str(amount)).quantize(_CENT, rounding=ROUND_HALF_UP)
    if value == value.to_integral_value():
        text = f"{value:,.0f}"
    else:
        text = f"{value:,.2f}".rstrip("0")
    return f"{text} {currency}" if currency else text


def format_file_size(byte_size: int) -> str:
    """Render a byte count the way the upload widget shows it.

    Examples: ``0 Bytes``, ``512 Bytes``, ``1.5 KB``, ``5 MB``.
    """
    if byte_size <= 0:
        return "0 Bytes"

    value = float(byte_size)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{round(value, 2):g} {_SIZE_UNITS[unit]}"


__all__ = [
    "DEFAULT_CURRENCY",
    "format_amount",
    "format_file_size",
]
