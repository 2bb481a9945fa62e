"""
Locale-tolerant amount parsing and locale display formatting.

Input accepts either "." or "," as the decimal point. Output follows the
en-US convention (1,234.5) or the es-ES convention (1.234,5).
"""
import re
from decimal import ROUND_HALF_UP, Decimal, DecimalException, localcontext
from typing import Iterable, Optional, Union

from core.exceptions import InvalidAmount

Number = Union[Decimal, int, float]

# Plain decimal literal with optional sign and exponent; no grouping characters
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# Accepted amounts stay below 10**41 and carry at most 40 fraction digits
MAX_INTEGER_DIGITS = 41
MAX_FRACTION_DIGITS = 40

_CENT = Decimal("0.01")
_COMMA_DECIMAL_TABLE = str.maketrans({",": ".", ".": ","})


def _to_decimal(text: str) -> Optional[Decimal]:
    if not _NUMBER_RE.fullmatch(text):
        return None
    try:
        return Decimal(text)
    except DecimalException:
        return None


def _in_range(value: Decimal) -> bool:
    return (
        value.adjusted() < MAX_INTEGER_DIGITS
        and value.as_tuple().exponent >= -MAX_FRACTION_DIGITS
    )


def parse_amount(raw: str) -> Decimal:
    """
    Parse an amount written with "." or "," as decimal point.

    The text is first read with "." as decimal point; if that fails the
    first "," is replaced by "." and the text is read again. Thousands
    separators are never stripped, so "1.234,56" and "1,234.56" both fail.

    Args:
        raw: Amount token as written by the user

    Returns:
        Parsed amount

    Raises:
        InvalidAmount: If neither reading yields a number, or the number is
            too large or has too many fraction digits
    """
    text = raw.strip()
    value = _to_decimal(text)
    if value is None:
        value = _to_decimal(text.replace(",", ".", 1))
    if value is None or not _in_range(value):
        raise InvalidAmount(raw)
    return value


def exact_sum(values: Iterable[Decimal]) -> Decimal:
    """
    Add amounts without rounding.

    The working precision is widened to hold every digit of the operands,
    so the result is exact whatever the default context says.
    """
    values = list(values)
    if not values:
        return Decimal(0)

    top = max(value.adjusted() for value in values)
    bottom = min(value.as_tuple().exponent for value in values)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, top - bottom + len(str(len(values))) + 2)
        return sum(values, Decimal(0))


def format_amount(value: Optional[Number], use_comma_decimal: bool = False) -> str:
    """
    Format an amount for display.

    Grouping is always on and at most two fraction digits are shown
    (ties rounded away from zero, trailing zeros dropped).

    Args:
        value: Amount to format; None, NaN or infinity yields an empty string
        use_comma_decimal: Use "," as decimal point and "." for grouping

    Returns:
        Formatted amount
    """
    if value is None:
        return ""

    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    if not amount.is_finite():
        return ""

    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 4)
        rounded = amount.quantize(_CENT, rounding=ROUND_HALF_UP)

    text = format(rounded, ",f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")

    if use_comma_decimal:
        text = text.translate(_COMMA_DECIMAL_TABLE)
    return text
