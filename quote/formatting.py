"""
Number parsing and es-CO display formatting.
Every field that leaves the quote engine goes through one of these helpers.
"""

import math
import re
from datetime import datetime
from decimal import Context, Decimal, ROUND_HALF_UP
from typing import Any, Optional

from dateutil import tz


THOUSANDS_SEP = '.'
DECIMAL_SEP = ','

_NON_NUMERIC = re.compile(r'[^0-9.\-]')


def parse_number(value: Any) -> float:
    """
    Parse a loosely formatted number.

    Currency symbols, spaces and thousands separators other than the dot are
    stripped before parsing ("$ 400,000" -> 400000.0).

    Args:
        value: Raw value (str, int, float or None)

    Returns:
        Parsed float, or NaN when the value is empty or unparsable
    """
    if value is None or isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    text = _NON_NUMERIC.sub('', str(value))
    if not text:
        return math.nan
    try:
        return float(text)
    except ValueError:
        return math.nan


def is_missing(value: Any) -> bool:
    """True for None, NaN and blank strings."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def _quantize(value: float, digits: int) -> Decimal:
    """Half-up quantize with enough precision for any finite float."""
    number = Decimal(repr(float(value)))
    context = Context(prec=max(28, number.adjusted() + digits + 2))
    return number.quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP, context=context)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a spreadsheet does (0.5 goes away from zero)."""
    if not math.isfinite(value):
        return value
    return float(_quantize(value, digits))


def _group(integer_digits: str) -> str:
    groups = []
    while len(integer_digits) > 3:
        groups.insert(0, integer_digits[-3:])
        integer_digits = integer_digits[:-3]
    groups.insert(0, integer_digits)
    return THOUSANDS_SEP.join(groups)


def format_co(value: Any, max_decimals: int = 3) -> str:
    """
    Format a magnitude with Colombian thousands grouping.

    Args:
        value: Number or numeric string
        max_decimals: Maximum fraction digits kept (trailing zeros dropped)

    Returns:
        e.g. "1.234.567" or "1.234,5"; empty string when not a number
    """
    number = parse_number(value)
    if not math.isfinite(number):
        return ''

    rounded = _quantize(number, max_decimals)
    sign = '-' if rounded < 0 else ''
    text = f"{rounded.copy_abs():f}"
    integer_part, _, fraction = text.partition('.')
    fraction = fraction.rstrip('0')

    out = sign + _group(integer_part)
    if fraction:
        out += DECIMAL_SEP + fraction
    return out


def format_decimal(value: Any, places: int = 2) -> str:
    """Fixed decimal places with a comma separator, no grouping ("3,14")."""
    number = parse_number(value)
    if not math.isfinite(number):
        return ''
    return f"{round_half_up(number, places):.{places}f}".replace('.', DECIMAL_SEP)


def format_percent(value: Optional[float], places: int = 2) -> str:
    """Format a ratio as a percentage ("37,59%"). None/NaN -> ''."""
    if value is None:
        return ''
    number = parse_number(value)
    if not math.isfinite(number):
        return ''
    return format_decimal(number * 100, places) + '%'


def format_raw(value: Optional[float]) -> str:
    """
    Plain numeric string without locale formatting.

    Integral values drop the fractional part (10.0 -> "10"), others keep
    their shortest repr (5.88 -> "5.88").
    """
    if value is None or not math.isfinite(value):
        return ''
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def format_date(now: Optional[datetime] = None, timezone: str = 'America/Bogota',
                date_format: str = '%d/%m/%Y') -> str:
    """Current (or given) date in the quote's local timezone."""
    zone = tz.gettz(timezone)
    if now is None:
        now = datetime.now(tz=zone)
    elif now.tzinfo is not None:
        now = now.astimezone(zone)
    return now.strftime(date_format)
