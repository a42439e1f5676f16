"""
Fixed-point conversion between decimal strings and integer token units.

Every amount that enters the engine as a decimal string goes through
`to_fixed_point` and every amount that leaves it goes through
`from_fixed_point`. All arithmetic in between is done on integers.
"""

from decimal import Decimal, InvalidOperation, ROUND_DOWN, localcontext
from typing import Optional, Union

from curve_engine.errors import PrecisionError

DECIMALS = 18
ONE = 10 ** DECIMALS

# Enough digits for uint256 values expressed with 18 decimals
_PRECISION = 100
_QUANTUM = Decimal(1).scaleb(-DECIMALS)

AmountLike = Union[str, int, float, Decimal]


def _to_decimal(value: AmountLike) -> Decimal:
    if isinstance(value, bool):
        raise PrecisionError(f"Invalid amount: {value!r}")
    if isinstance(value, float):
        # repr of a float is the shortest string that round-trips
        value = repr(value)
    try:
        return Decimal(value.strip() if isinstance(value, str) else value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise PrecisionError(f"Invalid amount: {value!r}") from e


def truncate(value: AmountLike, decimals: int = DECIMALS) -> Decimal:
    """
    Truncate a decimal value toward zero at `decimals` places.

    Args:
        value: Decimal string, int, float or Decimal

    Returns:
        Decimal with at most `decimals` fractional digits

    Raises:
        PrecisionError: If the value is malformed or not finite
    """
    amount = _to_decimal(value)
    if not amount.is_finite():
        raise PrecisionError(f"Amount must be finite, got {value!r}")

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        try:
            return amount.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_DOWN)
        except InvalidOperation as e:
            raise PrecisionError(f"Amount out of range: {value!r}") from e


def to_fixed_point(
    value: AmountLike,
    decimals: int = DECIMALS,
    allow_negative: bool = False,
) -> int:
    """
    Convert a decimal amount into integer smallest units.

    The value is truncated at the 18th decimal place first, so spurious
    digits beyond the supported precision are dropped instead of failing.

    Raises:
        PrecisionError: If the value is malformed, non-finite, or negative
            while `allow_negative` is False
    """
    amount = truncate(value, decimals)
    if amount < 0 and not allow_negative:
        raise PrecisionError(f"Amount must not be negative, got {value!r}")

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return int(amount.scaleb(decimals))


def from_fixed_point(amount: int, decimals: int = DECIMALS) -> str:
    """
    Render integer smallest units as a decimal string.

    Always carries at least one fractional digit ("1.0", "0.5") and never
    trailing zeros beyond that.
    """
    amount = int(amount)
    sign = "-" if amount < 0 else ""
    whole, fraction = divmod(abs(amount), 10 ** decimals)
    fraction_str = str(fraction).rjust(decimals, "0").rstrip("0") or "0"
    return f"{sign}{whole}.{fraction_str}"


def to_decimal(amount: int, decimals: int = DECIMALS) -> Decimal:
    """Integer smallest units as an exact Decimal."""
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return Decimal(int(amount)).scaleb(-decimals)


def format_ratio(numerator: int, denominator: int) -> Optional[str]:
    """
    Display ratio of two amounts with the same scale, truncated to 18 places.

    Returns None when the denominator is zero.
    """
    if denominator == 0:
        return None

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        ratio = (Decimal(int(numerator)) / Decimal(int(denominator))).quantize(
            _QUANTUM, rounding=ROUND_DOWN
        )
        text = format(ratio.normalize(), "f")
    return text if "." in text else f"{text}.0"
