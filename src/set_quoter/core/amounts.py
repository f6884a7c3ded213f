"""
Fixed-point amount conversion and display formatting.

On-chain quantities are plain Python ints (token base units, or position
units at 18 decimals). Floats only appear in the formatting helpers at the
bottom of this module, after all on-chain arithmetic is done.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, localcontext

from set_quoter.core.errors import InvalidAmount

# Per-share fixed-point scale used by Set position units
SCALE = 10 ** 18

# Significant digits shown for token amounts
DISPLAY_SIGNIFICANT_DIGITS = 7

_DECIMAL_RE = re.compile(r"([0-9]*)(?:\.([0-9]*))?")


def to_base_units(amount: str | Decimal | int, decimals: int) -> int:
    """
    Convert a human-entered decimal amount into integer base units.

    Fractional digits beyond `decimals` are truncated, never rounded up.

    Args:
        amount: decimal string such as "1.5" (a Decimal or int is also accepted)
        decimals: the token's decimal precision

    Returns:
        int: amount * 10**decimals, floored

    Raises:
        InvalidAmount: if the amount is not a valid non-negative decimal
    """
    if isinstance(decimals, bool) or not isinstance(decimals, int) or decimals < 0:
        raise InvalidAmount(f"Invalid decimal precision: {decimals!r}", decimals=decimals)

    if isinstance(amount, bool):
        raise InvalidAmount(f"Invalid amount: {amount!r}", amount=amount)
    if isinstance(amount, int):
        text = str(amount)
    elif isinstance(amount, Decimal):
        if not amount.is_finite():
            raise InvalidAmount(f"Invalid amount: {amount}", amount=amount)
        text = format(amount, "f")
    elif isinstance(amount, str):
        text = amount.strip()
    else:
        raise InvalidAmount(f"Invalid amount type: {type(amount).__name__}", amount=amount)

    match = _DECIMAL_RE.fullmatch(text)
    if not text or match is None or text == ".":
        raise InvalidAmount(f"Invalid amount: {amount!r}", amount=amount)

    whole, fraction = match.group(1) or "0", match.group(2) or ""
    fraction = fraction[:decimals].ljust(decimals, "0")
    return int(whole) * 10 ** decimals + (int(fraction) if fraction else 0)


def to_display_units(value: int, decimals: int) -> Decimal:
    """Exact inverse of to_base_units: base units -> Decimal token amount."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidAmount(f"Invalid base-unit amount: {value!r}", amount=value)
    if isinstance(decimals, bool) or not isinstance(decimals, int) or decimals < 0:
        raise InvalidAmount(f"Invalid decimal precision: {decimals!r}", decimals=decimals)
    # Built from a string so the context precision never rounds it
    return Decimal(f"{value}E-{decimals}")


# ------------------------------------------------------------------
# Display formatting (float-safe, never fed back into on-chain math)
# ------------------------------------------------------------------

def format_token_amount(value: int, decimals: int) -> str:
    """Token amount rounded to 7 significant digits, plain notation."""
    amount = to_display_units(value, decimals)
    if amount == 0:
        return "0"
    with localcontext() as ctx:
        ctx.prec = DISPLAY_SIGNIFICANT_DIGITS
        ctx.rounding = ROUND_HALF_UP
        rounded = +amount
    return format(rounded.normalize(), "f")


def format_usd(amount: float, significant_digits: int | None = None) -> str:
    """
    Format a USD amount like "$1,234.56".

    With `significant_digits`, the value is rounded to that many significant
    digits and trailing zeros are dropped ("$0.1234568", "$1,200").
    """
    value = Decimal(repr(float(amount)))
    if significant_digits is None:
        rounded = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        text = f"{abs(rounded):,.2f}"
    elif value == 0:
        rounded = value
        text = "0"
    else:
        exponent = value.adjusted() - significant_digits + 1
        rounded = value.quantize(Decimal(1).scaleb(exponent), rounding=ROUND_HALF_UP)
        text = format(abs(rounded).normalize(), ",f")
    sign = "-" if rounded < 0 else ""
    return f"{sign}${text}"


def format_percentage(percentage: float) -> str:
    return f"{percentage:.2f}%"
