"""
Quote normalizer: aggregator amounts -> slippage-adjusted Set position units.
"""

from __future__ import annotations

from decimal import ROUND_FLOOR, Decimal

from set_quoter.core.amounts import SCALE
from set_quoter.core.errors import STAGE_NORMALIZATION, AggregatorUnavailable
from set_quoter.core.models import AggregatorQuote, PositionDelta

# Slippage tolerance is applied as an integer ratio over this multiplier
PERCENT_MULTIPLIER = 1000


def slippage_tolerance_scaled(slippage_percentage: float) -> int:
    """
    Return PERCENT_MULTIPLIER * (100 - slippage) / 100, floored to an int.

    Flooring keeps at least the configured protection: 0.05% slippage gives
    999, not 999.5 rounded up.
    """
    if not 0 <= slippage_percentage <= 100:
        raise ValueError(f"slippage_percentage must be between 0 and 100, got {slippage_percentage}")
    tolerance = Decimal(PERCENT_MULTIPLIER) * (100 - Decimal(str(slippage_percentage))) / 100
    return int(tolerance.to_integral_value(rounding=ROUND_FLOOR))


def apply_slippage(buy_amount: int, slippage_percentage: float) -> int:
    """Minimum acceptable buy amount after the configured slippage."""
    return buy_amount * slippage_tolerance_scaled(slippage_percentage) // PERCENT_MULTIPLIER


def to_position_units(amount: int, total_supply: int) -> int:
    return amount * SCALE // total_supply


def normalize_quote(
    quote: AggregatorQuote, total_supply: int, slippage_percentage: float
) -> PositionDelta:
    """
    Express an aggregator quote as a position delta on the Set.

    Raises:
        AggregatorUnavailable: if the quote carries negative or zero amounts
    """
    if quote.sell_amount <= 0 or quote.buy_amount < 0:
        raise AggregatorUnavailable(
            "Aggregator returned invalid amounts",
            stage=STAGE_NORMALIZATION,
            sell_amount=quote.sell_amount,
            buy_amount=quote.buy_amount,
        )
    from_units = to_position_units(quote.sell_amount, total_supply)
    to_units = to_position_units(apply_slippage(quote.buy_amount, slippage_percentage), total_supply)
    return PositionDelta(from_units=from_units, to_units=to_units)
