"""
Unit tests for the quote normalizer.
"""

import pytest

from set_quoter.core.errors import AggregatorUnavailable
from set_quoter.core.models import AggregatorQuote
from set_quoter.quote.normalizer import (
    apply_slippage,
    normalize_quote,
    slippage_tolerance_scaled,
)

TOTAL_SUPPLY = 10**24


def _quote(sell: int, buy: int) -> AggregatorQuote:
    return AggregatorQuote(sell_amount=sell, buy_amount=buy, calldata="0x")


def test_tolerance_scaled():
    assert slippage_tolerance_scaled(0) == 1000
    assert slippage_tolerance_scaled(2) == 980
    assert slippage_tolerance_scaled(0.5) == 995
    assert slippage_tolerance_scaled(100) == 0


def test_tolerance_scaled_floors_sub_permille_slippage():
    # 999.5 is floored, giving slightly more protection than configured
    assert slippage_tolerance_scaled(0.05) == 999


@pytest.mark.parametrize("bad", [-1, 100.01, 250])
def test_tolerance_rejects_out_of_range(bad):
    with pytest.raises(ValueError):
        slippage_tolerance_scaled(bad)


def test_apply_slippage():
    assert apply_slippage(2 * 10**20, 2) == 196 * 10**18
    assert apply_slippage(999, 2) == 979  # 979.02 floored


def test_normalize_example():
    delta = normalize_quote(_quote(10**20, 2 * 10**20), TOTAL_SUPPLY, 2)
    assert delta.from_units == 10**14
    assert delta.to_units == 196 * 10**12
    assert delta.to_units < 2 * 10**14


def test_zero_slippage_keeps_quoted_amount():
    delta = normalize_quote(_quote(10**20, 2 * 10**20), TOTAL_SUPPLY, 0)
    assert delta.to_units == 2 * 10**14


def test_slippage_monotonic():
    previous = None
    for slippage in range(0, 101):
        delta = normalize_quote(_quote(10**20, 2 * 10**20), TOTAL_SUPPLY, slippage)
        if previous is not None:
            assert delta.to_units < previous
        previous = delta.to_units


def test_slippage_never_increases_output_for_fractional_steps():
    outputs = [
        normalize_quote(_quote(10**20, 12_345_678_901_234), TOTAL_SUPPLY, s / 20).to_units
        for s in range(0, 41)
    ]
    assert outputs == sorted(outputs, reverse=True)


def test_from_units_truncate():
    delta = normalize_quote(_quote(10**6 - 1, 0), TOTAL_SUPPLY, 2)
    assert delta.from_units == 0
    assert delta.to_units == 0


def test_rejects_zero_sell_amount():
    with pytest.raises(AggregatorUnavailable) as exc_info:
        normalize_quote(_quote(0, 10), TOTAL_SUPPLY, 2)
    assert exc_info.value.stage == "normalization"


def test_rejects_negative_buy_amount():
    with pytest.raises(AggregatorUnavailable):
        normalize_quote(_quote(10, -1), TOTAL_SUPPLY, 2)
