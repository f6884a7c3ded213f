"""
Unit tests for the position-unit calculator.
These run without network access (pure Python logic).
"""

import pytest

from set_quoter.core.amounts import SCALE
from set_quoter.core.errors import AmountExceedsAvailable, UnknownComponent
from set_quoter.core.models import Position, SetSnapshot
from set_quoter.quote.positions import (
    calculate_from_token_amount,
    calculate_notional,
    implied_max_notional,
)

MKR = "0x9f8f72aa9304c8b593d555f12ef6589cc3a579a2"
YFI = "0x0bc529c00c6401aef6d220be8c6ea1667f6ad93e"

TOTAL_SUPPLY = 1_000_000 * 10**18
HALF_PER_SHARE = 5 * 10**17


def test_implied_max():
    assert implied_max_notional(HALF_PER_SHARE, TOTAL_SUPPLY) == 500_000 * 10**18


def test_full_position_returned_unchanged():
    full = 500_000 * 10**18
    assert calculate_notional(HALF_PER_SHARE, TOTAL_SUPPLY, full) == full


def test_amount_above_position_fails():
    with pytest.raises(AmountExceedsAvailable, match="greater than quantity"):
        calculate_notional(HALF_PER_SHARE, TOTAL_SUPPLY, 500_001 * 10**18)


def test_amount_one_wei_above_position_fails():
    with pytest.raises(AmountExceedsAvailable):
        calculate_notional(HALF_PER_SHARE, TOTAL_SUPPLY, 500_000 * 10**18 + 1)


def test_partial_amount_round_trips_through_per_share_units():
    # 100 tokens -> 10**14 per share -> x 10**6 shares
    assert calculate_notional(HALF_PER_SHARE, TOTAL_SUPPLY, 100 * 10**18) == 100 * 10**18


def test_partial_amount_is_truncated_down():
    # 1.5 shares outstanding: total_supply // SCALE == 1
    total_supply = 15 * 10**17
    unit = 2 * 10**18
    result = calculate_notional(unit, total_supply, 10**18)
    assert result == 10**18 * SCALE // total_supply
    assert result < 10**18


def test_total_supply_below_one_share_quotes_zero():
    assert calculate_notional(10**18, 5 * 10**17, 10**17) == 0


def test_result_never_exceeds_available_or_request():
    cases = [
        (HALF_PER_SHARE, TOTAL_SUPPLY),
        (123_456_789, 7 * 10**18 + 3),
        (10**18, 10**18),
        (987_654_321_000, 33_333_333_333_333_333_333),
    ]
    for unit, total_supply in cases:
        implied_max = implied_max_notional(unit, total_supply)
        for amount in (0, 1, implied_max // 3, implied_max // 2, implied_max - 1, implied_max):
            result = calculate_notional(unit, total_supply, amount)
            assert result <= implied_max
            assert result <= amount
            assert (result == implied_max) == (amount == implied_max)


def test_calculate_from_snapshot():
    snapshot = SetSnapshot(
        address="0x1494ca1f11d487c2bbe4543e90080aeba4ba3c2b",
        manager="0x0dea6d942a2d8f594844f973366859616dd5ea50",
        total_supply=TOTAL_SUPPLY,
        positions=(Position(component=MKR.upper().replace("0X", "0x"), unit=HALF_PER_SHARE),),
    )
    assert calculate_from_token_amount(snapshot, MKR, 10**18) == 10**18


def test_unknown_component():
    snapshot = SetSnapshot(
        address="0x1494ca1f11d487c2bbe4543e90080aeba4ba3c2b",
        manager="0x0dea6d942a2d8f594844f973366859616dd5ea50",
        total_supply=TOTAL_SUPPLY,
        positions=(Position(component=MKR, unit=HALF_PER_SHARE),),
    )
    with pytest.raises(UnknownComponent) as exc_info:
        calculate_from_token_amount(snapshot, YFI, 10**18)
    assert exc_info.value.stage == "notional"
