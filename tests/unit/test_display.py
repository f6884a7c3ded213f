"""
Unit tests for the cost & display composer.
"""

from set_quoter.core.chains import get_chain
from set_quoter.core.models import Token
from set_quoter.quote import display

WETH = Token(
    address="0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2",
    symbol="WETH", name="Wrapped Ether", decimals=18,
)
USDC = Token(
    address="0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48",
    symbol="USDC", name="USD Coin", decimals=6,
)


def test_wei_to_gwei():
    assert display.wei_to_gwei(30 * 10**9) == 30.0


def test_gas_costs_usd_ethereum_two_significant_digits():
    assert display.gas_costs_usd(30, 200_000, 1234.5678, get_chain(1)) == "$7.4"


def test_gas_costs_usd_polygon_seven_significant_digits():
    assert display.gas_costs_usd(30, 200_000, 1234.5678, get_chain(137)) == "$7.407407"


def test_gas_costs_chain_currency():
    assert display.gas_costs_chain_currency(30, 200_000, get_chain(1)) == "0.0060000 ETH"
    assert display.gas_costs_chain_currency(30, 200_000, get_chain(137)) == "0.0060000 MATIC"


def test_token_display_amount():
    assert display.token_display_amount(1_500_000, USDC) == "1.5"
    assert display.token_display_amount(123_456_789 * 10**10, WETH) == "1.234568"


def test_token_price_usd():
    assert display.token_price_usd(10**18, WETH, 3000) == "$3,000.00"
    assert display.token_price_usd(0, WETH, 3000) == "$0.00"


def test_observed_slippage():
    # 1 WETH @ 3000 sold for 2940 USDC @ 1.0
    result = display.observed_slippage(10**18, 2_940 * 10**6, WETH, USDC, 3000, 1.0)
    assert result == "2.00%"


def test_observed_slippage_can_be_negative():
    result = display.observed_slippage(10**18, 3_030 * 10**6, WETH, USDC, 3000, 1.0)
    assert result == "-1.00%"


def test_observed_slippage_without_from_value():
    assert display.observed_slippage(10**18, 10**6, WETH, USDC, 0, 1.0) == "N/A"


def test_token_response():
    response = display.token_response(USDC)
    assert response.model_dump(by_alias=True) == {
        "symbol": "USDC",
        "name": "USD Coin",
        "address": "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48",
        "decimals": 6,
    }
