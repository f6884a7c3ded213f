"""
Cost & display composer.

Everything here is presentation: floats and formatted strings derived from
the integer on-chain fields. Nothing computed here flows back into calldata,
position units or gas.
"""

from __future__ import annotations

from set_quoter.core.amounts import (
    format_percentage,
    format_token_amount,
    format_usd,
    to_display_units,
)
from set_quoter.core.chains import ChainInfo
from set_quoter.core.models import Token, TokenResponse

WEI_PER_GWEI = 10 ** 9


def wei_to_gwei(gas_price_wei: int) -> float:
    return gas_price_wei / WEI_PER_GWEI


def total_gas_cost(gas_price_gwei: float, gas: int) -> float:
    """Gas cost in the chain's native currency."""
    return gas_price_gwei / 1e9 * gas


def gas_costs_usd(gas_price_gwei: float, gas: int, native_price_usd: float, chain: ChainInfo) -> str:
    cost = total_gas_cost(gas_price_gwei, gas) * native_price_usd
    return format_usd(cost, significant_digits=chain.gas_cost_significant_digits)


def gas_costs_chain_currency(gas_price_gwei: float, gas: int, chain: ChainInfo) -> str:
    return f"{total_gas_cost(gas_price_gwei, gas):.7f} {chain.currency}"


def token_value_usd(amount: int, token: Token, price_usd: float) -> float:
    return float(to_display_units(amount, token.decimals)) * price_usd


def token_display_amount(amount: int, token: Token) -> str:
    return format_token_amount(amount, token.decimals)


def token_price_usd(amount: int, token: Token, price_usd: float) -> str:
    """USD value of `amount` of `token`, currency formatted."""
    return format_usd(token_value_usd(amount, token, price_usd))


def observed_slippage(
    from_amount: int,
    to_amount: int,
    from_token: Token,
    to_token: Token,
    from_price_usd: float,
    to_price_usd: float,
) -> str:
    """
    Slippage implied by spot prices, as a percentage string.

    This is what the market quote costs relative to spot, not the configured
    tolerance. "N/A" when the sold leg has no USD value.
    """
    from_value = token_value_usd(from_amount, from_token, from_price_usd)
    to_value = token_value_usd(to_amount, to_token, to_price_usd)
    if from_value == 0:
        return "N/A"
    return format_percentage((from_value - to_value) / from_value * 100)


def token_response(token: Token) -> TokenResponse:
    return TokenResponse(
        symbol=token.symbol,
        name=token.name,
        address=token.address,
        decimals=token.decimals,
    )
