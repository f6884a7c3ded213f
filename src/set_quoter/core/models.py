"""
Core data models for Set trade quotes.

All on-chain quantities are ints: token amounts in base units, position units
at 18 decimals per Set share. Models are frozen once built.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class _CamelFrozen(BaseModel):
    """Frozen record serialised with camelCase keys (model_dump(by_alias=True))."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class Token(_Frozen):
    """An ERC-20 token from the token directory."""
    address: str
    symbol: str
    name: str
    decimals: int = Field(ge=0)

    @field_validator("address")
    @classmethod
    def _lower_address(cls, v: str) -> str:
        return v.lower()


class Position(_Frozen):
    """One component held by a Set."""
    component: str
    unit: int  # per-share, 18 decimals

    @field_validator("component")
    @classmethod
    def _lower_component(cls, v: str) -> str:
        return v.lower()


class SetSnapshot(_Frozen):
    """On-chain state of a Set at one point in time."""
    address: str
    manager: str
    total_supply: int = Field(gt=0)
    positions: tuple[Position, ...] = ()

    def position_for(self, component: str) -> Position | None:
        """Return the position for a component address, or None if not held."""
        component = component.lower()
        for position in self.positions:
            if position.component == component:
                return position
        return None


class TradeRequest(_CamelFrozen):
    """A request to quote selling `raw_amount` of from_token for to_token."""
    from_token: str
    to_token: str
    raw_amount: str
    from_address: str  # the Set
    exchange_type: str | None = None
    chain_id: int | None = None
    is_firm: bool = False


class AggregatorQuote(_Frozen):
    """A swap quote returned by a DEX aggregator. Untrusted input."""
    sell_amount: int
    buy_amount: int
    calldata: str
    price: float = 0.0
    guaranteed_price: float = 0.0


class PositionDelta(_Frozen):
    """Change to a Set's position array, in 18-decimal per-share units."""
    from_units: int
    to_units: int


class TokenResponse(_CamelFrozen):
    symbol: str
    name: str
    address: str
    decimals: int


class QuoteDisplay(_CamelFrozen):
    """Human-readable figures derived from the on-chain fields."""
    input_amount_raw: str
    input_amount: str
    quote_amount: str
    from_token_display_amount: str
    to_token_display_amount: str
    from_token_price_usd: str
    to_token_price_usd: str
    to_token: TokenResponse
    from_token: TokenResponse
    gas_costs_usd: str
    gas_costs_chain_currency: str
    fee_percentage: str
    slippage: str


class TradeQuote(_CamelFrozen):
    """
    A complete, executable trade quote.

    `slippage_percentage` is the configured tolerance applied to to_token_amount;
    `display.slippage` is the slippage observed from spot prices.
    """
    from_address: str = Field(alias="from")
    from_token_address: str
    to_token_address: str
    exchange_adapter_name: str
    calldata: str
    gas: str
    gas_price: str
    slippage_percentage: str
    from_token_amount: str
    to_token_amount: str
    display: QuoteDisplay
