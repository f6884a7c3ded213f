"""
Capabilities the quote generator depends on.

The generator only talks to these protocols. Concrete adapters live in
set_quoter.defi; tests substitute plain fake classes.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from set_quoter.core.models import AggregatorQuote, SetSnapshot, Token


class TokenDirectory(Protocol):
    async def resolve(self, address: str) -> Token:
        """Return token metadata. Raises TokenNotFound."""
        ...

    async def spot_price_usd(self, address: str) -> float:
        """Return the USD spot price. Raises PriceUnavailable."""
        ...

    async def spot_prices_usd(self, addresses: Sequence[str]) -> dict[str, float]:
        """USD spot prices keyed by lower-cased address. Raises PriceUnavailable."""
        ...


class SetChainReader(Protocol):
    async def fetch_snapshot(
        self, set_address: str, watched_components: Sequence[str]
    ) -> SetSnapshot:
        """Read a Set's manager, total supply and positions. Raises ChainReadFailed."""
        ...


class DexAggregator(Protocol):
    async def quote(
        self,
        sell_token: str,
        buy_token: str,
        sell_amount: int,
        taker_address: str,
        firm: bool,
    ) -> AggregatorQuote:
        """Raises AggregatorUnavailable or NoLiquidity."""
        ...


class GasOracle(Protocol):
    async def current_gas_price(self, speed: str) -> int:
        """Gas price in wei. Raises GasPriceUnavailable."""
        ...


class TradeExecutor(Protocol):
    async def estimate_gas(
        self,
        set_address: str,
        adapter_name: str,
        from_token: str,
        from_units: int,
        to_token: str,
        to_units: int,
        calldata: str,
        caller: str,
    ) -> int:
        """Gas units for TradeModule.trade. Raises GasEstimationFailed."""
        ...
