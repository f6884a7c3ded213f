"""
TradeQuoteGenerator: the quote orchestrator.

Runs one strictly linear pipeline per request:

    snapshot -> notional -> aggregator quote -> normalization -> validation
    -> gas estimate -> gas price + spot prices (concurrent) -> composition

Any failure raises a QuoteError and no TradeQuote is built. Nothing is kept
between requests; all intermediate values are local to one call.

Usage:
    generator = TradeQuoteGenerator(QuoteConfig(), {1: clients})
    quote = await generator.generate(TradeRequest(
        from_token="0x9f8f...", to_token="0x0bc5...", raw_amount="1",
        from_address="0x1494...", chain_id=1,
    ))
    print(quote.model_dump(by_alias=True))
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Mapping
from dataclasses import dataclass
from typing import TypeVar

from set_quoter.core.address import normalize_address
from set_quoter.core.amounts import format_percentage, to_base_units
from set_quoter.core.chains import exchange_adapter_name, get_chain
from set_quoter.core.config import QuoteConfig
from set_quoter.core.errors import (
    STAGE_AGGREGATOR,
    STAGE_GAS_ESTIMATE,
    STAGE_PRICING,
    STAGE_REQUEST,
    STAGE_SNAPSHOT,
    CollaboratorTimeout,
    InvalidAmount,
    PriceUnavailable,
    UnsupportedChain,
)
from set_quoter.core.models import QuoteDisplay, TradeQuote, TradeRequest
from set_quoter.quote import display
from set_quoter.quote.interfaces import (
    DexAggregator,
    GasOracle,
    SetChainReader,
    TokenDirectory,
    TradeExecutor,
)
from set_quoter.quote.normalizer import normalize_quote
from set_quoter.quote.positions import calculate_from_token_amount
from set_quoter.quote.validator import validate_quote_values

logger = logging.getLogger("set_quoter.generator")

T = TypeVar("T")


@dataclass(frozen=True)
class NetworkClients:
    """The external collaborators for one network."""
    tokens: TokenDirectory
    chain_reader: SetChainReader
    aggregator: DexAggregator
    gas_oracle: GasOracle
    executor: TradeExecutor


class TradeQuoteGenerator:
    """
    Builds executable TradeQuotes for Set rebalancing trades.

    Args:
        config:   shared quote settings (slippage, fees, gas buffer, timeouts)
        networks: collaborators keyed by chain id
    """

    def __init__(self, config: QuoteConfig, networks: Mapping[int, NetworkClients]) -> None:
        self._config = config
        self._networks = dict(networks)

    @property
    def config(self) -> QuoteConfig:
        return self._config

    async def generate(self, request: TradeRequest) -> TradeQuote:
        """
        Generate a quote for one trade request.

        Raises:
            QuoteError: any subclass, naming the failed stage
        """
        config = self._config
        chain_id = request.chain_id if request.chain_id is not None else config.default_chain_id
        chain = get_chain(chain_id)
        clients = self._networks.get(chain_id)
        if clients is None:
            raise UnsupportedChain(f"chainId {chain_id} is not configured", chain_id=chain_id)

        exchange_type = request.exchange_type or config.default_exchange_type
        adapter_name = exchange_adapter_name(exchange_type)

        from_token_address = normalize_address(request.from_token)
        to_token_address = normalize_address(request.to_token)
        set_address = normalize_address(request.from_address)

        from_token, to_token = await _gather(
            self._call(clients.tokens.resolve(from_token_address), STAGE_REQUEST),
            self._call(clients.tokens.resolve(to_token_address), STAGE_REQUEST),
        )

        amount = to_base_units(request.raw_amount, from_token.decimals)
        if amount == 0:
            raise InvalidAmount("Amount must be greater than zero", amount=request.raw_amount)

        snapshot = await self._call(
            clients.chain_reader.fetch_snapshot(set_address, [from_token_address, to_token_address]),
            STAGE_SNAPSHOT,
        )
        logger.info(
            f"Fetched snapshot for {set_address}: supply={snapshot.total_supply} "
            f"positions={len(snapshot.positions)}"
        )

        quote_amount = calculate_from_token_amount(snapshot, from_token_address, amount)

        aggregator_quote = await self._call(
            clients.aggregator.quote(
                from_token_address,
                to_token_address,
                quote_amount,
                snapshot.manager,
                request.is_firm,
            ),
            STAGE_AGGREGATOR,
        )

        delta = normalize_quote(aggregator_quote, snapshot.total_supply, config.slippage_percentage)
        validate_quote_values(snapshot, from_token_address, to_token_address, delta)
        logger.info(
            f"Quote {from_token.symbol}->{to_token.symbol}: "
            f"from_units={delta.from_units} to_units={delta.to_units}"
        )

        raw_gas = await self._call(
            clients.executor.estimate_gas(
                set_address,
                adapter_name,
                from_token_address,
                delta.from_units,
                to_token_address,
                delta.to_units,
                aggregator_quote.calldata,
                snapshot.manager,
            ),
            STAGE_GAS_ESTIMATE,
        )
        gas = raw_gas * (100 + config.gas_buffer_percentage) // 100

        gas_price, prices = await _gather(
            self._call(clients.gas_oracle.current_gas_price(config.gas_speed), STAGE_PRICING),
            self._call(
                clients.tokens.spot_prices_usd(
                    [chain.native_token_address, from_token_address, to_token_address]
                ),
                STAGE_PRICING,
            ),
        )
        native_price = _price(prices, chain.native_token_address)
        from_price = _price(prices, from_token_address)
        to_price = _price(prices, to_token_address)

        gas_price_gwei = display.wei_to_gwei(gas_price)
        from_amount = aggregator_quote.sell_amount
        to_amount = aggregator_quote.buy_amount

        return TradeQuote(
            from_address=set_address,
            from_token_address=from_token_address,
            to_token_address=to_token_address,
            exchange_adapter_name=adapter_name,
            calldata=aggregator_quote.calldata,
            gas=str(gas),
            gas_price=str(gas_price),
            slippage_percentage=format_percentage(config.slippage_percentage),
            from_token_amount=str(delta.from_units),
            to_token_amount=str(delta.to_units),
            display=QuoteDisplay(
                input_amount_raw=request.raw_amount,
                input_amount=str(amount),
                quote_amount=str(quote_amount),
                from_token_display_amount=display.token_display_amount(from_amount, from_token),
                to_token_display_amount=display.token_display_amount(to_amount, to_token),
                from_token_price_usd=display.token_price_usd(from_amount, from_token, from_price),
                to_token_price_usd=display.token_price_usd(to_amount, to_token, to_price),
                to_token=display.token_response(to_token),
                from_token=display.token_response(from_token),
                gas_costs_usd=display.gas_costs_usd(gas_price_gwei, gas, native_price, chain),
                gas_costs_chain_currency=display.gas_costs_chain_currency(gas_price_gwei, gas, chain),
                fee_percentage=format_percentage(config.fee_percentage),
                slippage=display.observed_slippage(
                    from_amount, to_amount, from_token, to_token, from_price, to_price
                ),
            ),
        )

    async def _call(self, awaitable: Awaitable[T], stage: str) -> T:
        """Await a collaborator call under the configured timeout."""
        timeout = self._config.call_timeout
        try:
            return await asyncio.wait_for(awaitable, timeout)
        except asyncio.TimeoutError:
            raise CollaboratorTimeout(
                f"External call timed out after {timeout}s", stage=stage, timeout=timeout
            ) from None


async def _gather(*awaitables: Awaitable[T]) -> list[T]:
    """
    Run collaborator calls concurrently.

    If one fails the others are cancelled and awaited before the error propagates.
    """
    tasks = [asyncio.ensure_future(a) for a in awaitables]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


def _price(prices: Mapping[str, float], address: str) -> float:
    try:
        return prices[address.lower()]
    except KeyError:
        raise PriceUnavailable(f"No USD price for {address}", address=address) from None
