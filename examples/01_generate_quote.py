#!/usr/bin/env python3
"""
Example 01: Generate a rebalancing quote for DPI.

Quotes selling 1 MKR for YFI out of the DeFi Pulse Index on Ethereum,
using live CoinGecko, gas station, 0x and JSON-RPC data.

Usage:
    RPC_URL=https://... ZERO_EX_API_KEY=... python examples/01_generate_quote.py
    python examples/01_generate_quote.py 0.5     # sell 0.5 MKR
"""

import asyncio
import json
import sys

from set_quoter import QuoteConfig, QuoteError, TradeQuoteGenerator, TradeRequest
from set_quoter.defi import close_network, connect_network

MKR = "0x9f8f72aa9304c8b593d555f12ef6589cc3a579a2"
YFI = "0x0bc529c00C6401aEF6D220BE8C6Ea1667F6Ad93e"
DPI = "0x1494ca1f11d487c2bbe4543e90080aeba4ba3c2b"

raw_amount = sys.argv[1] if len(sys.argv) > 1 else "1"


async def main():
    config = QuoteConfig.from_env()
    clients = connect_network(1, config)
    generator = TradeQuoteGenerator(config, {1: clients})

    print(f"Quoting: {raw_amount} MKR -> YFI for DPI")
    print()

    try:
        quote = await generator.generate(TradeRequest(
            from_token=MKR,
            to_token=YFI,
            raw_amount=raw_amount,
            from_address=DPI,
            exchange_type="zeroex",
            chain_id=1,
        ))
    except QuoteError as e:
        print(f"[!] Quote failed at {e.stage}: {e.message}")
        return
    finally:
        await close_network(clients)

    print("=== Trade Quote ===")
    print(f"Sell:         {quote.display.from_token_display_amount} {quote.display.from_token.symbol}"
          f" ({quote.display.from_token_price_usd})")
    print(f"Buy:          {quote.display.to_token_display_amount} {quote.display.to_token.symbol}"
          f" ({quote.display.to_token_price_usd})")
    print(f"Gas:          {quote.gas} ({quote.display.gas_costs_usd})")
    print(f"Slippage:     {quote.display.slippage} observed, {quote.slippage_percentage} tolerance")
    print()
    print(json.dumps(quote.model_dump(by_alias=True), indent=2))


if __name__ == "__main__":
    asyncio.run(main())
