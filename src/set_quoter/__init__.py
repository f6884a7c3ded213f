"""
set-quoter: executable swap quotes for rebalancing Set Protocol Sets.

Usage:
    from set_quoter import QuoteConfig, TradeQuoteGenerator, TradeRequest
    from set_quoter.defi import connect_network
"""

from set_quoter.core.config import QuoteConfig
from set_quoter.core.errors import QuoteError
from set_quoter.core.models import TradeQuote, TradeRequest
from set_quoter.quote.generator import NetworkClients, TradeQuoteGenerator

__version__ = "0.1.0"
__all__ = [
    "NetworkClients",
    "QuoteConfig",
    "QuoteError",
    "TradeQuote",
    "TradeQuoteGenerator",
    "TradeRequest",
]
