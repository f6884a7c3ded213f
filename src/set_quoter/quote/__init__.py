"""
Quote pipeline: position units, normalization, validation, display, orchestration.
"""
from .generator import NetworkClients, TradeQuoteGenerator
from .normalizer import apply_slippage, normalize_quote, slippage_tolerance_scaled
from .positions import calculate_from_token_amount, calculate_notional, implied_max_notional
from .validator import DUST_THRESHOLD, validate_quote_values

__all__ = [
    "DUST_THRESHOLD",
    "NetworkClients",
    "TradeQuoteGenerator",
    "apply_slippage",
    "calculate_from_token_amount",
    "calculate_notional",
    "implied_max_notional",
    "normalize_quote",
    "slippage_tolerance_scaled",
    "validate_quote_values",
]
