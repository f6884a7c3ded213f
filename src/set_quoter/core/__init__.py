"""core module init"""
from set_quoter.core.address import is_valid_address, normalize_address, validate_address
from set_quoter.core.amounts import (
    SCALE,
    format_percentage,
    format_token_amount,
    format_usd,
    to_base_units,
    to_display_units,
)
from set_quoter.core.chains import SUPPORTED_CHAINS, ChainInfo, exchange_adapter_name, get_chain
from set_quoter.core.config import QuoteConfig
from set_quoter.core.errors import (
    AggregatorUnavailable,
    AmountExceedsAvailable,
    ChainReadFailed,
    CollaboratorTimeout,
    DustAcquisition,
    DustRemainder,
    GasEstimationFailed,
    GasPriceUnavailable,
    InvalidAddress,
    InvalidAmount,
    NoLiquidity,
    PriceUnavailable,
    QuoteError,
    TokenNotFound,
    UnknownComponent,
    UnsupportedChain,
)
from set_quoter.core.models import (
    AggregatorQuote,
    Position,
    PositionDelta,
    QuoteDisplay,
    SetSnapshot,
    Token,
    TokenResponse,
    TradeQuote,
    TradeRequest,
)

__all__ = [
    "AggregatorQuote",
    "AggregatorUnavailable",
    "AmountExceedsAvailable",
    "ChainInfo",
    "ChainReadFailed",
    "CollaboratorTimeout",
    "DustAcquisition",
    "DustRemainder",
    "GasEstimationFailed",
    "GasPriceUnavailable",
    "InvalidAddress",
    "InvalidAmount",
    "NoLiquidity",
    "Position",
    "PositionDelta",
    "PriceUnavailable",
    "QuoteConfig",
    "QuoteDisplay",
    "QuoteError",
    "SCALE",
    "SUPPORTED_CHAINS",
    "SetSnapshot",
    "Token",
    "TokenNotFound",
    "TokenResponse",
    "TradeQuote",
    "TradeRequest",
    "UnknownComponent",
    "UnsupportedChain",
    "exchange_adapter_name",
    "format_percentage",
    "format_token_amount",
    "format_usd",
    "get_chain",
    "is_valid_address",
    "normalize_address",
    "to_base_units",
    "to_display_units",
    "validate_address",
]
