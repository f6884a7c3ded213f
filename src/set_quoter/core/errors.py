"""
Error taxonomy for quote generation.

Every failure in the pipeline is raised as a QuoteError subclass. Each one
names the pipeline stage it came from and the rule it tripped, so a caller can
decide whether to retry with a different amount or give up.
"""

from __future__ import annotations

from typing import Any

# Pipeline stages, in execution order
STAGE_REQUEST = "request"
STAGE_SNAPSHOT = "snapshot"
STAGE_NOTIONAL = "notional"
STAGE_AGGREGATOR = "aggregator"
STAGE_NORMALIZATION = "normalization"
STAGE_VALIDATION = "validation"
STAGE_GAS_ESTIMATE = "gas_estimate"
STAGE_PRICING = "pricing"


class QuoteError(Exception):
    """Base class for all quote generation failures."""

    code = "quote_error"
    default_stage = STAGE_REQUEST
    retryable = False

    def __init__(self, message: str, stage: str | None = None, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage or self.default_stage
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Structured form for API responses and logs."""
        return {
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "details": {k: str(v) for k, v in self.details.items()},
        }


class InvalidAmount(QuoteError):
    """The requested amount is not a valid non-negative decimal."""
    code = "invalid_amount"


class InvalidAddress(QuoteError):
    """An address is not a 20-byte hex string."""
    code = "invalid_address"


class UnsupportedChain(QuoteError):
    code = "unsupported_chain"


class TokenNotFound(QuoteError):
    code = "token_not_found"


class UnknownComponent(QuoteError):
    """The Set holds no position in the token being sold."""
    code = "unknown_component"
    default_stage = STAGE_NOTIONAL


class AmountExceedsAvailable(QuoteError):
    """The request asks for more of a component than the Set holds."""
    code = "amount_exceeds_available"
    default_stage = STAGE_NOTIONAL


class DustRemainder(QuoteError):
    """The trade would leave an un-tradeable sliver of the sold component."""
    code = "dust_remainder"
    default_stage = STAGE_VALIDATION


class DustAcquisition(QuoteError):
    """The trade would open an unusably small position in the bought component."""
    code = "dust_acquisition"
    default_stage = STAGE_VALIDATION


class ChainReadFailed(QuoteError):
    code = "chain_read_failed"
    default_stage = STAGE_SNAPSHOT
    retryable = True


class AggregatorUnavailable(QuoteError):
    code = "aggregator_unavailable"
    default_stage = STAGE_AGGREGATOR
    retryable = True


class NoLiquidity(QuoteError):
    code = "no_liquidity"
    default_stage = STAGE_AGGREGATOR


class GasEstimationFailed(QuoteError):
    code = "gas_estimation_failed"
    default_stage = STAGE_GAS_ESTIMATE


class GasPriceUnavailable(QuoteError):
    code = "gas_price_unavailable"
    default_stage = STAGE_PRICING
    retryable = True


class PriceUnavailable(QuoteError):
    code = "price_unavailable"
    default_stage = STAGE_PRICING
    retryable = True


class CollaboratorTimeout(QuoteError):
    """An external call did not answer within the configured timeout."""
    code = "collaborator_timeout"
    retryable = True
