from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from set_quoter.core.models import TradeRequest


class QuoteRequestBody(BaseModel):
    """Request model for generating a trade quote."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    from_token: str = Field(..., description="Address of the component to sell")
    to_token: str = Field(..., description="Address of the component to buy")
    raw_amount: str = Field(..., description="Decimal amount of fromToken to sell, e.g. \"1.5\"")
    from_address: str = Field(..., description="Address of the Set being rebalanced")
    exchange_type: str | None = Field(
        None, description="zeroex, uniswap, sushiswap or quickswap. Server default if omitted."
    )
    chain_id: int | None = Field(None, description="1 (Ethereum) or 137 (Polygon)")
    is_firm: bool = Field(False, description="Request a firm (RFQ-T eligible) aggregator quote")

    def to_trade_request(self) -> TradeRequest:
        return TradeRequest(**self.model_dump())


class ErrorResponse(BaseModel):
    """Structured quote failure."""

    code: str = Field(..., description="Machine-readable error code, e.g. dust_remainder")
    stage: str = Field(..., description="Pipeline stage that failed")
    message: str
    retryable: bool = Field(..., description="True if the same request may succeed later")
    details: dict[str, str] = Field(default_factory=dict)
