
from fastapi import APIRouter, HTTPException, Request

from set_quoter.api.models import ErrorResponse, QuoteRequestBody
from set_quoter.core.models import TradeQuote

router = APIRouter(tags=["Trade Quotes"])


def get_generator(request: Request):
    """Dependency to retrieve the initialized TradeQuoteGenerator from app state."""
    generator = getattr(request.app.state, "generator", None)
    if not generator:
        raise HTTPException(status_code=500, detail="quote generator not initialized")
    return generator


@router.post(
    "/quote",
    response_model=TradeQuote,
    responses={422: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def generate_quote(request: Request, req: QuoteRequestBody):
    """
    Generate an executable trade quote for a Set.

    Failures are returned as {"error": {...}} with the failing stage and
    whether a retry could succeed.
    """
    generator = get_generator(request)
    return await generator.generate(req.to_trade_request())
