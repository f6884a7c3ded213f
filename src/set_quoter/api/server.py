import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from set_quoter.api.routes import router
from set_quoter.core.chains import SUPPORTED_CHAINS
from set_quoter.core.config import QuoteConfig
from set_quoter.core.errors import QuoteError
from set_quoter.defi.network import close_network, connect_network
from set_quoter.quote.generator import TradeQuoteGenerator

logger = logging.getLogger("set_quoter.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))

    # Load configuration
    config = QuoteConfig.from_env()
    if not config.zero_ex_api_key:
        logger.warning("ZERO_EX_API_KEY not set in environment. 0x quotes may be rate limited.")

    # One set of collaborators per supported network
    networks = {chain_id: connect_network(chain_id, config) for chain_id in SUPPORTED_CHAINS}

    # Attach to app state
    app.state.generator = TradeQuoteGenerator(config, networks)

    yield

    for clients in networks.values():
        await close_network(clients)


app = FastAPI(
    title="Set Trade Quoter",
    description="Executable swap quotes for rebalancing Set Protocol Sets",
    version="0.1.0",
    lifespan=lifespan,
)

# Allow CORS for easy frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routes
app.include_router(router)


@app.exception_handler(QuoteError)
async def quote_error_handler(request: Request, exc: QuoteError):
    return JSONResponse(
        status_code=503 if exc.retryable else 422,
        content={"error": exc.to_dict()},
    )


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(
        status_code=400,
        content={"detail": str(exc)},
    )


@app.get("/health")
async def health_check():
    """Simple health check endpoint."""
    return {"status": "ok"}
