import pytest
from fastapi.testclient import TestClient

from set_quoter.api.server import app
from set_quoter.core.config import QuoteConfig
from set_quoter.core.errors import AggregatorUnavailable, DustRemainder
from set_quoter.core.models import QuoteDisplay, TokenResponse, TradeQuote

MKR = "0x9f8f72aa9304c8b593d555f12ef6589cc3a579a2"
YFI = "0x0bc529c00c6401aef6d220be8c6ea1667f6ad93e"
DPI = "0x1494ca1f11d487c2bbe4543e90080aeba4ba3c2b"

BODY = {
    "fromToken": MKR,
    "toToken": YFI,
    "rawAmount": "1",
    "fromAddress": DPI,
    "chainId": 1,
}


def make_quote():
    token = TokenResponse(symbol="MKR", name="Maker", address=MKR, decimals=18)
    return TradeQuote(
        from_address=DPI,
        from_token_address=MKR,
        to_token_address=YFI,
        exchange_adapter_name="ZeroExApiAdapterV3",
        calldata="0xd9627aa4",
        gas="220000",
        gas_price="50000000000",
        slippage_percentage="2.00%",
        from_token_amount="1000000",
        to_token_amount="1960000",
        display=QuoteDisplay(
            input_amount_raw="1",
            input_amount="1000000000000000000",
            quote_amount="1000000000000000000",
            from_token_display_amount="1",
            to_token_display_amount="2",
            from_token_price_usd="$2,000.00",
            to_token_price_usd="$1,960.00",
            to_token=token,
            from_token=token,
            gas_costs_usd="$22",
            gas_costs_chain_currency="0.0110000 ETH",
            fee_percentage="0.00%",
            slippage="2.00%",
        ),
    )


class StubGenerator:
    """Returns a canned quote, or raises the configured error."""

    def __init__(self, error=None):
        self.config = QuoteConfig()
        self.error = error
        self.requests = []

    async def generate(self, request):
        self.requests.append(request)
        if self.error:
            raise self.error
        return make_quote()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_quote_success(client):
    stub = StubGenerator()
    app.state.generator = stub

    response = client.post("/quote", json=BODY)
    assert response.status_code == 200
    data = response.json()
    assert data["from"] == DPI
    assert data["toTokenAmount"] == "1960000"
    assert data["display"]["gasCostsUsd"] == "$22"

    request = stub.requests[0]
    assert request.raw_amount == "1"
    assert request.from_address == DPI
    assert request.exchange_type is None


def test_quote_missing_field(client):
    app.state.generator = StubGenerator()
    response = client.post("/quote", json={"fromToken": MKR})
    assert response.status_code == 422


def test_quote_rule_violation(client):
    app.state.generator = StubGenerator(
        error=DustRemainder("Remaining units too small, incorrectly attempting max", remaining_units=49)
    )
    response = client.post("/quote", json=BODY)
    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "dust_remainder"
    assert error["stage"] == "validation"
    assert error["retryable"] is False
    assert error["details"] == {"remaining_units": "49"}


def test_quote_retryable_failure(client):
    app.state.generator = StubGenerator(error=AggregatorUnavailable("ZeroEx quote request failed: 500"))
    response = client.post("/quote", json=BODY)
    assert response.status_code == 503
    assert response.json()["error"]["retryable"] is True
