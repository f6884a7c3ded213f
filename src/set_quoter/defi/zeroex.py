"""
ZeroExQuoter: swap quotes and calldata from the 0x API.

API: https://0x.org/docs/api#get-swapv1quote

Parameters sent with every quote:
    sellToken / buyToken    token contract addresses
    sellAmount              amount of sellToken in base units
    takerAddress            the account that fills the quote (the Set manager)
    slippagePercentage      0; slippage is applied by the quote normalizer
    excludedSources         liquidity sources the Set cannot route through
    skipValidation          the taker is a contract, so eth_call validation is skipped
    feeRecipient / buyTokenPercentageFee / affiliateAddress
    intentOnFilling         True for firm (RFQ-T eligible) quotes
"""

from __future__ import annotations

import logging
import re
from typing import Any

import httpx

from set_quoter.core.chains import get_chain
from set_quoter.core.errors import AggregatorUnavailable, NoLiquidity
from set_quoter.core.models import AggregatorQuote

logger = logging.getLogger("set_quoter.zeroex")

SWAP_QUOTE_ROUTE = "/swap/v1/quote"
DEFAULT_FEE_RECIPIENT = "0xD3D555Bb655AcBA9452bfC6D7cEa8cC7b3628C55"
DEFAULT_EXCLUDED_SOURCES = ("Kyber", "Eth2Dai", "Uniswap", "Mesh")

# 0x validation reason codes that mean "no route for this size"
_NO_LIQUIDITY_REASONS = frozenset({"INSUFFICIENT_ASSET_LIQUIDITY"})

_HEX_RE = re.compile(r"^0x[0-9a-fA-F]*$")


class ZeroExQuoter:
    """
    DEX aggregator client for the 0x API.

    Usage:
        async with ZeroExQuoter(chain_id=1, api_key="...") as zero_ex:
            quote = await zero_ex.quote(mkr, yfi, 10**18, manager, firm=False)
    """

    def __init__(
        self,
        chain_id: int,
        api_key: str = "",
        host: str | None = None,
        fee_percentage: float = 0.0,
        fee_recipient: str = DEFAULT_FEE_RECIPIENT,
        affiliate_address: str = DEFAULT_FEE_RECIPIENT,
        excluded_sources: tuple[str, ...] = DEFAULT_EXCLUDED_SOURCES,
        timeout: float = 15.0,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        chain = get_chain(chain_id)
        self._host = (host or chain.zero_ex_host).rstrip("/")
        self._fee_percentage = fee_percentage
        self._fee_recipient = fee_recipient
        self._affiliate_address = affiliate_address
        self._excluded_sources = excluded_sources
        headers: dict[str, str] = {}
        if api_key:
            headers["0x-api-key"] = api_key
        else:
            logger.warning("No 0x API key configured; requests may be rate limited")
        self._http = http or httpx.AsyncClient(headers=headers, timeout=timeout)
        if http is not None and api_key:
            self._http.headers.update(headers)

    async def quote(
        self,
        sell_token: str,
        buy_token: str,
        sell_amount: int,
        taker_address: str,
        firm: bool = False,
    ) -> AggregatorQuote:
        """
        Fetch a swap quote selling exactly `sell_amount` of sell_token.

        Raises:
            NoLiquidity:           0x cannot route this size
            AggregatorUnavailable: transport/HTTP failure or a malformed response
        """
        params = {
            "sellToken": sell_token,
            "buyToken": buy_token,
            "sellAmount": str(sell_amount),
            "takerAddress": taker_address,
            "slippagePercentage": 0,
            "excludedSources": ",".join(self._excluded_sources),
            "skipValidation": "true",
            "feeRecipient": self._fee_recipient,
            "buyTokenPercentageFee": self._fee_percentage,
            "affiliateAddress": self._affiliate_address,
            "intentOnFilling": "true" if firm else "false",
        }
        try:
            resp = await self._http.get(f"{self._host}{SWAP_QUOTE_ROUTE}", params=params)
        except httpx.HTTPError as e:
            raise AggregatorUnavailable(f"ZeroEx quote request failed: {e}") from e

        if resp.status_code != 200:
            self._raise_for_error(resp)

        try:
            data = resp.json()
        except ValueError as e:
            raise AggregatorUnavailable(f"ZeroEx returned invalid JSON: {e}") from e
        return self._parse_quote(data)

    def _raise_for_error(self, resp: httpx.Response) -> None:
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        reasons = {
            str(err.get("reason", ""))
            for err in body.get("validationErrors", []) or []
            if isinstance(err, dict)
        }
        if reasons & _NO_LIQUIDITY_REASONS:
            raise NoLiquidity("No liquidity available for this trade size", reasons=sorted(reasons))
        raise AggregatorUnavailable(
            f"ZeroEx quote request failed: {resp.status_code} {body.get('reason', resp.text)}",
            status=resp.status_code,
        )

    @staticmethod
    def _parse_quote(data: dict[str, Any]) -> AggregatorQuote:
        """Re-validate every field of the untrusted response."""
        try:
            sell_amount = int(str(data["sellAmount"]))
            buy_amount = int(str(data["buyAmount"]))
            calldata = str(data["data"])
            price = float(data.get("price", 0.0))
            guaranteed_price = float(data.get("guaranteedPrice", 0.0))
        except (KeyError, TypeError, ValueError) as e:
            raise AggregatorUnavailable(f"Malformed ZeroEx quote: {e}") from e

        if sell_amount <= 0 or buy_amount < 0:
            raise AggregatorUnavailable(
                "ZeroEx quote has invalid amounts", sell_amount=sell_amount, buy_amount=buy_amount
            )
        if not _HEX_RE.match(calldata) or len(calldata) % 2:
            raise AggregatorUnavailable("ZeroEx quote calldata is not a hex string")

        return AggregatorQuote(
            sell_amount=sell_amount,
            buy_amount=buy_amount,
            calldata=calldata,
            price=price,
            guaranteed_price=guaranteed_price,
        )

    async def close(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> ZeroExQuoter:
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()
