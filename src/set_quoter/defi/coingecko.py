"""
CoinGeckoTokenDirectory: token metadata and USD spot prices from CoinGecko.

Token lists:
- Ethereum: CoinGecko's Uniswap token list
- Polygon:  tokens traded on the SushiSwap matic-exchange subgraph, by
            volume, followed by QuickSwap's default token list

The list is downloaded once per directory instance and published as an
immutable mapping keyed by lower-cased address. Concurrent first callers
wait on the same download.

API: https://www.coingecko.com/en/api/documentation
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any

import httpx

from set_quoter.core.chains import POLYGON_CHAIN_ID, ChainInfo, get_chain
from set_quoter.core.errors import PriceUnavailable, TokenNotFound
from set_quoter.core.models import Token

logger = logging.getLogger("set_quoter.coingecko")

COINGECKO_API = "https://api.coingecko.com"
USD_CURRENCY_CODE = "usd"

TOKEN_LIST_URLS = {
    1: "https://tokens.coingecko.com/uniswap/all.json",
    137: (
        "https://raw.githubusercontent.com/sameepsi/"
        "quickswap-default-token-list/master/src/tokens/mainnet.json"
    ),
}
SUSHI_POLYGON_SUBGRAPH_URL = "https://api.thegraph.com/subgraphs/name/sushiswap/matic-exchange"
SUBGRAPH_PAGE_SIZE = 1000

_SUBGRAPH_TOKENS_QUERY = """
query tokens($first: Int!, $lastId: String!) {
  tokens(first: $first, orderBy: id, orderDirection: asc, where: {id_gt: $lastId}) {
    id
    symbol
    name
    decimals
    volumeUSD
  }
}
"""


class CoinGeckoError(Exception):
    pass


class CoinGeckoTokenDirectory:
    """
    Read-only token directory for one network.

    Usage:
        async with CoinGeckoTokenDirectory(chain_id=1) as tokens:
            mkr = await tokens.resolve("0x9f8f72aa9304c8b593d555f12ef6589cc3a579a2")
            prices = await tokens.spot_prices_usd([mkr.address])
    """

    def __init__(
        self,
        chain_id: int,
        api_url: str = COINGECKO_API,
        token_list_url: str | None = None,
        subgraph_url: str = SUSHI_POLYGON_SUBGRAPH_URL,
        timeout: float = 15.0,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self._chain: ChainInfo = get_chain(chain_id)
        self._api = api_url.rstrip("/")
        self._token_list_url = token_list_url or TOKEN_LIST_URLS[chain_id]
        self._subgraph_url = subgraph_url
        self._http = http or httpx.AsyncClient(timeout=timeout)
        self._tokens: Mapping[str, Token] | None = None
        self._load_lock = asyncio.Lock()

    @property
    def chain_id(self) -> int:
        return self._chain.chain_id

    # ------------------------------------------------------------------
    # Token metadata
    # ------------------------------------------------------------------

    async def token_map(self) -> Mapping[str, Token]:
        """Return the token map, downloading it on first use."""
        if self._tokens is not None:
            return self._tokens
        async with self._load_lock:
            if self._tokens is None:
                self._tokens = MappingProxyType(await self._fetch_token_map())
        return self._tokens

    async def resolve(self, address: str) -> Token:
        try:
            tokens = await self.token_map()
        except CoinGeckoError as e:
            raise TokenNotFound(f"Token list unavailable: {e}", address=address) from e
        token = tokens.get(address.lower())
        if token is None:
            raise TokenNotFound(
                f"Token {address} is not listed on chain {self.chain_id}", address=address
            )
        return token

    async def _fetch_token_map(self) -> dict[str, Token]:
        entries = await self._fetch_token_list()
        if self.chain_id == POLYGON_CHAIN_ID:
            # Sushi tokens first so traded tokens win on duplicates
            entries = await self._fetch_sushi_polygon_tokens() + entries

        tokens: dict[str, Token] = {}
        for entry in entries:
            if isinstance(entry, dict) and entry.get("chainId", self.chain_id) != self.chain_id:
                continue
            token = _parse_token(entry)
            if token is None:
                continue
            if token.address not in tokens:
                tokens[token.address] = token
        logger.debug(f"Loaded {len(tokens)} tokens for chain {self.chain_id}")
        return tokens

    async def _fetch_token_list(self) -> list[Any]:
        try:
            resp = await self._http.get(self._token_list_url)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise CoinGeckoError(f"Failed to fetch token list: {e}") from e

        # Uniswap-style lists wrap entries in "tokens"; QuickSwap's is a bare list
        entries = data.get("tokens", []) if isinstance(data, dict) else data
        if not isinstance(entries, list):
            raise CoinGeckoError("Token list has an unexpected format")
        return entries

    async def _fetch_sushi_polygon_tokens(self) -> list[dict[str, Any]]:
        """
        Page through the SushiSwap matic-exchange subgraph.

        Returns token list entries sorted by USD volume, untraded tokens dropped.
        """
        traded: list[tuple[float, dict[str, Any]]] = []
        last_id = ""
        while True:
            page = await self._query_subgraph_tokens(last_id)
            for raw in page:
                try:
                    volume = float(raw["volumeUSD"])
                    entry = {
                        "chainId": POLYGON_CHAIN_ID,
                        "address": raw["id"],
                        "symbol": raw["symbol"],
                        "name": raw["name"],
                        "decimals": int(raw["decimals"]),
                    }
                except (KeyError, TypeError, ValueError) as e:
                    logger.warning(f"Skipping malformed subgraph token: {e}")
                    continue
                if volume > 0:
                    traded.append((volume, entry))
            if len(page) < SUBGRAPH_PAGE_SIZE:
                break
            last_id = str(page[-1].get("id", ""))
            if not last_id:
                break

        traded.sort(key=lambda item: item[0], reverse=True)
        logger.debug(f"Loaded {len(traded)} traded tokens from the Sushi subgraph")
        return [entry for _, entry in traded]

    async def _query_subgraph_tokens(self, last_id: str) -> list[dict[str, Any]]:
        payload = {
            "query": _SUBGRAPH_TOKENS_QUERY,
            "variables": {"first": SUBGRAPH_PAGE_SIZE, "lastId": last_id},
        }
        try:
            resp = await self._http.post(self._subgraph_url, json=payload)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise CoinGeckoError(f"Failed to query Sushi subgraph: {e}") from e

        if not isinstance(data, dict) or data.get("errors"):
            errors = data.get("errors") if isinstance(data, dict) else data
            raise CoinGeckoError(f"Sushi subgraph returned errors: {errors}")
        page = (data.get("data") or {}).get("tokens")
        if not isinstance(page, list):
            raise CoinGeckoError("Sushi subgraph returned no tokens")
        return [t for t in page if isinstance(t, dict)]

    # ------------------------------------------------------------------
    # Prices
    # ------------------------------------------------------------------

    async def spot_price_usd(self, address: str) -> float:
        prices = await self.spot_prices_usd([address])
        return prices[address.lower()]

    async def spot_prices_usd(self, addresses: Sequence[str]) -> dict[str, float]:
        """
        Fetch USD prices for token contracts in one request.

        Raises:
            PriceUnavailable: if the request fails or any address has no price
        """
        wanted = list(dict.fromkeys(a.lower() for a in addresses))
        url = f"{self._api}/api/v3/simple/token_price/{self._chain.coingecko_platform}"
        params = {
            "contract_addresses": ",".join(wanted),
            "vs_currencies": USD_CURRENCY_CODE,
        }
        try:
            resp = await self._http.get(url, params=params)
            resp.raise_for_status()
            data: dict[str, Any] = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise PriceUnavailable(f"Failed to fetch coin prices: {e}") from e

        quoted = {k.lower(): v for k, v in data.items()}
        prices: dict[str, float] = {}
        for address in wanted:
            try:
                prices[address] = float(quoted[address][USD_CURRENCY_CODE])
            except (KeyError, TypeError, ValueError):
                raise PriceUnavailable(f"No USD price for {address}", address=address) from None
        return prices

    async def close(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> CoinGeckoTokenDirectory:
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()


def _parse_token(entry: Any) -> Token | None:
    try:
        return Token(
            address=str(entry["address"]),
            symbol=str(entry["symbol"]),
            name=str(entry.get("name", entry["symbol"])),
            decimals=int(entry["decimals"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Skipping malformed token list entry: {e}")
        return None
