"""
GasStationOracle: network gas prices from public gas station feeds.

Ethereum's gas station reports prices in tenths of gwei; Polygon's reports
gwei, either as plain numbers or as {"maxFee": ..., "maxPriorityFee": ...}
objects. Both are converted to integer wei here.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx

from set_quoter.core.chains import ETHEREUM_CHAIN_ID, POLYGON_CHAIN_ID, get_chain
from set_quoter.core.errors import GasPriceUnavailable

logger = logging.getLogger("set_quoter.gas_oracle")

GAS_STATION_URLS = {
    ETHEREUM_CHAIN_ID: "https://ethgasstation.info/json/ethgasAPI.json",
    POLYGON_CHAIN_ID: "https://gasstation-mainnet.matic.network",
}

AVERAGE = "average"
FAST = "fast"
FASTEST = "fastest"

# Our speed tier -> feed key
_ETHEREUM_KEYS = {AVERAGE: "average", FAST: "fast", FASTEST: "fastest"}
_POLYGON_KEYS = {AVERAGE: "standard", FAST: "fast", FASTEST: "fastest"}

WEI_PER_GWEI = 10 ** 9


class GasStationOracle:
    """
    Gas price oracle for Ethereum and Polygon.

    Usage:
        oracle = GasStationOracle(chain_id=137)
        wei = await oracle.current_gas_price("fast")
    """

    def __init__(
        self,
        chain_id: int,
        url: str | None = None,
        timeout: float = 15.0,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self._chain = get_chain(chain_id)
        self._url = url or GAS_STATION_URLS[chain_id]
        self._http = http or httpx.AsyncClient(timeout=timeout)

    async def current_gas_price(self, speed: str = FAST) -> int:
        """
        Return the gas price for a speed tier, in wei.

        Raises:
            GasPriceUnavailable: on an unsupported speed, HTTP failure or bad payload
        """
        keys = _ETHEREUM_KEYS if self._chain.chain_id == ETHEREUM_CHAIN_ID else _POLYGON_KEYS
        if speed not in keys:
            raise GasPriceUnavailable(f"speed: {speed} is not supported", speed=speed)

        try:
            resp = await self._http.get(self._url)
            resp.raise_for_status()
            data: dict[str, Any] = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise GasPriceUnavailable(f"Failed to fetch gas price: {e}") from e
        if not isinstance(data, dict):
            raise GasPriceUnavailable("Gas station returned an unexpected payload")

        raw = data.get(keys[speed])
        if isinstance(raw, dict):
            raw = raw.get("maxFee")
        try:
            gwei = Decimal(str(raw))
        except InvalidOperation:
            raise GasPriceUnavailable(
                f"Gas station returned no '{keys[speed]}' price", payload=data
            ) from None
        if not gwei.is_finite() or gwei < 0:
            raise GasPriceUnavailable(f"Invalid gas price: {raw}")

        if self._chain.chain_id == ETHEREUM_CHAIN_ID:
            # Reported in x10 gwei
            gwei = gwei / 10
        wei = int(gwei * WEI_PER_GWEI)
        logger.debug(f"Gas price on {self._chain.name} ({speed}): {wei} wei")
        return wei

    async def close(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> GasStationOracle:
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()
