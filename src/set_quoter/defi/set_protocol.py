"""
Set Protocol V2 adapters over JSON-RPC (web3.py).

SetProtocolReader reads a SetToken's manager, total supply and default
positions. TradeModuleExecutor estimates gas for TradeModule.trade() as the
Set's manager would send it. Neither signs nor submits transactions.

Reference: https://docs.tokensets.com/developers/contracts/protocol/trade-module
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from web3 import AsyncWeb3

from set_quoter.core.errors import ChainReadFailed, GasEstimationFailed
from set_quoter.core.models import Position, SetSnapshot

logger = logging.getLogger("set_quoter.set_protocol")

# Position.positionState for positions held directly by the SetToken
DEFAULT_POSITION_STATE = 0

SET_TOKEN_ABI: list[dict[str, Any]] = [
    {
        "name": "getPositions",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [
            {
                "name": "",
                "type": "tuple[]",
                "components": [
                    {"name": "component", "type": "address"},
                    {"name": "module", "type": "address"},
                    {"name": "unit", "type": "int256"},
                    {"name": "positionState", "type": "uint8"},
                    {"name": "data", "type": "bytes"},
                ],
            }
        ],
    },
    {
        "name": "totalSupply",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "name": "manager",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    },
]

TRADE_MODULE_ABI: list[dict[str, Any]] = [
    {
        "name": "trade",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "_setToken", "type": "address"},
            {"name": "_exchangeName", "type": "string"},
            {"name": "_sendToken", "type": "address"},
            {"name": "_sendQuantity", "type": "uint256"},
            {"name": "_receiveToken", "type": "address"},
            {"name": "_minReceiveQuantity", "type": "uint256"},
            {"name": "_data", "type": "bytes"},
        ],
        "outputs": [],
    },
]


def connect(rpc_url: str) -> AsyncWeb3:
    """Create an async web3 client for a JSON-RPC endpoint."""
    return AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))


class SetProtocolReader:
    """
    Reads Set state from chain.

    Usage:
        reader = SetProtocolReader(connect("https://eth.llamarpc.com"))
        snapshot = await reader.fetch_snapshot(dpi, [mkr, yfi])
    """

    def __init__(self, w3: AsyncWeb3) -> None:
        self._w3 = w3

    @property
    def w3(self) -> AsyncWeb3:
        return self._w3

    async def fetch_snapshot(
        self, set_address: str, watched_components: Sequence[str] = ()
    ) -> SetSnapshot:
        """
        Read a Set's manager, total supply and default positions.

        When `watched_components` is non-empty only those components are kept.

        Raises:
            ChainReadFailed: if any contract call fails or returns bad data
        """
        try:
            contract = self._w3.eth.contract(
                address=AsyncWeb3.to_checksum_address(set_address), abi=SET_TOKEN_ABI
            )
            raw_positions, total_supply, manager = await asyncio.gather(
                contract.functions.getPositions().call(),
                contract.functions.totalSupply().call(),
                contract.functions.manager().call(),
            )
        except Exception as e:
            raise ChainReadFailed(f"Failed to read Set {set_address}: {e}") from e

        watched = {c.lower() for c in watched_components}
        positions = []
        for component, _module, unit, state, _data in raw_positions:
            if int(state) != DEFAULT_POSITION_STATE:
                continue
            if watched and str(component).lower() not in watched:
                continue
            positions.append(Position(component=str(component), unit=int(unit)))

        try:
            return SetSnapshot(
                address=set_address.lower(),
                manager=str(manager).lower(),
                total_supply=int(total_supply),
                positions=tuple(positions),
            )
        except ValueError as e:
            raise ChainReadFailed(f"Set {set_address} returned invalid state: {e}") from e


class TradeModuleExecutor:
    """Estimates gas for TradeModule.trade() calls."""

    def __init__(self, w3: AsyncWeb3, trade_module_address: str) -> None:
        self._w3 = w3
        self._contract = w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(trade_module_address), abi=TRADE_MODULE_ABI
        )

    @property
    def w3(self) -> AsyncWeb3:
        return self._w3

    @property
    def trade_module_address(self) -> str:
        return self._contract.address

    async def estimate_gas(
        self,
        set_address: str,
        adapter_name: str,
        from_token: str,
        from_units: int,
        to_token: str,
        to_units: int,
        calldata: str,
        caller: str,
    ) -> int:
        """
        Estimate gas for the trade as sent by `caller` (the Set manager).

        Raises:
            GasEstimationFailed: if the node rejects the estimate (e.g. the call reverts)
        """
        try:
            call = self._contract.functions.trade(
                AsyncWeb3.to_checksum_address(set_address),
                adapter_name,
                AsyncWeb3.to_checksum_address(from_token),
                from_units,
                AsyncWeb3.to_checksum_address(to_token),
                to_units,
                bytes.fromhex(calldata[2:] if calldata.startswith("0x") else calldata),
            )
            gas = await call.estimate_gas({"from": AsyncWeb3.to_checksum_address(caller)})
        except Exception as e:
            logger.warning(f"Gas estimation failed for {set_address}: {e}")
            raise GasEstimationFailed("Unable to fetch gas cost estimate for trade") from e
        return int(gas)
