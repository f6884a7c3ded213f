"""
Configuration for the quote generator.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from set_quoter.core.address import is_valid_address
from set_quoter.core.chains import ETHEREUM_CHAIN_ID, SUPPORTED_CHAINS, get_chain

GAS_SPEEDS = ("average", "fast", "fastest")


@dataclass
class QuoteConfig:
    """
    Settings shared by every quote a generator produces.

    Args:
        slippage_percentage:    Tolerance applied to the aggregator's buy amount (0-100)
        fee_percentage:         Manager fee shown in the quote display
        gas_buffer_percentage:  Headroom added on top of the gas estimate
        gas_speed:              Gas oracle speed tier ("average", "fast", "fastest")
        default_exchange_type:  Exchange used when a request names none
        default_chain_id:       Network used when a request names none
        call_timeout:           Seconds to wait for each external call (None = no limit)
        zero_ex_api_key:        0x API key, sent as the 0x-api-key header
        rpc_urls:               JSON-RPC endpoint per chain id, overriding the chain default
        trade_module_addresses: TradeModule contract per chain id, overriding the chain default
    """
    slippage_percentage: float = 2.0
    fee_percentage: float = 0.0
    gas_buffer_percentage: int = 10
    gas_speed: str = "fast"
    default_exchange_type: str = "zeroex"
    default_chain_id: int = 1
    call_timeout: float | None = 30.0
    zero_ex_api_key: str = ""
    rpc_urls: dict[int, str] = field(default_factory=dict)
    trade_module_addresses: dict[int, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not 0 <= self.slippage_percentage <= 100:
            raise ValueError(
                f"slippage_percentage must be between 0 and 100, got {self.slippage_percentage}"
            )
        if self.fee_percentage < 0:
            raise ValueError(f"fee_percentage must be non-negative, got {self.fee_percentage}")
        if self.gas_buffer_percentage < 0:
            raise ValueError(
                f"gas_buffer_percentage must be non-negative, got {self.gas_buffer_percentage}"
            )
        if self.gas_speed not in GAS_SPEEDS:
            raise ValueError(f"gas_speed must be one of {GAS_SPEEDS}, got {self.gas_speed!r}")
        if self.default_chain_id not in SUPPORTED_CHAINS:
            raise ValueError(f"default_chain_id {self.default_chain_id} is not supported")
        if self.call_timeout is not None and self.call_timeout <= 0:
            raise ValueError(f"call_timeout must be positive, got {self.call_timeout}")
        for chain_id in (*self.rpc_urls, *self.trade_module_addresses):
            if chain_id not in SUPPORTED_CHAINS:
                raise ValueError(f"chain {chain_id} is not supported")
        for chain_id, address in self.trade_module_addresses.items():
            if not is_valid_address(address):
                raise ValueError(f"Invalid TradeModule address for chain {chain_id}: {address!r}")

    def rpc_url_for(self, chain_id: int) -> str:
        """JSON-RPC endpoint for a chain."""
        return self.rpc_urls.get(chain_id) or get_chain(chain_id).default_rpc_url

    def trade_module_address_for(self, chain_id: int) -> str:
        """TradeModule contract address for a chain."""
        return self.trade_module_addresses.get(chain_id) or get_chain(chain_id).trade_module_address

    @classmethod
    def from_env(cls) -> QuoteConfig:
        """
        Build a config from environment variables, falling back to defaults.

        Per-chain settings are read as RPC_URL_<chainId> and
        TRADE_MODULE_ADDRESS_<chainId>. RPC_URL and TRADE_MODULE_ADDRESS
        without a suffix apply to Ethereum.
        """
        defaults = cls()
        timeout = os.getenv("CALL_TIMEOUT")

        rpc_urls: dict[int, str] = {}
        trade_module_addresses: dict[int, str] = {}
        for chain_id in SUPPORTED_CHAINS:
            rpc_url = os.getenv(f"RPC_URL_{chain_id}")
            module = os.getenv(f"TRADE_MODULE_ADDRESS_{chain_id}")
            if chain_id == ETHEREUM_CHAIN_ID:
                rpc_url = rpc_url or os.getenv("RPC_URL")
                module = module or os.getenv("TRADE_MODULE_ADDRESS")
            if rpc_url:
                rpc_urls[chain_id] = rpc_url
            if module:
                trade_module_addresses[chain_id] = module

        return cls(
            slippage_percentage=float(os.getenv("SLIPPAGE_PERCENTAGE", defaults.slippage_percentage)),
            fee_percentage=float(os.getenv("FEE_PERCENTAGE", defaults.fee_percentage)),
            gas_buffer_percentage=int(os.getenv("GAS_BUFFER_PERCENTAGE", defaults.gas_buffer_percentage)),
            gas_speed=os.getenv("GAS_SPEED", defaults.gas_speed),
            default_exchange_type=os.getenv("EXCHANGE_TYPE", defaults.default_exchange_type),
            default_chain_id=int(os.getenv("CHAIN_ID", defaults.default_chain_id)),
            call_timeout=(float(timeout) or None) if timeout is not None else defaults.call_timeout,
            zero_ex_api_key=os.getenv("ZERO_EX_API_KEY", defaults.zero_ex_api_key),
            rpc_urls=rpc_urls,
            trade_module_addresses=trade_module_addresses,
        )
