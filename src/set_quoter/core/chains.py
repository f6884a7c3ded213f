"""
Supported networks and per-network constants.
"""

from __future__ import annotations

from dataclasses import dataclass

from set_quoter.core.errors import UnsupportedChain

ETHEREUM_CHAIN_ID = 1
POLYGON_CHAIN_ID = 137


@dataclass(frozen=True)
class ChainInfo:
    chain_id: int
    name: str
    currency: str
    # Wrapped native currency, used to price gas in USD
    native_token_address: str
    coingecko_platform: str
    zero_ex_host: str
    # Significant digits for the USD gas cost (cheap gas needs more)
    gas_cost_significant_digits: int
    # Set Protocol TradeModule deployment
    trade_module_address: str
    default_rpc_url: str


SUPPORTED_CHAINS: dict[int, ChainInfo] = {
    ETHEREUM_CHAIN_ID: ChainInfo(
        chain_id=ETHEREUM_CHAIN_ID,
        name="ethereum",
        currency="ETH",
        native_token_address="0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2",  # WETH
        coingecko_platform="ethereum",
        zero_ex_host="https://api.0x.org",
        gas_cost_significant_digits=2,
        trade_module_address="0x90F765F63E7DC5aE97d6c576BF693FB6AF41C129",
        default_rpc_url="http://127.0.0.1:8545",
    ),
    POLYGON_CHAIN_ID: ChainInfo(
        chain_id=POLYGON_CHAIN_ID,
        name="polygon",
        currency="MATIC",
        native_token_address="0x0d500b1d8e8ef31e21c99d1db9a6444d3adf1270",  # WMATIC
        coingecko_platform="polygon-pos",
        zero_ex_host="https://polygon.api.0x.org",
        gas_cost_significant_digits=7,
        trade_module_address="0x4F70287526ea9Ba7e799D616ea86635CdAf0de4F",
        default_rpc_url="https://polygon-rpc.com",
    ),
}


def get_chain(chain_id: int) -> ChainInfo:
    """
    Look up a supported network.

    Raises:
        UnsupportedChain: for any chain id other than 1 and 137
    """
    try:
        return SUPPORTED_CHAINS[chain_id]
    except (KeyError, TypeError):
        raise UnsupportedChain(f"chainId {chain_id} is not supported", chain_id=chain_id) from None


# Exchange type -> Set Protocol TradeModule adapter name
EXCHANGE_ADAPTERS = {
    "zeroex": "ZeroExApiAdapterV3",
    "uniswap": "UniswapV2ExchangeAdapter",
    "sushiswap": "SushiswapExchangeAdapter",
    "quickswap": "QuickswapExchangeAdapter",
}
UNKNOWN_ADAPTER_NAME = "Unknown"


def exchange_adapter_name(exchange_type: str) -> str:
    return EXCHANGE_ADAPTERS.get((exchange_type or "").lower(), UNKNOWN_ADAPTER_NAME)
