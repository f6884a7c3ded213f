"""
External collaborators: token directory, gas oracle, DEX aggregator, Set Protocol.
"""
from .coingecko import CoinGeckoTokenDirectory
from .gas_oracle import GasStationOracle
from .network import close_network, connect_network
from .set_protocol import SetProtocolReader, TradeModuleExecutor
from .zeroex import ZeroExQuoter

__all__ = [
    "CoinGeckoTokenDirectory",
    "GasStationOracle",
    "SetProtocolReader",
    "TradeModuleExecutor",
    "ZeroExQuoter",
    "close_network",
    "connect_network",
]
