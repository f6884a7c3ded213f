"""
Wiring of the concrete collaborators for one network.
"""

from __future__ import annotations

from set_quoter.core.config import QuoteConfig
from set_quoter.defi.coingecko import CoinGeckoTokenDirectory
from set_quoter.defi.gas_oracle import GasStationOracle
from set_quoter.defi.set_protocol import SetProtocolReader, TradeModuleExecutor, connect
from set_quoter.defi.zeroex import ZeroExQuoter
from set_quoter.quote.generator import NetworkClients


def connect_network(chain_id: int, config: QuoteConfig) -> NetworkClients:
    """
    Build CoinGecko, gas station, 0x and Set Protocol clients for a chain.

    Set reads and gas estimates go to the chain's own RPC endpoint and
    TradeModule deployment.
    """
    w3 = connect(config.rpc_url_for(chain_id))
    return NetworkClients(
        tokens=CoinGeckoTokenDirectory(chain_id),
        chain_reader=SetProtocolReader(w3),
        aggregator=ZeroExQuoter(chain_id, api_key=config.zero_ex_api_key),
        gas_oracle=GasStationOracle(chain_id),
        executor=TradeModuleExecutor(w3, config.trade_module_address_for(chain_id)),
    )


async def close_network(clients: NetworkClients) -> None:
    """Close the HTTP clients owned by a NetworkClients bundle."""
    for client in (clients.tokens, clients.aggregator, clients.gas_oracle):
        close = getattr(client, "close", None)
        if close is not None:
            await close()
