"""
Unit tests for the Set Protocol web3 adapters, using fake contract objects.
"""

import pytest
from web3 import AsyncWeb3

from set_quoter.core.errors import ChainReadFailed, GasEstimationFailed
from set_quoter.defi.set_protocol import SetProtocolReader, TradeModuleExecutor

DPI = "0x1494ca1f11d487c2bbe4543e90080aeba4ba3c2b"
MANAGER = "0x0dea6d942a2d8f594844f973366859616dd5ea50"
MKR = "0x9f8f72aa9304c8b593d555f12ef6589cc3a579a2"
YFI = "0x0bc529c00c6401aef6d220be8c6ea1667f6ad93e"
AAVE = "0x7fc66500c84a76ad7e9c93437bfc5ac33e2ddae9"
MODULE = "0x0000000000000000000000000000000000000000"
TRADE_MODULE = "0x90F765F63E7DC5aE97d6c576BF693FB6AF41C129"


class FakeCall:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.tx = None

    async def call(self):
        if self.error:
            raise self.error
        return self.result

    async def estimate_gas(self, tx):
        self.tx = tx
        if self.error:
            raise self.error
        return self.result


class FakeFunctions:
    def __init__(self, calls):
        self._calls = calls
        self.args = {}

    def __getattr__(self, name):
        def bound(*args):
            self.args[name] = args
            return self._calls[name]
        return bound


class FakeContract:
    def __init__(self, calls):
        self.functions = FakeFunctions(calls)


class FakeEth:
    def __init__(self, contract):
        self._contract = contract
        self.addresses = []

    def contract(self, address, abi):
        self.addresses.append(address)
        return self._contract


class FakeWeb3:
    def __init__(self, contract):
        self.eth = FakeEth(contract)


def make_reader(positions, total_supply=10**24, manager=MANAGER, error=None):
    contract = FakeContract({
        "getPositions": FakeCall(positions, error),
        "totalSupply": FakeCall(total_supply),
        "manager": FakeCall(manager),
    })
    return SetProtocolReader(FakeWeb3(contract))


POSITIONS = [
    (MKR, MODULE, 5 * 10**17, 0, b""),
    (YFI, MODULE, 10**15, 0, b""),
    (AAVE, MODULE, 10**18, 0, b""),
    (MKR, "0x" + "4" * 40, 7, 1, b""),  # external position
]


@pytest.mark.asyncio
async def test_fetch_snapshot_keeps_watched_default_positions():
    snapshot = await make_reader(POSITIONS).fetch_snapshot(DPI, [MKR, YFI])
    assert snapshot.address == DPI
    assert snapshot.manager == MANAGER
    assert snapshot.total_supply == 10**24
    assert [(p.component, p.unit) for p in snapshot.positions] == [
        (MKR, 5 * 10**17),
        (YFI, 10**15),
    ]


@pytest.mark.asyncio
async def test_fetch_snapshot_without_filter():
    snapshot = await make_reader(POSITIONS).fetch_snapshot(DPI)
    assert len(snapshot.positions) == 3


@pytest.mark.asyncio
async def test_fetch_snapshot_rpc_failure():
    reader = make_reader(POSITIONS, error=ConnectionError("node down"))
    with pytest.raises(ChainReadFailed) as exc_info:
        await reader.fetch_snapshot(DPI, [MKR])
    assert exc_info.value.retryable is True


@pytest.mark.asyncio
async def test_fetch_snapshot_zero_supply():
    with pytest.raises(ChainReadFailed, match="invalid state"):
        await make_reader(POSITIONS, total_supply=0).fetch_snapshot(DPI, [MKR])


def make_executor(result=None, error=None):
    trade = FakeCall(result, error)
    contract = FakeContract({"trade": trade})
    return TradeModuleExecutor(FakeWeb3(contract), TRADE_MODULE), contract, trade


@pytest.mark.asyncio
async def test_estimate_gas():
    executor, contract, trade = make_executor(result=187_654)
    gas = await executor.estimate_gas(
        DPI, "ZeroExApiAdapterV3", MKR, 10**14, YFI, 196 * 10**12, "0xd9627aa4", MANAGER
    )
    assert gas == 187_654
    assert trade.tx == {"from": AsyncWeb3.to_checksum_address(MANAGER)}

    args = contract.functions.args["trade"]
    assert args[0] == AsyncWeb3.to_checksum_address(DPI)
    assert args[2] == AsyncWeb3.to_checksum_address(MKR)
    assert args[1] == "ZeroExApiAdapterV3"
    assert args[3] == 10**14
    assert args[5] == 196 * 10**12
    assert args[6] == bytes.fromhex("d9627aa4")


@pytest.mark.asyncio
async def test_estimate_gas_revert():
    executor, _, _ = make_executor(error=ValueError("execution reverted"))
    with pytest.raises(GasEstimationFailed, match="Unable to fetch gas cost estimate"):
        await executor.estimate_gas(
            DPI, "ZeroExApiAdapterV3", MKR, 10**14, YFI, 1, "0x", MANAGER
        )


@pytest.mark.asyncio
@pytest.mark.parametrize("bad", [DPI + "\n", "0x1234", "not an address"])
async def test_fetch_snapshot_malformed_set_address(bad):
    with pytest.raises(ChainReadFailed):
        await make_reader(POSITIONS).fetch_snapshot(bad, [MKR])


@pytest.mark.asyncio
async def test_estimate_gas_malformed_inputs():
    executor, _, trade = make_executor(result=1)
    with pytest.raises(GasEstimationFailed):
        await executor.estimate_gas(DPI + "\n", "ZeroExApiAdapterV3", MKR, 1, YFI, 1, "0x", MANAGER)
    with pytest.raises(GasEstimationFailed):
        await executor.estimate_gas(DPI, "ZeroExApiAdapterV3", MKR, 1, YFI, 1, "0xzz", MANAGER)
    assert trade.tx is None
