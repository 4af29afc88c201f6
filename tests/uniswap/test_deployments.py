import pytest

from arbscan.checksum_cache import get_checksum_address
from arbscan.exceptions import ArbscanValueError
from arbscan.uniswap import deployments
from arbscan.uniswap.deployments import (
    UNKNOWN_EXCHANGE_DEX_ID,
    EthereumMainnetSushiswapV2,
    UniswapV2ExchangeDeployment,
    get_exchange_for_factory,
    register_exchange,
)

CUSTOM_FACTORY = get_checksum_address("0x" + "ab" * 20)


@pytest.fixture(autouse=True)
def _isolate_deployments(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(deployments, "FACTORY_DEPLOYMENTS", dict(deployments.FACTORY_DEPLOYMENTS))


def test_known_factory():
    assert (
        get_exchange_for_factory(EthereumMainnetSushiswapV2.factory.lower())
        == EthereumMainnetSushiswapV2
    )


def test_unknown_factory():
    exchange = get_exchange_for_factory(CUSTOM_FACTORY)
    assert exchange.dex_id == UNKNOWN_EXCHANGE_DEX_ID
    assert exchange.factory == CUSTOM_FACTORY


def test_register_exchange():
    exchange = UniswapV2ExchangeDeployment(
        name="Custom DEX",
        chain_id=1,
        factory=CUSTOM_FACTORY,
        dex_id=7,
    )
    register_exchange(exchange)
    assert get_exchange_for_factory(CUSTOM_FACTORY) == exchange

    with pytest.raises(ArbscanValueError):
        register_exchange(exchange)


def test_dex_ids_are_unique_per_chain():
    seen: set[tuple[int, int]] = set()
    for exchange in deployments.FACTORY_DEPLOYMENTS.values():
        key = (exchange.chain_id, exchange.dex_id)
        assert key not in seen
        seen.add(key)
