import logging
from collections import Counter
from collections.abc import Callable
from fractions import Fraction

import pytest
from eth_typing import ChecksumAddress

from arbscan.checksum_cache import get_checksum_address
from arbscan.constants import DEFAULT_FEE
from arbscan.exceptions import StateFetchError
from arbscan.logging import logger
from arbscan.types import Erc20TokenInfo, PoolMetadata
from arbscan.uniswap.v2_liquidity_pool import LiquidityPool

UNISWAP_V2_FACTORY_ADDRESS = get_checksum_address("0x5C69bEe701ef814a2B6a3EDD4B1652CB9cc5aA6f")

WETH = Erc20TokenInfo(
    address=get_checksum_address("0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"),
    symbol="WETH",
    decimals=18,
)
DAI = Erc20TokenInfo(
    address=get_checksum_address("0x6B175474E89094C44Da98b954EedeAC495271d0F"),
    symbol="DAI",
    decimals=18,
)


class FakeStateProvider:
    """
    An in-memory pool state provider. Pools are registered with `add_pool`, and reserves can be
    changed between reads by writing to `reserves`.
    """

    def __init__(self) -> None:
        self.metadata: dict[ChecksumAddress, PoolMetadata] = {}
        self.reserves: dict[ChecksumAddress, tuple[int, int]] = {}
        self.failing: set[ChecksumAddress] = set()
        self.reserve_reads: Counter[ChecksumAddress] = Counter()

    def add_pool(
        self,
        address: str,
        reserves: tuple[int, int],
        *,
        token0: Erc20TokenInfo = WETH,
        token1: Erc20TokenInfo = DAI,
        fee: Fraction = DEFAULT_FEE,
        factory: str = UNISWAP_V2_FACTORY_ADDRESS,
    ) -> ChecksumAddress:
        pool_address = get_checksum_address(address)
        self.metadata[pool_address] = PoolMetadata(
            factory=get_checksum_address(factory),
            token0=token0,
            token1=token1,
            fee=fee,
        )
        self.reserves[pool_address] = reserves
        return pool_address

    def get_pool_metadata(self, pool_address: ChecksumAddress) -> PoolMetadata:
        if pool_address in self.failing:
            raise StateFetchError(address=pool_address, reason="provider unavailable")
        try:
            return self.metadata[pool_address]
        except KeyError:
            raise StateFetchError(address=pool_address, reason="unknown pool") from None

    def get_reserves(self, pool_address: ChecksumAddress) -> tuple[int, int]:
        if pool_address in self.failing:
            raise StateFetchError(address=pool_address, reason="provider unavailable")
        self.reserve_reads[pool_address] += 1
        try:
            return self.reserves[pool_address]
        except KeyError:
            raise StateFetchError(address=pool_address, reason="unknown pool") from None


@pytest.fixture(scope="session", autouse=True)
def _set_arbscan_logging():
    """
    Set the logging level to DEBUG for the test run
    """
    logger.setLevel(logging.DEBUG)


@pytest.fixture
def weth() -> Erc20TokenInfo:
    return WETH


@pytest.fixture
def dai() -> Erc20TokenInfo:
    return DAI


@pytest.fixture
def state_provider() -> FakeStateProvider:
    return FakeStateProvider()


@pytest.fixture
def make_pool(state_provider: FakeStateProvider) -> Callable[..., LiquidityPool]:
    """
    Register a pool with the fake provider and build its helper, e.g.:

    ```
    pool = make_pool("0x...", (1000, 3000), fee=Fraction(3, 1000))
    ```
    """

    def _make_pool(address: str, reserves: tuple[int, int], **kwargs) -> LiquidityPool:
        pool_address = state_provider.add_pool(address, reserves, **kwargs)
        return LiquidityPool(address=pool_address, state_provider=state_provider, silent=True)

    return _make_pool
