from dataclasses import dataclass

import eth_typing
from eth_typing import ChecksumAddress

from arbscan.checksum_cache import get_checksum_address
from arbscan.exceptions import ArbscanValueError
from arbscan.types import ChainId

UNKNOWN_EXCHANGE_DEX_ID = 0


@dataclass(slots=True, frozen=True)
class UniswapV2ExchangeDeployment:
    name: str
    chain_id: ChainId
    factory: ChecksumAddress
    dex_id: int


def register_exchange(exchange: UniswapV2ExchangeDeployment) -> None:
    if exchange.factory in FACTORY_DEPLOYMENTS:
        raise ArbscanValueError(message="Exchange is already registered.")

    FACTORY_DEPLOYMENTS[exchange.factory] = exchange


def get_exchange_for_factory(factory: ChecksumAddress | str) -> UniswapV2ExchangeDeployment:
    """
    Look up the exchange deployed by the given factory. Unknown factories are reported as a generic
    deployment with dex ID 0.
    """

    factory = get_checksum_address(factory)
    try:
        return FACTORY_DEPLOYMENTS[factory]
    except KeyError:
        return UniswapV2ExchangeDeployment(
            name="Unknown DEX",
            chain_id=0,
            factory=factory,
            dex_id=UNKNOWN_EXCHANGE_DEX_ID,
        )


# Mainnet DEX --------------- START
EthereumMainnetUniswapV2 = UniswapV2ExchangeDeployment(
    name="Ethereum Mainnet Uniswap V2",
    chain_id=eth_typing.ChainId.ETH,
    factory=get_checksum_address("0x5C69bEe701ef814a2B6a3EDD4B1652CB9cc5aA6f"),
    dex_id=1,
)
EthereumMainnetSushiswapV2 = UniswapV2ExchangeDeployment(
    name="Ethereum Mainnet Sushiswap V2",
    chain_id=eth_typing.ChainId.ETH,
    factory=get_checksum_address("0xC0AEe478e3658e2610c5F7A4A2E1777cE9e4f2Ac"),
    dex_id=2,
)
EthereumMainnetPancakeswapV2 = UniswapV2ExchangeDeployment(
    name="Ethereum Mainnet Pancakeswap V2",
    chain_id=eth_typing.ChainId.ETH,
    factory=get_checksum_address("0x1097053Fd2ea711dad45caCcc45EfF7548fCB362"),
    dex_id=3,
)
# Mainnet DEX --------------- END


# Base DEX --------------- START
BaseUniswapV2 = UniswapV2ExchangeDeployment(
    name="Base Uniswap V2",
    chain_id=8453,
    factory=get_checksum_address("0x8909Dc15e40173Ff4699343b6eB8132c65e18eC6"),
    dex_id=1,
)
BasePancakeswapV2 = UniswapV2ExchangeDeployment(
    name="Base Pancakeswap V2",
    chain_id=8453,
    factory=get_checksum_address("0x02a84c1b3BBD7401a5f7fa98a384EBC70bB5749E"),
    dex_id=3,
)
# Base DEX --------------- END


FACTORY_DEPLOYMENTS: dict[ChecksumAddress, UniswapV2ExchangeDeployment] = {
    exchange.factory: exchange
    for exchange in (
        EthereumMainnetUniswapV2,
        EthereumMainnetSushiswapV2,
        EthereumMainnetPancakeswapV2,
        BaseUniswapV2,
        BasePancakeswapV2,
    )
}
