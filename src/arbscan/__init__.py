from .checksum_cache import get_checksum_address
from .version import __version__

# isort: split

from . import (
    arbitrage,
    cli,
    config,
    constants,
    exceptions,
    functions,
    providers,
    registry,
    types,
    uniswap,
)
from .arbitrage import (
    ArbitrageEngine,
    ArbitrageOpportunity,
    SwapOperation,
    calculate_optimal_arbitrage,
)
from .logging import logger
from .providers import PendingBlockMonitor, Web3PoolStateProvider
from .registry import RelatedPairIndex
from .types import Erc20TokenInfo, PoolMetadata
from .uniswap import LiquidityPool, UniswapV2PoolState

__all__ = (
    "ArbitrageEngine",
    "ArbitrageOpportunity",
    "Erc20TokenInfo",
    "LiquidityPool",
    "PendingBlockMonitor",
    "PoolMetadata",
    "RelatedPairIndex",
    "SwapOperation",
    "UniswapV2PoolState",
    "Web3PoolStateProvider",
    "__version__",
    "arbitrage",
    "calculate_optimal_arbitrage",
    "cli",
    "config",
    "constants",
    "exceptions",
    "functions",
    "get_checksum_address",
    "logger",
    "providers",
    "registry",
    "types",
    "uniswap",
)
