from arbscan.exceptions.arbitrage import ArbitrageError, DegenerateArbitrage, IncompatiblePools
from arbscan.exceptions.base import ArbscanError, ArbscanTypeError, ArbscanValueError
from arbscan.exceptions.configuration import ConfigurationError
from arbscan.exceptions.fetching import FetchingError, StateFetchError
from arbscan.exceptions.liquidity_pool import (
    InsufficientLiquidity,
    InvalidSwapInputAmount,
    LiquidityPoolError,
    UninitializedPool,
)

from . import (
    arbitrage,
    configuration,
    fetching,
    liquidity_pool,
)

__all__ = (
    "ArbitrageError",
    "ArbscanError",
    "ArbscanTypeError",
    "ArbscanValueError",
    "ConfigurationError",
    "DegenerateArbitrage",
    "FetchingError",
    "IncompatiblePools",
    "InsufficientLiquidity",
    "InvalidSwapInputAmount",
    "LiquidityPoolError",
    "StateFetchError",
    "UninitializedPool",
    "arbitrage",
    "configuration",
    "fetching",
    "liquidity_pool",
)
