from .deployments import FACTORY_DEPLOYMENTS, UniswapV2ExchangeDeployment, register_exchange
from .v2_liquidity_pool import LiquidityPool
from .v2_types import UniswapV2PoolState

__all__ = (
    "FACTORY_DEPLOYMENTS",
    "LiquidityPool",
    "UniswapV2ExchangeDeployment",
    "UniswapV2PoolState",
    "register_exchange",
)
