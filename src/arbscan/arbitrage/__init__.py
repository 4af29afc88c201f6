from .engine import ArbitrageEngine
from .execution import DexSwapParams, build_arbitrage_params, encode_execute_transactions
from .two_pool import calculate_optimal_arbitrage, calculate_optimal_input
from .types import ArbitrageOpportunity, SwapOperation

__all__ = (
    "ArbitrageEngine",
    "ArbitrageOpportunity",
    "DexSwapParams",
    "SwapOperation",
    "build_arbitrage_params",
    "calculate_optimal_arbitrage",
    "calculate_optimal_input",
    "encode_execute_transactions",
)
