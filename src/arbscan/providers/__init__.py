from .base import PendingOperationsSource, PoolStateProvider
from .pending_block import PendingBlockMonitor
from .web3_state import Web3PoolStateProvider

__all__ = (
    "PendingBlockMonitor",
    "PendingOperationsSource",
    "PoolStateProvider",
    "Web3PoolStateProvider",
)
