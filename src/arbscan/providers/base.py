from typing import TYPE_CHECKING, Protocol

from eth_typing import ChecksumAddress

from arbscan.types import PoolMetadata

if TYPE_CHECKING:
    from arbscan.arbitrage.types import SwapOperation


class PoolStateProvider(Protocol):
    """
    Reads pool values from an external source. Implementations raise `StateFetchError` on any
    failure, including responses that cannot be decoded into the expected shape.
    """

    def get_pool_metadata(self, pool_address: ChecksumAddress) -> PoolMetadata:
        """
        Return the static values for a pool. Called once per pool.
        """

    def get_reserves(self, pool_address: ChecksumAddress) -> tuple[int, int]:
        """
        Return the current reserves for a pool, ordered by token position.
        """


class PendingOperationsSource(Protocol):
    def get_pending_operations(self) -> list["SwapOperation"] | None:
        """
        Return the ordered swap operations for the current cycle, or `None` if there are none.
        """
