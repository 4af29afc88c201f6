from collections.abc import Iterable, Sequence
from threading import Lock

from eth_typing import ChecksumAddress

from arbscan.arbitrage.two_pool import calculate_optimal_arbitrage
from arbscan.arbitrage.types import ArbitrageOpportunity, SwapOperation
from arbscan.checksum_cache import get_checksum_address
from arbscan.exceptions import FetchingError
from arbscan.exceptions.liquidity_pool import LiquidityPoolError
from arbscan.logging import logger
from arbscan.providers.base import PoolStateProvider
from arbscan.registry.related_pairs import RelatedPairIndex
from arbscan.uniswap.v2_liquidity_pool import LiquidityPool


class ArbitrageEngine:
    """
    Replays a batch of pending swaps against simulated pool state, then scans the pools touched by
    those swaps against their related pools for arbitrage.

    The engine owns the pool helpers it builds, keyed by address. Pools are built on first
    reference and kept for the lifetime of the engine. Only one scan cycle runs at a time.
    """

    def __init__(
        self,
        state_provider: PoolStateProvider,
        related_pairs: RelatedPairIndex,
        *,
        silent: bool = True,
    ) -> None:
        self._state_provider = state_provider
        self._related_pairs = related_pairs
        self._silent = silent
        self._pools: dict[ChecksumAddress, LiquidityPool] = {}
        self._cycle_lock = Lock()

    def __repr__(self) -> str:  # pragma: no cover
        return f"{self.__class__.__name__}(pools={len(self._pools)})"

    @property
    def pools(self) -> dict[ChecksumAddress, LiquidityPool]:
        return self._pools.copy()

    @property
    def related_pairs(self) -> RelatedPairIndex:
        return self._related_pairs

    def get_or_create_pool(self, pool_address: ChecksumAddress | str) -> LiquidityPool:
        """
        Get the pool helper for the address, building it on first reference.
        """

        pool_address = get_checksum_address(pool_address)
        try:
            return self._pools[pool_address]
        except KeyError:
            pool = LiquidityPool(
                address=pool_address,
                state_provider=self._state_provider,
                silent=self._silent,
            )
            self._pools[pool_address] = pool
            return pool

    def _collect_pools(
        self, operations: Iterable[SwapOperation]
    ) -> tuple[list[ChecksumAddress], set[ChecksumAddress]]:
        """
        Gather the target pool of each operation and the pools related to it through its base token.
        Returns the gathered addresses, and the addresses of pools built here, which already hold
        current reserves.
        """

        relevant_pools: dict[ChecksumAddress, None] = {}
        new_pools: set[ChecksumAddress] = set()
        for operation in operations:
            pool_address = get_checksum_address(operation.pool)
            if pool_address not in self._pools:
                new_pools.add(pool_address)
            target_pool = self.get_or_create_pool(pool_address)
            relevant_pools[target_pool.address] = None
            for related_pool in self._related_pairs.get_related_pools(target_pool.base_token):
                relevant_pools[related_pool] = None
        return list(relevant_pools), new_pools

    def _sync_pools(
        self,
        pool_addresses: Iterable[ChecksumAddress],
        new_pools: set[ChecksumAddress],
    ) -> None:
        for pool_address in pool_addresses:
            if pool_address in new_pools:
                continue
            pool = self._pools.get(pool_address)
            if pool is None:
                # Pools fetch their reserves during initialization
                self.get_or_create_pool(pool_address)
            else:
                pool.sync()

    def _reset_pools(self) -> None:
        for pool in self._pools.values():
            pool.reset_simulation()

    def _apply_operation(self, operation: SwapOperation) -> bool:
        """
        Replay a single swap against the simulated state of its target pool. Returns True if the
        swap met its minimum output and was recorded.
        """

        pool = self._pools[get_checksum_address(operation.pool)]
        token_in = get_checksum_address(operation.token_in)
        token_out = get_checksum_address(operation.token_out)

        match (token_in, token_out):
            case (pool.token1.address, pool.token0.address):
                is_buy = True
            case (pool.token0.address, pool.token1.address):
                is_buy = False
            case _:
                logger.info(f"Skipping swap with tokens {token_in} -> {token_out} for {pool}")
                return False

        try:
            amount_out = pool.quote_buy(operation.amount_in) if is_buy else pool.quote_sell(
                operation.amount_in
            )
        except LiquidityPoolError as exc:
            logger.info(f"Skipping swap through {pool}: {exc}")
            return False

        if amount_out < operation.amount_out_min:
            logger.info(
                f"Skipping swap through {pool}: output {amount_out} below minimum "
                f"{operation.amount_out_min}"
            )
            return False

        if is_buy:
            pool.simulate_buy(operation.amount_in)
        else:
            pool.simulate_sell(operation.amount_in)
        return True

    def _scan_pools(self, affected_pools: Iterable[ChecksumAddress]) -> list[ArbitrageOpportunity]:
        opportunities: list[ArbitrageOpportunity] = []
        scanned_pairs: set[frozenset[ChecksumAddress]] = set()

        for affected_pool_address in affected_pools:
            affected_pool = self._pools[affected_pool_address]
            related_pools = self._related_pairs.get_related_pools(affected_pool.base_token)
            if affected_pool.address not in related_pools:
                logger.debug(f"{affected_pool} is not listed under its base token, skipping scan")
                continue

            for related_pool_address in related_pools:
                if related_pool_address == affected_pool.address:
                    continue

                pair = frozenset((affected_pool.address, related_pool_address))
                if pair in scanned_pairs:
                    continue
                scanned_pairs.add(pair)

                opportunity = calculate_optimal_arbitrage(
                    affected_pool,
                    self._pools[related_pool_address],
                )
                if opportunity is not None and opportunity.profit > 0:
                    logger.info(
                        f"Arbitrage: buy {opportunity.buy_amount} at {opportunity.buy_pool}, "
                        f"sell {opportunity.buy_amount_out} at {opportunity.sell_pool}, "
                        f"profit {opportunity.profit}"
                    )
                    opportunities.append(opportunity)

        return opportunities

    def simulate_swaps_and_find_arbitrage(
        self,
        operations: Sequence[SwapOperation],
    ) -> list[ArbitrageOpportunity]:
        """
        Run one scan cycle for the batch of pending swaps:

        1. collect the target pool of each swap and the pools related to it through its base token
        2. sync real reserves for the collected pools, building any pools not seen before
        3. reset the simulated reserves of every known pool to the real reserves
        4. replay the swaps in order, skipping any that fail their minimum output check
        5. price each pool touched by a swap against every other pool listed with it
        6. return the profitable opportunities in the order they were found

        A `StateFetchError` during steps 1-2 aborts the cycle and propagates to the caller. Simulated
        state is reset before the error is raised.
        """

        with self._cycle_lock:
            try:
                relevant_pools, new_pools = self._collect_pools(operations)
                self._sync_pools(relevant_pools, new_pools)
            except FetchingError:
                self._reset_pools()
                raise

            self._reset_pools()

            affected_pools: dict[ChecksumAddress, None] = {}
            for operation in operations:
                if self._apply_operation(operation):
                    affected_pools[get_checksum_address(operation.pool)] = None

            opportunities = self._scan_pools(affected_pools)

        logger.info(
            f"Cycle complete: {len(operations)} swaps, {len(affected_pools)} pools affected, "
            f"{len(opportunities)} opportunities"
        )
        return opportunities
